"""Abstract base class for record storage backends."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Any, Optional


class RecordStore(ABC):
    """Table oriented store for flat records.

    Every table has an auto-increment ``id`` and a unique ``resourcehash``.
    """

    @abstractmethod
    def insert(self, table: str, record: dict[str, Any]) -> int:
        """Insert a record.

        Args:
            table: Table name.
            record: Field values, ``id`` is ignored.

        Returns:
            The id assigned to the new row.
        """
        pass

    @abstractmethod
    def update(self, table: str, record: dict[str, Any]) -> bool:
        """Update the row identified by ``record["id"]``.

        Returns:
            True if the row exists and was updated.
        """
        pass

    @abstractmethod
    def delete(self, table: str, conditions: dict[str, Any]) -> bool:
        """Delete the row matching all conditions.

        Returns:
            True if a row was deleted.
        """
        pass

    @abstractmethod
    def get_one(self, table: str, conditions: dict[str, Any]) -> Optional[dict[str, Any]]:
        """Get the row matching all conditions, or None."""
        pass

    def get_field(self, table: str, field: str, conditions: dict[str, Any]) -> Optional[Any]:
        """Get one field of the row matching all conditions, or None."""
        row = self.get_one(table, conditions)
        if row is None:
            return None
        return row.get(field)

    def record_exists(self, table: str, conditions: dict[str, Any]) -> bool:
        return self.get_one(table, conditions) is not None

    @abstractmethod
    def transaction(self) -> AbstractContextManager:
        """Context manager scoping writes into a single transaction.

        An exception raised inside the scope rolls back every write made in it.
        """
        pass
