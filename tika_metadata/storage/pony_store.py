"""Record store backed by pony ORM."""

from typing import Any, Optional

from pony.orm import Database, LongStr, PrimaryKey, Required, db_session
from pony.orm import Optional as OptionalAttr

from tika_metadata.core.config import DatabaseConfig
from tika_metadata.core.enums import FieldKind
from tika_metadata.core.exceptions import ConfigurationError
from tika_metadata.core.logging import LoggerManager
from tika_metadata.metadata.schema import FieldSpec, SchemaRegistry
from tika_metadata.metadata.schema import registry as default_registry
from tika_metadata.storage.base import RecordStore

AUDIT_FIELDS = ("timecreated", "timemodified")


def _entity_name(table: str) -> str:
    return "".join(part.capitalize() for part in table.split("_"))


def _attribute(spec: FieldSpec):
    if spec.kind == FieldKind.INTEGER:
        return OptionalAttr(int, size=64, nullable=True)
    if spec.kind == FieldKind.TIMESTAMP:
        return OptionalAttr(int, size=64, nullable=True)
    return OptionalAttr(LongStr, nullable=True)


class PonyRecordStore(RecordStore):
    """Stores metadata records in the base and supplementary tables.

    Each store owns its own pony ``Database`` so several stores, e.g. one per
    test, can be bound side by side.
    """

    def __init__(
        self,
        config: Optional[DatabaseConfig] = None,
        schema: Optional[SchemaRegistry] = None,
    ) -> None:
        self.config = config or DatabaseConfig()
        self.schema = schema or default_registry
        self.logger = LoggerManager.get_logger(self.__class__.__name__)

        self.db = Database()
        self.entities: dict[str, Any] = {}
        self._define_entities()

        self.db.bind(**self.config.to_bind_kwargs())
        self.db.generate_mapping(create_tables=self.config.create_tables)
        self.logger.debug(f"Bound {self.config.provider} database with tables {sorted(self.entities)}")

    def _define_entities(self) -> None:
        """Declare one entity per table from the schema registry."""
        base_attrs = {
            "_table_": self.schema.base_table,
            "id": PrimaryKey(int, auto=True),
            "resourcehash": Required(str, unique=True),
        }
        for spec in self.schema.base_fields:
            base_attrs[spec.name] = _attribute(spec)
        for name in AUDIT_FIELDS:
            base_attrs[name] = OptionalAttr(int, size=64, nullable=True)

        self._define_entity(self.schema.base_table, base_attrs)

        for variant in self.schema.variants:
            if not variant.has_supplementary_data:
                continue

            attrs = {
                "_table_": variant.supplementary_table,
                "id": PrimaryKey(int, auto=True),
                "resourcehash": Required(str, unique=True),
            }
            for spec in variant.supplementary_fields:
                attrs[spec.name] = _attribute(spec)

            self._define_entity(variant.supplementary_table, attrs)

    def _define_entity(self, table: str, attrs: dict[str, Any]) -> None:
        self.entities[table] = type(_entity_name(table), (self.db.Entity,), attrs)

    def _entity(self, table: str):
        try:
            return self.entities[table]
        except KeyError:
            raise ConfigurationError(f"Unknown metadata table: {table}")

    def _columns(self, entity, record: dict[str, Any]) -> dict[str, Any]:
        """Drop keys which are not columns of the entity, and the primary key."""
        columns = {attr.name for attr in entity._attrs_}
        return {key: value for key, value in record.items() if key in columns and key != "id"}

    def insert(self, table: str, record: dict[str, Any]) -> int:
        entity = self._entity(table)
        with db_session:
            row = entity(**self._columns(entity, record))
            row.flush()
            self.logger.debug(f"Inserted row {row.id} into {table}")
            return row.id

    def update(self, table: str, record: dict[str, Any]) -> bool:
        entity = self._entity(table)
        with db_session:
            row = entity.get(id=record.get("id"))
            if row is None:
                return False
            row.set(**self._columns(entity, record))
            self.logger.debug(f"Updated row {row.id} in {table}")
            return True

    def delete(self, table: str, conditions: dict[str, Any]) -> bool:
        entity = self._entity(table)
        with db_session:
            row = entity.get(**conditions)
            if row is None:
                return False
            row.delete()
            self.logger.debug(f"Deleted row matching {conditions} from {table}")
            return True

    def get_one(self, table: str, conditions: dict[str, Any]) -> Optional[dict[str, Any]]:
        entity = self._entity(table)
        with db_session:
            row = entity.get(**conditions)
            if row is None:
                return None
            return row.to_dict(with_lazy=True)

    def transaction(self):
        return db_session
