"""Metadata records normalized from raw Tika output."""

import time
from typing import Any, Mapping, Optional

from tika_metadata.core.exceptions import (
    AlreadyExistsError,
    ConfigurationError,
    NoIdError,
    NotFoundError,
)
from tika_metadata.core.logging import LoggerManager
from tika_metadata.filetypes import BASE_VARIANT, get_raw_metadata_mimetype, metadata_record_variant
from tika_metadata.metadata.raw import coerce_value, resolve_alias
from tika_metadata.metadata.schema import FieldSpec, SchemaRegistry
from tika_metadata.metadata.schema import registry as default_registry
from tika_metadata.storage.base import RecordStore

logger = LoggerManager.get_logger("metadata.record")


class MetadataRecord:
    """Metadata of one resource, in the variant matching its file type.

    Base fields are stored in the base table. Variants with supplementary
    fields store those in their own table, joined on ``resourcehash``. Field
    values are available as attributes, e.g. ``record.title``.

    Attributes:
        id: Id of the base row, 0 while the record is not persisted.
        resourcehash: Stable identifier of the described resource.
        timecreated: Unix time the record was first stored.
        timemodified: Unix time the record was last stored.
    """

    def __init__(
        self,
        variant: str = BASE_VARIANT,
        resourcehash: Optional[str] = None,
        rawdata: Optional[Mapping[str, Any]] = None,
        store: Optional[RecordStore] = None,
        schema: Optional[SchemaRegistry] = None,
    ) -> None:
        self.schema = schema or default_registry
        self.variant = self.schema.get(variant)
        self.store = store
        self.id = 0
        self.resourcehash = resourcehash
        self.timecreated: Optional[int] = None
        self.timemodified: Optional[int] = None
        self._values: dict[str, Any] = {spec.name: None for spec in self.field_specs}

        if rawdata:
            self.populate(rawdata)

    @classmethod
    def from_raw(
        cls,
        rawdata: Mapping[str, Any],
        resourcehash: str,
        store: Optional[RecordStore] = None,
        variant: Optional[str] = None,
        schema: Optional[SchemaRegistry] = None,
    ) -> "MetadataRecord":
        """Create an unpersisted record from raw Tika metadata.

        Args:
            rawdata: Flattened raw metadata.
            resourcehash: Identifier of the described resource.
            store: Store used by ``create``, ``update`` and ``delete``.
            variant: Variant tag, derived from the raw ``Content-Type`` if None.
            schema: Schema registry, the module registry if None.
        """
        if variant is None:
            variant = metadata_record_variant(get_raw_metadata_mimetype(rawdata))
        return cls(variant, resourcehash, rawdata, store, schema)

    @classmethod
    def from_id(
        cls,
        id: int,
        store: RecordStore,
        variant: Optional[str] = None,
        schema: Optional[SchemaRegistry] = None,
    ) -> "MetadataRecord":
        """Load a stored record by the id of its base row.

        Raises:
            NotFoundError: If the base row, or the supplementary row the variant
                requires, does not exist.
        """
        return cls._load(store, {"id": id}, variant, schema)

    @classmethod
    def from_resourcehash(
        cls,
        resourcehash: str,
        store: RecordStore,
        variant: Optional[str] = None,
        schema: Optional[SchemaRegistry] = None,
    ) -> "MetadataRecord":
        """Load a stored record by resourcehash.

        Raises:
            NotFoundError: If the base row, or the supplementary row the variant
                requires, does not exist.
        """
        return cls._load(store, {"resourcehash": resourcehash}, variant, schema)

    @classmethod
    def _load(
        cls,
        store: RecordStore,
        conditions: dict[str, Any],
        variant: Optional[str],
        schema: Optional[SchemaRegistry],
    ) -> "MetadataRecord":
        schema = schema or default_registry

        base = store.get_one(schema.base_table, conditions)
        if base is None:
            raise NotFoundError(f"No metadata record matching {conditions}")

        if variant is None:
            variant = metadata_record_variant(base.get("format") or "")

        record = cls(variant, base["resourcehash"], store=store, schema=schema)
        record.id = base["id"]
        record.timecreated = base.get("timecreated")
        record.timemodified = base.get("timemodified")
        for spec in schema.base_fields:
            record._values[spec.name] = base.get(spec.name)

        if record.has_supplementary_data():
            supplementary = store.get_one(
                record.variant.supplementary_table, {"resourcehash": record.resourcehash}
            )
            if supplementary is None:
                raise NotFoundError(
                    f"No {variant} metadata for resourcehash {record.resourcehash}"
                )
            for spec in record.variant.supplementary_fields:
                record._values[spec.name] = supplementary.get(spec.name)

        return record

    @property
    def variant_tag(self) -> str:
        return self.variant.tag

    @property
    def field_specs(self) -> tuple[FieldSpec, ...]:
        return self.schema.field_specs(self.variant.tag)

    def has_supplementary_data(self) -> bool:
        return self.variant.has_supplementary_data

    def populate(self, rawdata: Mapping[str, Any]) -> None:
        """Set every key mapped field from raw metadata.

        Fields without a matching raw key are set to None.
        """
        for spec in self.field_specs:
            value = resolve_alias(rawdata, list(spec.aliases))
            self._values[spec.name] = coerce_value(value, spec.kind)

    def __getattr__(self, name: str) -> Any:
        values = self.__dict__.get("_values", {})
        if name in values:
            return values[name]
        raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")

    def __setattr__(self, name: str, value: Any) -> None:
        values = self.__dict__.get("_values")
        if values is not None and name in values:
            values[name] = value
        else:
            super().__setattr__(name, value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MetadataRecord):
            return NotImplemented
        return self.variant_tag == other.variant_tag and self.get_record() == other.get_record()

    def __repr__(self) -> str:
        return f"MetadataRecord(variant={self.variant_tag!r}, id={self.id}, resourcehash={self.resourcehash!r})"

    def get_record(self) -> dict[str, Any]:
        """Flat record of base and supplementary fields keyed on the base id."""
        record = self.get_base_record()
        record.update(self._supplementary_values())
        return record

    def get_base_record(self) -> dict[str, Any]:
        record = {"id": self.id, "resourcehash": self.resourcehash}
        for spec in self.schema.base_fields:
            record[spec.name] = self._values[spec.name]
        record["timecreated"] = self.timecreated
        record["timemodified"] = self.timemodified
        return record

    def get_supplementary_record(self) -> dict[str, Any]:
        record = {"resourcehash": self.resourcehash}
        record.update(self._supplementary_values())
        return record

    def _supplementary_values(self) -> dict[str, Any]:
        return {spec.name: self._values[spec.name] for spec in self.variant.supplementary_fields}

    def _require_store(self) -> RecordStore:
        if self.store is None:
            raise ConfigurationError("Metadata record has no store")
        return self.store

    def create(self) -> "MetadataRecord":
        """Store the record as new base and supplementary rows.

        Both rows are written in one transaction. A stray supplementary row
        left for the same resourcehash is updated rather than duplicated, and
        stray rows of other variants are removed.

        Returns:
            The record, with its id set.

        Raises:
            AlreadyExistsError: If the record, or its resourcehash, is already stored.
            NoIdError: If the record has no resourcehash.
        """
        store = self._require_store()
        base_table = self.schema.base_table

        if not self.resourcehash:
            raise NoIdError("Cannot create a metadata record without a resourcehash")
        if self.id and store.record_exists(base_table, {"id": self.id}):
            raise AlreadyExistsError(f"Metadata record {self.id} already exists")
        if store.record_exists(base_table, {"resourcehash": self.resourcehash}):
            raise AlreadyExistsError(
                f"Metadata record for resourcehash {self.resourcehash} already exists"
            )

        now = int(time.time())
        base_record = self.get_base_record()
        base_record["timecreated"] = self.timecreated or now
        base_record["timemodified"] = self.timemodified or now

        with store.transaction():
            id = store.insert(base_table, base_record)
            self._delete_other_variants(store)
            if self.has_supplementary_data():
                self._upsert_supplementary(store)

        self.id = id
        self.timecreated = base_record["timecreated"]
        self.timemodified = base_record["timemodified"]
        logger.info(f"Created {self.variant_tag} metadata record {self.id} for {self.resourcehash}")
        return self

    def update(self) -> bool:
        """Store the current field values over the existing rows.

        A record re-extracted for a known resourcehash keeps the stored
        creation time, and supplementary rows of any other variant are
        removed in the same transaction.

        Raises:
            NoIdError: If the record has no id.
            NotFoundError: If the base row no longer exists.
        """
        store = self._require_store()
        if not self.id:
            raise NoIdError("Cannot update a metadata record without an id")

        base_table = self.schema.base_table
        base_record = self.get_base_record()
        base_record["timemodified"] = int(time.time())
        if self.timecreated is None:
            del base_record["timecreated"]

        with store.transaction():
            if not store.update(base_table, base_record):
                raise NotFoundError(f"Metadata record {self.id} does not exist")
            self._delete_other_variants(store)
            if self.has_supplementary_data():
                self._upsert_supplementary(store)
            timecreated = store.get_field(base_table, "timecreated", {"id": self.id})

        self.timecreated = timecreated
        self.timemodified = base_record["timemodified"]
        logger.info(f"Updated {self.variant_tag} metadata record {self.id}")
        return True

    def delete(self) -> bool:
        """Delete the base and supplementary rows.

        Raises:
            NoIdError: If the record has no id, or its supplementary row cannot
                be resolved.
            NotFoundError: If the base row does not exist.
        """
        store = self._require_store()
        if not self.id:
            raise NoIdError("Cannot delete a metadata record without an id")

        with store.transaction():
            if not store.delete(self.schema.base_table, {"id": self.id}):
                raise NotFoundError(f"Metadata record {self.id} does not exist")

            if self.has_supplementary_data():
                table = self.variant.supplementary_table
                supplementary_id = store.get_field(table, "id", {"resourcehash": self.resourcehash})
                if not supplementary_id:
                    raise NoIdError(f"No {self.variant_tag} metadata id for {self.resourcehash}")
                store.delete(table, {"id": supplementary_id})

        logger.info(f"Deleted {self.variant_tag} metadata record {self.id}")
        self.id = 0
        return True

    def _delete_other_variants(self, store: RecordStore) -> None:
        for variant in self.schema.variants:
            if variant.tag == self.variant_tag or not variant.has_supplementary_data:
                continue
            if store.delete(variant.supplementary_table, {"resourcehash": self.resourcehash}):
                logger.debug(f"Removed {variant.tag} metadata left for {self.resourcehash}")

    def _upsert_supplementary(self, store: RecordStore) -> None:
        table = self.variant.supplementary_table
        record = self.get_supplementary_record()

        existing_id = store.get_field(table, "id", {"resourcehash": self.resourcehash})
        if existing_id:
            record["id"] = existing_id
            store.update(table, record)
        else:
            store.insert(table, record)
