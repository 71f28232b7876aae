"""Metadata normalization: raw parsing, schema registry and records."""

from tika_metadata.metadata.raw import clean_metadata, flatten_value, resolve_alias
from tika_metadata.metadata.record import MetadataRecord
from tika_metadata.metadata.schema import SchemaRegistry, registry

__all__ = [
    "MetadataRecord",
    "SchemaRegistry",
    "clean_metadata",
    "flatten_value",
    "registry",
    "resolve_alias",
]
