"""Core components: configuration, logging, enums, exceptions and utilities."""

from tika_metadata.core.config import ExtractionConfig
from tika_metadata.core.enums import ExtractionOption, FileType, ResourceType, ServiceType
from tika_metadata.core.exceptions import (
    AlreadyExistsError,
    ConfigurationError,
    ExtractionError,
    NoIdError,
    NotFoundError,
    TikaMetadataError,
    UnsupportedResourceError,
)
from tika_metadata.core.logging import LoggerManager

__all__ = [
    "AlreadyExistsError",
    "ConfigurationError",
    "ExtractionConfig",
    "ExtractionError",
    "ExtractionOption",
    "FileType",
    "LoggerManager",
    "NoIdError",
    "NotFoundError",
    "ResourceType",
    "ServiceType",
    "TikaMetadataError",
    "UnsupportedResourceError",
]
