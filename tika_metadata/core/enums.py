"""Core enums for tika-metadata."""

from enum import Enum


class FileType(Enum):
    """Semantic file type categories derived from a mimetype."""
    DOCUMENT = "document"
    PDF = "pdf"
    PRESENTATION = "presentation"
    SPREADSHEET = "spreadsheet"
    IMAGE = "image"
    AUDIO = "audio"
    VIDEO = "video"
    ARCHIVE = "archive"
    OTHER = "other"


class ServiceType(Enum):
    """How Tika is invoked."""
    LOCAL = "local"
    SERVER = "server"


class ResourceType(Enum):
    """Kinds of resource metadata can be extracted for."""
    FILE = "file"
    URL = "url"


class ExtractionOption(Enum):
    """Tika extraction options, valued as tika-app CLI flags."""
    TEXT_CONTENT = "--text"
    JSON_METADATA = "--json"
    DETECT_TYPE = "--detect"


class FieldKind(Enum):
    """Storage kind of a metadata field."""
    TEXT = "text"
    INTEGER = "integer"
    TIMESTAMP = "timestamp"


class ExtractionErrorKind(Enum):
    """Sub-kinds of extraction failure."""
    RESOURCE_NOT_FOUND = "resource-not-found"
    UNSUPPORTED_OPTION = "unsupported-option"
    INVALID_OPTIONS = "invalid-options"
    INVALID_SERVICE_TYPE = "invalid-service-type"
    NOT_READY = "not-ready"
    CONNECTION_ERROR = "connection-error"
    SERVER_HTTP_ERROR = "server-http-error"


class LogLevel(Enum):
    """Logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"
