"""Exceptions raised by tika-metadata."""

from typing import Optional

from tika_metadata.core.enums import ExtractionErrorKind


class TikaMetadataError(Exception):
    """Base class for all tika-metadata errors."""


class ConfigurationError(TikaMetadataError):
    """Backend configuration is missing or invalid."""


class UnsupportedResourceError(TikaMetadataError):
    """Resource failed validation and cannot be extracted."""


class NotFoundError(TikaMetadataError):
    """A requested record or row does not exist."""


class AlreadyExistsError(TikaMetadataError):
    """Create was called for a record which is already stored."""


class NoIdError(TikaMetadataError):
    """Update or delete was called without a resolvable identity."""


class ExtractionError(TikaMetadataError):
    """An extraction call failed.

    Attributes:
        kind: The failure category.
        status_code: HTTP status of a failed server response, if any.
        reason: HTTP reason phrase of a failed server response, if any.
        debuginfo: Reason phrase or transport exception message for diagnostics.
    """

    def __init__(
        self,
        kind: ExtractionErrorKind,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        reason: Optional[str] = None,
        debuginfo: Optional[str] = None,
    ) -> None:
        self.kind = kind
        self.status_code = status_code
        self.reason = reason
        self.debuginfo = debuginfo
        super().__init__(message or kind.value)

    def __str__(self) -> str:
        message = super().__str__()
        if self.status_code is not None:
            status = " ".join(str(part) for part in (self.status_code, self.reason) if part)
            message = f"{message} (HTTP {status})"
        if self.debuginfo and self.debuginfo not in message:
            message = f"{message}: {self.debuginfo}"
        return message
