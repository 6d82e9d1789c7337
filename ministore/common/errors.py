"""
Error Types

Every failure raised by the package derives from MinistoreError so callers
can catch one base class at the outer surface.
"""


class MinistoreError(Exception):
    """Base class for all package errors."""


class ValidationError(MinistoreError):
    """Required input is missing or malformed. Raised before any remote call."""


class EncodingError(MinistoreError):
    """An image could not be decoded or re-encoded."""


class DocumentParseError(MinistoreError):
    """Document bytes are empty or not a readable paginated document."""


class NetworkError(MinistoreError):
    """Transport-level failure talking to a remote service."""


class UploadError(MinistoreError):
    """The image host answered but reported a failed upload."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class PersistenceError(MinistoreError):
    """A document store read or write failed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class IngestionBusyError(MinistoreError):
    """A batch is already running on this orchestrator."""
