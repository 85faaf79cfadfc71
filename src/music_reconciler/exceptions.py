"""Custom exceptions for music reconciler."""

from typing import Optional


class MusicReconcilerError(Exception):
    """Base exception for music reconciler errors."""
    pass


class NetworkError(MusicReconcilerError):
    """Raised when a request could not reach the remote catalog."""
    pass


class CatalogError(MusicReconcilerError):
    """Raised when the remote catalog answers with a non-success status."""

    def __init__(self, status: int, body: str, url: Optional[str] = None):
        self.status = status
        self.body = body
        self.url = url
        message = f"Catalog request returned non-success status {status}"
        if url:
            message += f" for {url}"
        if body:
            message += f": {body}"
        super().__init__(message)


class DecodeError(MusicReconcilerError):
    """Raised when wire or row data does not fit the expected shape."""
    pass


class PreconditionError(MusicReconcilerError):
    """Raised when a required field is missing for an operation."""
    pass


class OwnershipError(MusicReconcilerError):
    """Raised when a shared aggregate could not be reclaimed."""
    pass


class ConfigurationError(MusicReconcilerError):
    """Raised when there's an error in configuration."""
    pass


class RecordLookupError(MusicReconcilerError):
    """Raised when a lookup by identifier does not match exactly one row."""

    def __init__(self, table: str, mbid: Optional[str], message: str):
        self.table = table
        self.mbid = mbid
        super().__init__(message)


class NotFoundError(RecordLookupError):
    """Raised when no row matches an identifier."""

    def __init__(self, table: str, mbid: Optional[str]):
        super().__init__(table, mbid, f"No row in {table} with mbid {mbid!r}")


class AmbiguousError(RecordLookupError):
    """Raised when more than one row matches an identifier."""

    def __init__(self, table: str, mbid: Optional[str]):
        super().__init__(table, mbid, f"More than one row in {table} with mbid {mbid!r}")
