"""Error taxonomy for the record service client.

Every error carries a ``message`` that is safe to show to the user
as-is. Services raise these; the view controller turns them into
notices.
"""

from typing import Any, Optional


class SheetSyncError(Exception):
    """Base class for all user-facing client errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(SheetSyncError):
    """An intent was rejected before reaching the record service."""


class TransportError(SheetSyncError):
    """The record service answered with a non-success response or was unreachable."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        operation: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.operation = operation  # "upload", "fetch" or "delete"


class DecodeError(SheetSyncError):
    """A record's encoded row payload could not be decoded."""

    def __init__(self, message: str, record_id: Any = None) -> None:
        super().__init__(message)
        self.record_id = record_id


class EmptyResult(SheetSyncError):
    """A search matched no rows in the loaded window."""
