"""Error taxonomy for ingestion and mirroring.

Malformed timestamps are not errors: the converter drops those records.
Everything here is surfaced to the caller of the enclosing operation and
never retried internally.
"""

from __future__ import annotations

from typing import Any


class BookmarkSyncError(Exception):
    """Base exception for all bookmark sync errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize the error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(BookmarkSyncError):
    """Raised when required settings are missing or invalid."""


class ImportFileError(BookmarkSyncError):
    """Raised when the import file cannot be read or is not a JSON array of records."""


class StorageError(BookmarkSyncError):
    """Raised when the local store fails.

    ``upserted`` is the number of records committed before the failure; those
    rows stay committed.
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        *,
        upserted: int = 0,
    ) -> None:
        super().__init__(message, details)
        self.upserted = upserted


class RemoteServiceError(BookmarkSyncError):
    """Raised on transport failures, non-2xx responses or undecodable bodies."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        *,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, details)
        self.status_code = status_code
