import logging
import sqlite3
from typing import Any

import peewee

from bookmark_sync.db.session import DatabaseSessionManager
from bookmark_sync.domain.exceptions import StorageError

logger = logging.getLogger(__name__)


class SqliteBaseRepository:
    """Base repository for SQLite implementations."""

    def __init__(self, session_manager: DatabaseSessionManager) -> None:
        self._session = session_manager

    def _execute(
        self,
        operation: Any,
        *args: Any,
        operation_name: str = "repository_operation",
        **kwargs: Any,
    ) -> Any:
        """Run ``operation`` inside a connection, surfacing failures as ``StorageError``.

        The schema is created on first use. Nothing is retried.
        """
        self._session.ensure_schema()
        try:
            with self._session.connection_context():
                return operation(*args, **kwargs)
        except StorageError:
            raise
        except (peewee.PeeweeException, sqlite3.Error) as exc:
            logger.exception(
                "db_operation_failed",
                extra={
                    "operation": operation_name,
                    "error": str(exc),
                    "error_type": type(exc).__name__,
                },
            )
            msg = f"{operation_name} failed: {exc}"
            raise StorageError(msg, {"operation": operation_name}) from exc
