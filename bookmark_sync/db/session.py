"""Database session management for the local bookmark store.

Owns the SQLite connection and schema creation. There is no retry layer here:
storage errors go straight to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import peewee

from bookmark_sync.db.models import ALL_MODELS, database_proxy
from bookmark_sync.domain.exceptions import StorageError


@dataclass
class DatabaseSessionManager:
    """Peewee-backed database session manager.

    Attributes:
        path: Path to the SQLite database file, or ":memory:" for in-memory
    """

    path: str
    _logger: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))
    _database: peewee.SqliteDatabase = field(init=False)
    _migrated: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        if self.path != ":memory:":
            try:
                Path(self.path).parent.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                msg = f"Cannot create database directory for {self.path}: {exc}"
                raise StorageError(msg, {"path": self._mask_path(self.path)}) from exc

        self._database = peewee.SqliteDatabase(
            self.path,
            pragmas={
                "journal_mode": "wal",
                "synchronous": "normal",
                "foreign_keys": 1,
            },
        )
        database_proxy.initialize(self._database)

    @property
    def database(self) -> peewee.SqliteDatabase:
        """Access the underlying Peewee database instance."""
        return self._database

    def connection_context(self) -> Any:
        """Return a connection context manager."""
        return self._database.connection_context()

    def migrate(self) -> None:
        """Create tables and indexes if absent. Safe to call repeatedly."""
        try:
            with self._database.connection_context(), self._database.bind_ctx(ALL_MODELS):
                self._database.create_tables(ALL_MODELS, safe=True)
        except peewee.PeeweeException as exc:
            msg = f"Schema creation failed: {exc}"
            raise StorageError(msg, {"path": self._mask_path(self.path)}) from exc
        self._migrated = True
        self._logger.info("db_migrated", extra={"path": self._mask_path(self.path)})

    def ensure_schema(self) -> None:
        """Run ``migrate`` once per manager."""
        if not self._migrated:
            self.migrate()

    def close(self) -> None:
        if not self._database.is_closed():
            self._database.close()

    @staticmethod
    def _mask_path(path: str) -> str:
        if path == ":memory:":
            return path
        return Path(path).name
