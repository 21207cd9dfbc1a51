"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime
from typing import Any

import pytest

from bookmark_sync.db.session import DatabaseSessionManager
from bookmark_sync.domain.bookmark import CanonicalBookmark
from bookmark_sync.importer.models import RawRecord
from bookmark_sync.infrastructure.persistence.sqlite.repositories import (
    SqliteBookmarkRepository,
    SqliteMirrorLedgerRepository,
)

_ENV_VARS = (
    "LINKDING_API_KEY",
    "LINKDING_URL",
    "LINKDING_TIMEOUT_SEC",
    "LINKDING_PROPAGATE_SHARED",
    "DB_PATH",
    "IMPORT_PATH",
    "LOG_LEVEL",
    "LOG_JSON",
    "LOG_FILE",
)


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep developer ``.env`` files and shell variables out of the tests."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def session_manager(tmp_path) -> Iterator[DatabaseSessionManager]:
    manager = DatabaseSessionManager(str(tmp_path / "data" / "bookmarks.db"))
    manager.migrate()
    yield manager
    manager.close()


@pytest.fixture
def bookmark_repo(session_manager: DatabaseSessionManager) -> SqliteBookmarkRepository:
    return SqliteBookmarkRepository(session_manager)


@pytest.fixture
def ledger_repo(session_manager: DatabaseSessionManager) -> SqliteMirrorLedgerRepository:
    return SqliteMirrorLedgerRepository(session_manager)


def make_bookmark(**overrides: Any) -> CanonicalBookmark:
    values: dict[str, Any] = {
        "href": "https://example.com/article",
        "description": "An article",
        "extended": "Some notes",
        "meta": "m1",
        "hash": "a1",
        "time": datetime(2023, 1, 1, tzinfo=UTC),
        "shared": "no",
        "toread": "yes",
        "tags": "reading",
    }
    values.update(overrides)
    return CanonicalBookmark(**values)


def make_raw(**overrides: Any) -> RawRecord:
    values: dict[str, Any] = {
        "href": "https://example.com/article",
        "description": "An article",
        "extended": "Some notes",
        "meta": "m1",
        "hash": "a1",
        "time": "2023-01-01T00:00:00Z",
        "shared": "no",
        "toread": "yes",
        "tags": "reading",
    }
    values.update(overrides)
    return RawRecord.model_validate(values)
