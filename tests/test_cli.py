"""End-to-end tests for the command-line entry point."""

from __future__ import annotations

import json

import httpx
import pytest

from bookmark_sync.cli import main as cli
from bookmark_sync.db.session import DatabaseSessionManager
from bookmark_sync.infrastructure.persistence.sqlite.repositories import (
    SqliteBookmarkRepository,
    SqliteMirrorLedgerRepository,
)

_EXPORT = [
    {
        "href": "https://example.com/a",
        "description": "Alpha",
        "extended": "notes a",
        "meta": "m",
        "hash": "a1",
        "time": "2023-01-01T00:00:00Z",
        "shared": "no",
        "toread": "yes",
        "tags": "reading",
    },
    {
        "href": "https://example.com/b",
        "description": "Beta",
        "extended": "",
        "meta": "m",
        "hash": "b2",
        "time": "invalid",
        "shared": "no",
        "toread": "no",
        "tags": "reading",
    },
]


@pytest.fixture(autouse=True)
def _no_logging_setup(monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda *args, **kwargs: None)


@pytest.fixture
def export_file(tmp_path):
    path = tmp_path / "bookmarks.json"
    path.write_text(json.dumps(_EXPORT), encoding="utf-8")
    return path


@pytest.fixture
def remote(monkeypatch):
    """Route the CLI's linkding client through an in-memory linkding."""
    state: dict = {"count": 0, "created": []}

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(200, json={"count": state["count"], "results": []})
        body = json.loads(request.content)
        state["created"].append(body)
        return httpx.Response(201, json={"id": len(state["created"]), **body})

    real_client = cli.LinkdingClient

    def factory(base_url, api_key, timeout=30.0, **kwargs):
        return real_client(
            base_url, api_key, timeout, transport=httpx.MockTransport(handler), **kwargs
        )

    monkeypatch.setattr(cli, "LinkdingClient", factory)
    monkeypatch.setenv("LINKDING_API_KEY", "token")
    monkeypatch.setenv("LINKDING_URL", "http://linkding.test")
    return state


def _stored(db_path):
    manager = DatabaseSessionManager(str(db_path))
    try:
        return SqliteBookmarkRepository(manager).list_all()
    finally:
        manager.close()


def test_no_operation_is_a_usage_error():
    with pytest.raises(SystemExit) as exc_info:
        cli.main([])

    assert exc_info.value.code == 2


def test_upsert_ingests_export(tmp_path, export_file, capsys):
    db_path = tmp_path / "store.db"

    code = cli.main(["--upsert", "--import-file", str(export_file), "--db-path", str(db_path)])

    assert code == 0
    assert [b.hash for b in _stored(db_path)] == ["a1"]
    out = capsys.readouterr().out
    assert "1 upserted" in out
    assert "1 skipped" in out


def test_upsert_verbose_prints_bookmarks(tmp_path, export_file, capsys):
    code = cli.main(
        [
            "--upsert",
            "--verbose",
            "--import-file",
            str(export_file),
            "--db-path",
            str(tmp_path / "store.db"),
        ]
    )

    assert code == 0
    assert "Href: https://example.com/a" in capsys.readouterr().out


def test_upsert_uses_import_path_from_environment(tmp_path, export_file, monkeypatch):
    monkeypatch.setenv("IMPORT_PATH", str(export_file))
    monkeypatch.setenv("DB_PATH", str(tmp_path / "env.db"))

    assert cli.main(["--upsert"]) == 0
    assert len(_stored(tmp_path / "env.db")) == 1


def test_upsert_missing_file_fails(tmp_path, capsys):
    code = cli.main(
        [
            "--upsert",
            "--import-file",
            str(tmp_path / "absent.json"),
            "--db-path",
            str(tmp_path / "store.db"),
        ]
    )

    assert code == 1
    assert "ERROR" in capsys.readouterr().err


def test_upsert_does_not_need_remote_config(tmp_path, export_file):
    code = cli.main(
        ["--upsert", "--import-file", str(export_file), "--db-path", str(tmp_path / "s.db")]
    )

    assert code == 0


def test_unusable_db_path_fails_cleanly(tmp_path, export_file, capsys):
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")

    code = cli.main(
        ["--upsert", "--import-file", str(export_file), "--db-path", str(blocker / "store.db")]
    )

    assert code == 1
    assert "ERROR" in capsys.readouterr().err


def test_query_without_remote_config_fails(tmp_path, capsys):
    code = cli.main(["--query", "reading", "--db-path", str(tmp_path / "store.db")])

    assert code == 1
    assert "LINKDING_API_KEY" in capsys.readouterr().err


def test_upsert_then_query_mirrors_tag(tmp_path, export_file, remote, capsys):
    db_path = tmp_path / "store.db"

    code = cli.main(
        [
            "--upsert",
            "--query",
            "reading",
            "--import-file",
            str(export_file),
            "--db-path",
            str(db_path),
        ]
    )

    assert code == 0
    assert len(remote["created"]) == 1
    created = remote["created"][0]
    assert created["url"] == "https://example.com/a"
    assert created["description"] == "[2023-01-01] Alpha"
    assert created["notes"] == "a1\n\nnotes a"
    assert created["tag_names"] == ["reading"]
    assert "#reading: mirrored" in capsys.readouterr().out

    manager = DatabaseSessionManager(str(db_path))
    try:
        assert SqliteMirrorLedgerRepository(manager).get_mirror("a1")["remote_id"] == 1
    finally:
        manager.close()


def test_query_skips_tag_present_remotely(tmp_path, export_file, remote, capsys):
    remote["count"] = 4

    code = cli.main(
        [
            "--upsert",
            "--query",
            "reading",
            "--import-file",
            str(export_file),
            "--db-path",
            str(tmp_path / "store.db"),
        ]
    )

    assert code == 0
    assert remote["created"] == []
    assert "#reading: skipped_present" in capsys.readouterr().out


def test_query_failure_sets_exit_code(tmp_path, monkeypatch, capsys):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="maintenance")

    real_client = cli.LinkdingClient
    monkeypatch.setattr(
        cli,
        "LinkdingClient",
        lambda base_url, api_key, timeout=30.0, **kw: real_client(
            base_url, api_key, timeout, transport=httpx.MockTransport(handler)
        ),
    )
    monkeypatch.setenv("LINKDING_API_KEY", "token")
    monkeypatch.setenv("LINKDING_URL", "http://linkding.test")

    code = cli.main(["--query", "reading,golang", "--db-path", str(tmp_path / "store.db")])

    assert code == 1
    out = capsys.readouterr().out
    assert "#reading: failed" in out
    assert "#golang: failed" in out
