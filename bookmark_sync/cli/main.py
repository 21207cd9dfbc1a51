"""Command-line entry point: ingest a Pinboard export and mirror tags to linkding.

Usage:
    bookmark-sync --upsert [--import-file bookmarks.json]
    bookmark-sync --query reading,golang
    bookmark-sync --upsert --query reading --verbose

When both ``--upsert`` and ``--query`` are given, the ingest finishes before the
first tag is synced.
"""

from __future__ import annotations

import argparse
import contextlib
import logging
import sys
from typing import TYPE_CHECKING, Any

from bookmark_sync.adapters.linkding import LinkdingClient
from bookmark_sync.config import load_config
from bookmark_sync.core.logging_utils import setup_logging
from bookmark_sync.db.session import DatabaseSessionManager
from bookmark_sync.domain.exceptions import ConfigurationError, ImportFileError, StorageError
from bookmark_sync.importer import load_import_file
from bookmark_sync.infrastructure.persistence.sqlite.repositories import (
    SqliteBookmarkRepository,
    SqliteMirrorLedgerRepository,
)
from bookmark_sync.sync import BookmarkSyncService, parse_tag_list

if TYPE_CHECKING:
    from collections.abc import Sequence

    from bookmark_sync.config import AppConfig
    from bookmark_sync.domain.bookmark import CanonicalBookmark
    from bookmark_sync.sync import IngestResult, TagSyncResult

logger = logging.getLogger(__name__)

__all__ = ["build_parser", "main"]

_SEPARATOR = "-" * 45


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bookmark-sync",
        description="Ingest a Pinboard JSON export and mirror tagged bookmarks to linkding",
    )
    parser.add_argument(
        "--upsert",
        action="store_true",
        help="Load the import file and upsert its bookmarks into the local store",
    )
    parser.add_argument(
        "--query",
        default="",
        help="Comma-separated tags to mirror to linkding",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Debug logging, and print converted bookmarks after an ingest",
    )
    parser.add_argument("--import-file", default=None, help="Import file (default: IMPORT_PATH)")
    parser.add_argument("--db-path", default=None, help="SQLite database (default: DB_PATH)")
    parser.add_argument("--log-json", action="store_true", help="Emit JSON log records")
    return parser


def _print_bookmark(bookmark: CanonicalBookmark) -> None:
    print(f"Href: {bookmark.href}")
    print(f"Description: {bookmark.description}")
    print(f"Extended: {bookmark.extended}")
    print(f"Meta: {bookmark.meta}")
    print(f"Hash: {bookmark.hash}")
    print(f"Time: {bookmark.time.isoformat()}")
    print(f"Shared: {bookmark.shared}")
    print(f"ToRead: {bookmark.toread}")
    print(f"Tags: {bookmark.tags}")
    print(_SEPARATOR)


def _print_ingest_summary(result: IngestResult, *, verbose: bool) -> None:
    if verbose:
        for bookmark in result.bookmarks:
            _print_bookmark(bookmark)
    print(
        f"Total bookmarks: {result.converted} converted, {result.upserted} upserted, "
        f"{result.skipped} skipped (bad timestamp) in {result.duration_seconds:.1f}s"
    )


def _print_sync_summary(results: list[TagSyncResult]) -> None:
    print("\n=== linkding Sync Summary ===")
    for result in results:
        if result.remote_count is None:
            print(f"#{result.tag}: {result.status.value}")
        else:
            print(
                f"#{result.tag}: {result.status.value} (remote {result.remote_count}, "
                f"local {result.local_matches}, created {result.created}, "
                f"failed {result.failed})"
            )
        for err in result.errors[:10]:
            print(f"  - {err}")


def run(args: argparse.Namespace, cfg: AppConfig) -> int:
    """Execute the requested operations. Returns the process exit code."""
    tags = parse_tag_list(args.query)
    db: DatabaseSessionManager | None = None
    try:
        db = DatabaseSessionManager(cfg.runtime.db_path)
        db.migrate()
        store = SqliteBookmarkRepository(db)
        ledger = SqliteMirrorLedgerRepository(db)

        with contextlib.ExitStack() as stack:
            client = None
            if tags:
                client = stack.enter_context(
                    LinkdingClient(
                        cfg.linkding.base_url,
                        cfg.linkding.api_key,
                        timeout=cfg.linkding.timeout_sec,
                    )
                )
            service = BookmarkSyncService(
                store,
                client,
                ledger=ledger,
                propagate_shared=cfg.linkding.propagate_shared,
            )

            if args.upsert:
                import_path = args.import_file or cfg.runtime.import_path
                ingest_result = service.ingest(load_import_file(import_path))
                _print_ingest_summary(ingest_result, verbose=args.verbose)

            if tags:
                logger.info("tag_sync_requested", extra={"tags": tags})
                results = service.sync_tags(tags)
                _print_sync_summary(results)
                if not all(result.ok for result in results):
                    return 1
        return 0
    except (ImportFileError, StorageError) as exc:
        logger.error(
            "bookmark_sync_failed",
            extra={"error": str(exc), "error_type": type(exc).__name__, "details": exc.details},
        )
        print(f"\nERROR: {exc}", file=sys.stderr)
        return 1
    finally:
        if db is not None:
            db.close()


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.upsert and not parse_tag_list(args.query):
        parser.error("nothing to do: pass --upsert and/or --query TAG[,TAG...]")

    overrides: dict[str, Any] = {}
    if args.db_path:
        overrides["DB_PATH"] = args.db_path
    if args.import_file:
        overrides["IMPORT_PATH"] = args.import_file

    try:
        cfg = load_config(require_remote=bool(parse_tag_list(args.query)), overrides=overrides)
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    setup_logging(
        "DEBUG" if args.verbose else cfg.runtime.log_level,
        json_output=args.log_json or cfg.runtime.log_json,
        log_file=cfg.runtime.log_file,
    )
    return run(args, cfg)


if __name__ == "__main__":
    sys.exit(main())
