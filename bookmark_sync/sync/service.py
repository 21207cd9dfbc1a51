"""Sync orchestrator: ingest exports locally, mirror tagged groups remotely.

The local store and the remote client never see each other; everything flows
through ``BookmarkSyncService``. Work is strictly sequential: one ingest, then
one tag at a time, one record at a time.

Deduplication against the remote service is tag-level. If linkding already
reports any bookmark for a tag, the whole tag is skipped, including local
bookmarks added after the last mirror. Running several tag syncs concurrently
turns the check-then-create sequence into a race; callers that need that must
serialize per tag themselves.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from bookmark_sync.core.logging_utils import generate_correlation_id
from bookmark_sync.domain.exceptions import RemoteServiceError, StorageError
from bookmark_sync.importer.converter import convert_with_report
from bookmark_sync.infrastructure.persistence.sqlite.repositories.bookmark_repository import (
    DEFAULT_PROGRESS_EVERY,
)
from bookmark_sync.sync.errors import record_error
from bookmark_sync.sync.mapping import build_remote_bookmark
from bookmark_sync.sync.models import IngestResult, TagSyncResult, TagSyncStatus

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from bookmark_sync.domain.bookmark import CanonicalBookmark
    from bookmark_sync.importer.models import RawRecord
    from bookmark_sync.sync.protocols import BookmarkStore, MirrorClient, MirrorLedger

logger = logging.getLogger(__name__)


def parse_tag_list(value: str) -> list[str]:
    """Split a comma-separated tag list, trimming blanks and dropping empty entries."""
    return [tag.strip() for tag in value.split(",") if tag.strip()]


class BookmarkSyncService:
    """Drives convert -> upsert and the per-tag existence-check-before-create protocol."""

    def __init__(
        self,
        store: BookmarkStore,
        client: MirrorClient | None = None,
        *,
        ledger: MirrorLedger | None = None,
        propagate_shared: bool = False,
        progress_every: int = DEFAULT_PROGRESS_EVERY,
    ) -> None:
        self._store = store
        self._client = client
        self._ledger = ledger
        self._propagate_shared = propagate_shared
        self._progress_every = progress_every

    def _require_client(self) -> MirrorClient:
        if self._client is None:
            raise RuntimeError("Remote client not configured for sync service")
        return self._client

    def ingest(self, raw_records: Sequence[RawRecord]) -> IngestResult:
        """Convert ``raw_records`` and upsert the survivors into the local store.

        Records with unparseable timestamps are dropped and counted in
        ``skipped``. Progress is logged every ``progress_every`` records.

        Raises:
            StorageError: If the store fails. Records written before the
                failure stay committed; the count is on the exception.
        """
        correlation_id = generate_correlation_id()
        start_time = time.time()

        report = convert_with_report(raw_records)
        total = len(report.bookmarks)
        logger.info(
            "bookmark_ingest_start",
            extra={
                "correlation_id": correlation_id,
                "received": len(raw_records),
                "converted": total,
                "skipped": report.skipped,
            },
        )

        def _report_progress(done: int, of: int) -> None:
            logger.info(
                "bookmark_upsert_progress",
                extra={
                    "correlation_id": correlation_id,
                    "upserted": done,
                    "total": of,
                    "percent": round(done / of * 100) if of else 100,
                },
            )

        try:
            upserted = self._store.upsert(
                report.bookmarks,
                on_progress=_report_progress,
                progress_every=self._progress_every,
            )
        except StorageError as exc:
            logger.error(
                "bookmark_ingest_failed",
                extra={
                    "correlation_id": correlation_id,
                    "upserted": exc.upserted,
                    "total": total,
                    "error": str(exc),
                },
            )
            raise

        result = IngestResult(
            received=len(raw_records),
            converted=total,
            skipped=report.skipped,
            upserted=upserted,
            skipped_hashes=report.skipped_hashes,
            bookmarks=report.bookmarks,
            duration_seconds=time.time() - start_time,
        )
        logger.info(
            "bookmark_ingest_complete",
            extra={
                "correlation_id": correlation_id,
                "upserted": result.upserted,
                "skipped": result.skipped,
                "duration": result.duration_seconds,
            },
        )
        return result

    def sync_tag(self, tag: str) -> TagSyncResult:
        """Mirror the local bookmarks matching ``tag`` unless the remote already has the tag.

        1. Ask the remote how many bookmarks carry ``tag``. If that fails, stop:
           the tag is reported ``FAILED`` and nothing is created.
        2. If the count is above zero, the tag is ``SKIPPED_PRESENT``.
        3. Otherwise create one remote bookmark per local match, oldest first.
           A failed creation is recorded and the next record is still tried.

        Raises:
            StorageError: If reading the local store fails.
        """
        client = self._require_client()
        correlation_id = generate_correlation_id()
        start_time = time.time()
        result = TagSyncResult(tag=tag)

        try:
            remote_count = client.count_by_tag(tag)
        except RemoteServiceError as exc:
            result.status = TagSyncStatus.FAILED
            record_error(result, f"Existence check failed for tag {tag!r}: {exc}")
            logger.error(
                "tag_sync_existence_check_failed",
                extra={"correlation_id": correlation_id, "tag": tag, "error": str(exc)},
            )
            result.duration_seconds = time.time() - start_time
            return result

        result.remote_count = remote_count
        if remote_count > 0:
            result.status = TagSyncStatus.SKIPPED_PRESENT
            logger.info(
                "tag_sync_skipped_present",
                extra={"correlation_id": correlation_id, "tag": tag, "remote_count": remote_count},
            )
            result.duration_seconds = time.time() - start_time
            return result

        bookmarks = self._store.query_by_tag_substring(tag)
        result.local_matches = len(bookmarks)
        logger.info(
            "tag_sync_start",
            extra={"correlation_id": correlation_id, "tag": tag, "local_matches": len(bookmarks)},
        )

        for bookmark in bookmarks:
            self._mirror_one(client, bookmark, tag, result, correlation_id=correlation_id)

        result.status = TagSyncStatus.MIRRORED
        result.duration_seconds = time.time() - start_time
        logger.info(
            "tag_sync_complete",
            extra={
                "correlation_id": correlation_id,
                "tag": tag,
                "created": result.created,
                "failed": result.failed,
                "duration": result.duration_seconds,
            },
        )
        return result

    def _mirror_one(
        self,
        client: MirrorClient,
        bookmark: CanonicalBookmark,
        tag: str,
        result: TagSyncResult,
        *,
        correlation_id: str,
    ) -> None:
        remote = build_remote_bookmark(bookmark, tag, propagate_shared=self._propagate_shared)
        try:
            remote_id = client.create_bookmark(remote)
        except RemoteServiceError as exc:
            result.failed += 1
            record_error(result, f"Failed to create bookmark {bookmark.hash}: {exc}")
            logger.warning(
                "tag_sync_create_failed",
                extra={
                    "correlation_id": correlation_id,
                    "tag": tag,
                    "hash": bookmark.hash,
                    "url": bookmark.href[:200],
                    "error": str(exc),
                },
            )
            return

        result.created += 1
        result.created_ids.append(remote_id)
        logger.debug(
            "tag_sync_bookmark_created",
            extra={"correlation_id": correlation_id, "hash": bookmark.hash, "remote_id": remote_id},
        )

        if self._ledger is None:
            return
        try:
            self._ledger.record_mirror(bookmark.hash, remote_id, tag)
        except StorageError as exc:
            # The remote bookmark exists; only the provenance entry is missing.
            record_error(result, f"Failed to record mirror of {bookmark.hash}: {exc}")
            logger.exception(
                "tag_sync_ledger_write_failed",
                extra={"correlation_id": correlation_id, "hash": bookmark.hash},
            )

    def sync_tags(self, tags: Iterable[str]) -> list[TagSyncResult]:
        """Run ``sync_tag`` for each tag in order, one at a time."""
        return [self.sync_tag(tag) for tag in tags]
