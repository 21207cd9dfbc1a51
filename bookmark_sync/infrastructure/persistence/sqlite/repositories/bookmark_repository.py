"""SQLite implementation of the local bookmark store.

Rows are keyed by the export's content ``hash``. The UNIQUE constraint on that
column, not an application lock, is what keeps repeated or concurrent ingests
from creating duplicates.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import peewee
from peewee import fn

from bookmark_sync.core.time_utils import utc_now
from bookmark_sync.db.models import Bookmark
from bookmark_sync.domain.bookmark import CanonicalBookmark
from bookmark_sync.domain.exceptions import StorageError
from bookmark_sync.infrastructure.persistence.sqlite.base import SqliteBaseRepository

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

DEFAULT_PROGRESS_EVERY = 500

# Columns overwritten from the incoming record when the hash already exists
_UPSERT_FIELDS = (
    Bookmark.href,
    Bookmark.description,
    Bookmark.extended,
    Bookmark.meta,
    Bookmark.time,
    Bookmark.shared,
    Bookmark.toread,
    Bookmark.tags,
)


def _to_domain(row: Bookmark) -> CanonicalBookmark:
    return CanonicalBookmark(
        href=row.href,
        description=row.description,
        extended=row.extended,
        meta=row.meta,
        hash=row.hash,
        time=row.time,
        shared=row.shared,
        toread=row.toread,
        tags=row.tags,
    )


class SqliteBookmarkRepository(SqliteBaseRepository):
    """Adapter for Bookmark database operations."""

    def upsert(
        self,
        bookmarks: Sequence[CanonicalBookmark],
        *,
        on_progress: Callable[[int, int], None] | None = None,
        progress_every: int = DEFAULT_PROGRESS_EVERY,
    ) -> int:
        """Insert each bookmark, or overwrite every field of the row with the same hash.

        Each record is one ``INSERT ... ON CONFLICT(hash) DO UPDATE`` statement, so
        readers never see a partially updated row. The batch is not a
        transaction: on failure, records already written stay committed.

        Args:
            bookmarks: Records to write, in order. A later record wins over an
                earlier one with the same hash.
            on_progress: Called with ``(done, total)`` after every
                ``progress_every`` records.
            progress_every: Progress cadence in records.

        Returns:
            Number of records written.

        Raises:
            StorageError: On any storage failure. ``upserted`` holds the number
                of records written before it.
        """
        total = len(bookmarks)

        def _upsert() -> int:
            done = 0
            for bookmark in bookmarks:
                try:
                    self._upsert_one(bookmark)
                except peewee.PeeweeException as exc:
                    msg = f"Upsert failed for bookmark {bookmark.hash!r}: {exc}"
                    raise StorageError(
                        msg, {"hash": bookmark.hash, "total": total}, upserted=done
                    ) from exc
                done += 1
                if on_progress is not None and done % progress_every == 0:
                    on_progress(done, total)
            return done

        return self._execute(_upsert, operation_name="upsert_bookmarks")

    @staticmethod
    def _upsert_one(bookmark: CanonicalBookmark) -> None:
        row: dict[Any, Any] = {
            Bookmark.href: bookmark.href,
            Bookmark.description: bookmark.description,
            Bookmark.extended: bookmark.extended,
            Bookmark.meta: bookmark.meta,
            Bookmark.hash: bookmark.hash,
            Bookmark.time: bookmark.time,
            Bookmark.shared: bookmark.shared,
            Bookmark.toread: bookmark.toread,
            Bookmark.tags: bookmark.tags,
        }
        (
            Bookmark.insert(row)
            .on_conflict(
                conflict_target=[Bookmark.hash],
                preserve=list(_UPSERT_FIELDS),
                update={Bookmark.updated_at: utc_now()},
            )
            .execute()
        )

    def query_by_tag_substring(self, fragment: str) -> list[CanonicalBookmark]:
        """Return bookmarks whose ``tags`` string contains ``fragment``, oldest first.

        This is plain, case-sensitive substring containment on the raw tag
        string, not token matching: ``"go"`` also matches ``"golang"``.
        """

        def _query() -> list[CanonicalBookmark]:
            rows = (
                Bookmark.select()
                .where(fn.instr(Bookmark.tags, fragment) > 0)
                .order_by(Bookmark.time.asc(), Bookmark.id.asc())
            )
            return [_to_domain(row) for row in rows]

        return self._execute(_query, operation_name="query_by_tag_substring")

    def get_by_hash(self, content_hash: str) -> CanonicalBookmark | None:
        def _get() -> CanonicalBookmark | None:
            row = Bookmark.get_or_none(Bookmark.hash == content_hash)
            return _to_domain(row) if row is not None else None

        return self._execute(_get, operation_name="get_bookmark_by_hash")

    def list_all(self) -> list[CanonicalBookmark]:
        def _list() -> list[CanonicalBookmark]:
            rows = Bookmark.select().order_by(Bookmark.time.asc(), Bookmark.id.asc())
            return [_to_domain(row) for row in rows]

        return self._execute(_list, operation_name="list_bookmarks")

    def count(self) -> int:
        return self._execute(lambda: Bookmark.select().count(), operation_name="count_bookmarks")
