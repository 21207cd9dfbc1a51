"""SQLite record of local bookmarks that were created remotely."""

from __future__ import annotations

from typing import Any

from bookmark_sync.core.time_utils import utc_now
from bookmark_sync.db.models import MirroredBookmark, model_to_dict
from bookmark_sync.infrastructure.persistence.sqlite.base import SqliteBaseRepository


class SqliteMirrorLedgerRepository(SqliteBaseRepository):
    """Adapter for MirroredBookmark database operations.

    Provenance only: the tag-level existence check still decides what gets
    created.
    """

    def record_mirror(self, content_hash: str, remote_id: int, tag: str) -> None:
        """Remember that ``content_hash`` was created remotely as ``remote_id``.

        A later mirror of the same hash replaces the earlier entry.
        """

        def _record() -> None:
            (
                MirroredBookmark.insert(
                    hash=content_hash,
                    remote_id=remote_id,
                    tag=tag,
                    mirrored_at=utc_now(),
                )
                .on_conflict(
                    conflict_target=[MirroredBookmark.hash],
                    preserve=[
                        MirroredBookmark.remote_id,
                        MirroredBookmark.tag,
                        MirroredBookmark.mirrored_at,
                    ],
                )
                .execute()
            )

        self._execute(_record, operation_name="record_mirror")

    def get_mirror(self, content_hash: str) -> dict[str, Any] | None:
        def _get() -> dict[str, Any] | None:
            return model_to_dict(
                MirroredBookmark.get_or_none(MirroredBookmark.hash == content_hash)
            )

        return self._execute(_get, operation_name="get_mirror")

    def list_for_tag(self, tag: str) -> list[dict[str, Any]]:
        def _list() -> list[dict[str, Any]]:
            query = (
                MirroredBookmark.select()
                .where(MirroredBookmark.tag == tag)
                .order_by(MirroredBookmark.mirrored_at.asc())
            )
            return [data for row in query if (data := model_to_dict(row)) is not None]

        return self._execute(_list, operation_name="list_mirrors_for_tag")
