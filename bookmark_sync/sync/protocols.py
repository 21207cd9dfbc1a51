"""Protocol definitions (ports) for the sync orchestrator.

The orchestrator is the only thing that talks to both the local store and the
remote service; these protocols keep it independent of SQLite and httpx.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from bookmark_sync.adapters.linkding.models import RemoteBookmark
    from bookmark_sync.domain.bookmark import CanonicalBookmark


class BookmarkStore(Protocol):
    def upsert(
        self,
        bookmarks: Sequence[CanonicalBookmark],
        *,
        on_progress: Callable[[int, int], None] | None = None,
        progress_every: int = ...,
    ) -> int: ...

    def query_by_tag_substring(self, fragment: str) -> list[CanonicalBookmark]: ...


class MirrorClient(Protocol):
    def count_by_tag(self, tag: str) -> int: ...

    def create_bookmark(self, bookmark: RemoteBookmark) -> int: ...


class MirrorLedger(Protocol):
    def record_mirror(self, content_hash: str, remote_id: int, tag: str) -> None: ...
