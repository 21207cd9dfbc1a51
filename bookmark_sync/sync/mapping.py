"""Build the remote representation of a local bookmark."""

from __future__ import annotations

from typing import TYPE_CHECKING

from bookmark_sync.adapters.linkding.models import RemoteBookmark
from bookmark_sync.core.time_utils import format_day

if TYPE_CHECKING:
    from bookmark_sync.domain.bookmark import CanonicalBookmark

SHARED_TRUE = "yes"


def build_notes(bookmark: CanonicalBookmark) -> str:
    """Hash first, then the export's notes.

    linkding has no column for the content hash, so it travels in the notes.
    """
    return f"{bookmark.hash}\n\n{bookmark.extended}"


def build_description(bookmark: CanonicalBookmark) -> str:
    return f"[{format_day(bookmark.time)}] {bookmark.description}"


def build_remote_bookmark(
    bookmark: CanonicalBookmark,
    tag: str,
    *,
    propagate_shared: bool = False,
) -> RemoteBookmark:
    """Map a local bookmark to the creation payload for ``tag``.

    The result is always unread, unarchived and carries exactly one tag.
    ``shared`` is false unless ``propagate_shared`` is set, in which case the
    export's ``"yes"`` flag is honoured.
    """
    return RemoteBookmark(
        url=bookmark.href,
        title=bookmark.description,
        description=build_description(bookmark),
        notes=build_notes(bookmark),
        is_archived=False,
        unread=True,
        shared=propagate_shared and bookmark.shared == SHARED_TRUE,
        tag_names=frozenset({tag}),
    )
