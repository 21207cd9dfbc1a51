"""Ingest and tag-scoped mirroring orchestration."""

from bookmark_sync.sync.mapping import build_remote_bookmark
from bookmark_sync.sync.models import IngestResult, TagSyncResult, TagSyncStatus
from bookmark_sync.sync.service import BookmarkSyncService, parse_tag_list

__all__ = [
    "BookmarkSyncService",
    "IngestResult",
    "TagSyncResult",
    "TagSyncStatus",
    "build_remote_bookmark",
    "parse_tag_list",
]
