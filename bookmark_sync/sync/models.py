"""Result models for ingest and tag sync runs."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from bookmark_sync.domain.bookmark import CanonicalBookmark


class TagSyncStatus(str, Enum):
    PENDING = "pending"
    SKIPPED_PRESENT = "skipped_present"
    MIRRORED = "mirrored"
    FAILED = "failed"


class IngestResult(BaseModel):
    """Outcome of one convert-and-upsert run."""

    received: int = 0
    converted: int = 0
    skipped: int = 0
    upserted: int = 0
    skipped_hashes: list[str] = Field(default_factory=list)
    bookmarks: list[CanonicalBookmark] = Field(default_factory=list, exclude=True, repr=False)
    duration_seconds: float = 0.0


class TagSyncResult(BaseModel):
    """Outcome of mirroring one tag.

    ``FAILED`` means the existence check itself failed and nothing was
    attempted. Per-record creation failures leave the status ``MIRRORED`` and
    are counted in ``failed``.
    """

    tag: str
    status: TagSyncStatus = TagSyncStatus.PENDING
    remote_count: int | None = None
    local_matches: int = 0
    created: int = 0
    failed: int = 0
    created_ids: list[int] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def ok(self) -> bool:
        return self.status is not TagSyncStatus.FAILED and not self.errors
