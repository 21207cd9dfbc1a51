"""Error collection helpers for sync results."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from bookmark_sync.sync.models import TagSyncResult


def record_error(result: TagSyncResult, message: str) -> None:
    if message not in result.errors:
        result.errors.append(message)
