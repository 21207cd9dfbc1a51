"""linkding integration adapter for mirroring tagged bookmarks."""

from bookmark_sync.adapters.linkding.client import LinkdingClient
from bookmark_sync.adapters.linkding.models import LinkdingCreatedBookmark, RemoteBookmark

__all__ = ["LinkdingClient", "LinkdingCreatedBookmark", "RemoteBookmark"]
