"""Pydantic models for the linkding REST API."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003 - Pydantic needs this at runtime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class RemoteBookmark(BaseModel):
    """Body of ``POST /api/bookmarks/``."""

    model_config = ConfigDict(frozen=True)

    url: str
    title: str = ""
    description: str = ""
    notes: str = ""
    is_archived: bool = False
    unread: bool = False
    shared: bool = False
    tag_names: frozenset[str] = Field(default_factory=frozenset)

    @field_serializer("tag_names")
    def _serialize_tag_names(self, value: frozenset[str]) -> list[str]:
        return sorted(value)


class LinkdingCreatedBookmark(BaseModel):
    """Bookmark representation returned by the service."""

    model_config = ConfigDict(extra="ignore")

    id: int
    url: str
    title: str = ""
    description: str = ""
    notes: str = ""
    website_title: str | None = None
    website_description: str | None = None
    is_archived: bool = False
    unread: bool = False
    shared: bool = False
    tag_names: list[str] = Field(default_factory=list)
    date_added: datetime | None = None
    date_modified: datetime | None = None


class LinkdingTagSearch(BaseModel):
    """Paginated response of ``GET /api/bookmarks/?q=...``."""

    model_config = ConfigDict(extra="ignore")

    count: int
    next: str | None = None
    previous: str | None = None
    results: list[dict[str, Any]] = Field(default_factory=list)
