"""Peewee ORM models for the local bookmark store."""

from __future__ import annotations

import datetime as _dt
from typing import Any

import peewee

from bookmark_sync.core.time_utils import ensure_utc, utc_now

# A proxy that will be initialised with the concrete database instance at runtime.
database_proxy: peewee.Database = peewee.DatabaseProxy()


class UTCDateTimeField(peewee.DateTimeField):
    """DATETIME column stored as fixed-width UTC text.

    Fixed width, with the year always four digits, keeps ``ORDER BY`` on the
    raw text chronological. Values are read back as UTC-aware datetimes.
    """

    def db_value(self, value: Any) -> Any:
        if isinstance(value, _dt.datetime):
            value = ensure_utc(value)
            # strftime does not zero-pad years below 1000 on every platform
            return f"{value.year:04d}-{value:%m-%d %H:%M:%S.%f}"
        return super().db_value(value)

    def python_value(self, value: Any) -> Any:
        parsed = super().python_value(value)
        if isinstance(parsed, _dt.datetime):
            return ensure_utc(parsed)
        return parsed


class BaseModel(peewee.Model):
    """Base Peewee model bound to the lazily initialised database proxy."""

    class Meta:
        database = database_proxy
        legacy_table_names = False


class Bookmark(BaseModel):
    href = peewee.TextField(default="")
    description = peewee.TextField(default="")
    extended = peewee.TextField(default="")
    meta = peewee.TextField(default="")
    hash = peewee.TextField(unique=True)
    time = UTCDateTimeField()
    shared = peewee.TextField(default="")
    toread = peewee.TextField(default="")
    tags = peewee.TextField(default="")
    created_at = UTCDateTimeField(default=utc_now)
    updated_at = UTCDateTimeField(default=utc_now)

    class Meta:
        table_name = "bookmarks"
        indexes = ((("time",), False),)


class MirroredBookmark(BaseModel):
    """Provenance ledger: which local hash became which remote bookmark."""

    hash = peewee.TextField(unique=True)
    remote_id = peewee.IntegerField()
    tag = peewee.TextField()
    mirrored_at = UTCDateTimeField(default=utc_now)

    class Meta:
        table_name = "mirrored_bookmarks"
        indexes = ((("tag",), False),)


ALL_MODELS: tuple[type[BaseModel], ...] = (
    Bookmark,
    MirroredBookmark,
)


def model_to_dict(model: BaseModel | None) -> dict[str, Any] | None:
    """Convert a Peewee model instance to a plain dictionary."""
    if model is None:
        return None
    return {name: getattr(model, name) for name in model._meta.sorted_field_names}
