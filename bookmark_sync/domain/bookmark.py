"""Canonical bookmark entity as persisted in the local store."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class CanonicalBookmark:
    """A converted export record.

    ``hash`` is the externally supplied content fingerprint and the unique key
    of the local store. ``shared`` and ``toread`` are the export's
    ``"yes"``/``"no"`` strings, passed through untouched. ``tags`` is kept as the
    raw delimited string; it is only interpreted at query time.
    """

    href: str
    description: str
    extended: str
    meta: str
    hash: str
    time: datetime
    shared: str
    toread: str
    tags: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
