"""Record Converter: validate and normalize raw export records.

Conversion is best effort. A record whose ``time`` is not RFC 3339 is logged and
dropped; it is never given a substitute timestamp, and the rest of the batch
is unaffected. All other fields pass through unchanged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from bookmark_sync.core.time_utils import parse_rfc3339
from bookmark_sync.domain.bookmark import CanonicalBookmark

if TYPE_CHECKING:
    from collections.abc import Iterable

    from bookmark_sync.importer.models import RawRecord

logger = logging.getLogger(__name__)


@dataclass
class ConversionReport:
    """Converted bookmarks in input order plus the hashes of dropped records."""

    bookmarks: list[CanonicalBookmark] = field(default_factory=list)
    skipped_hashes: list[str] = field(default_factory=list)

    @property
    def skipped(self) -> int:
        return len(self.skipped_hashes)


def convert_record(record: RawRecord) -> CanonicalBookmark:
    """Convert one record.

    Raises:
        ValueError: If the record's ``time`` is not an RFC 3339 timestamp.
    """
    return CanonicalBookmark(
        href=record.href,
        description=record.description,
        extended=record.extended,
        meta=record.meta,
        hash=record.hash,
        time=parse_rfc3339(record.time),
        shared=record.shared,
        toread=record.toread,
        tags=record.tags,
    )


def convert_with_report(records: Iterable[RawRecord]) -> ConversionReport:
    report = ConversionReport()
    for record in records:
        try:
            report.bookmarks.append(convert_record(record))
        except ValueError as exc:
            report.skipped_hashes.append(record.hash)
            logger.warning(
                "bookmark_time_parse_failed",
                extra={"hash": record.hash, "time": record.time, "error": str(exc)},
            )
    return report


def convert(records: Iterable[RawRecord]) -> list[CanonicalBookmark]:
    """Convert raw records, skipping those with unparseable timestamps."""
    return convert_with_report(records).bookmarks
