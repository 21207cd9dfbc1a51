from __future__ import annotations

import re
from datetime import UTC, datetime

# RFC 3339 "date-time": full date, literal T, full time, mandatory offset.
_RFC3339_RE = re.compile(
    r"(?P<date>\d{4}-\d{2}-\d{2})T"
    r"(?P<time>\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>Z|[+-]\d{2}:\d{2})"
)


def utc_now() -> datetime:
    """Return a timezone-aware UTC datetime."""
    return datetime.now(UTC)


def parse_rfc3339(value: str) -> datetime:
    """Parse a strict RFC 3339 timestamp into a UTC-aware datetime.

    Date-only values, missing offsets and space separators are rejected even
    though ``datetime.fromisoformat`` would accept them.

    Raises:
        ValueError: If ``value`` is not an RFC 3339 date-time.
    """
    if not isinstance(value, str):
        msg = f"expected string timestamp, got {type(value).__name__}"
        raise ValueError(msg)
    match = _RFC3339_RE.fullmatch(value)
    if match is None:
        msg = f"not an RFC 3339 timestamp: {value!r}"
        raise ValueError(msg)

    fraction = (match.group("fraction") or "").ljust(6, "0")[:6]
    offset = match.group("offset")
    if offset == "Z":
        offset = "+00:00"
    normalized = f"{match.group('date')}T{match.group('time')}.{fraction}{offset}"
    try:
        return datetime.fromisoformat(normalized).astimezone(UTC)
    except OverflowError as exc:
        # The offset shifts the instant outside years 1..9999
        msg = f"timestamp out of range: {value!r}"
        raise ValueError(msg) from exc


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite returns them naive)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def format_day(value: datetime) -> str:
    """Format a timestamp as ``YYYY-MM-DD`` in UTC, year zero-padded."""
    value = ensure_utc(value)
    return f"{value.year:04d}-{value:%m-%d}"
