from __future__ import annotations

import re
from datetime import date, datetime, time, timezone

_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def now_utc() -> datetime:
    """Current UTC time.

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive values; convert aware values to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_date_only(value: str) -> bool:
    return bool(_DATE_ONLY.match(value.strip()))


def parse_iso_instant(value: str, *, end_of_day: bool = False) -> datetime:
    """Parse an ISO-8601 date or date-time into a UTC instant.

    Raises ValueError for anything unparsable. A date-only value maps to
    midnight, or to the last microsecond of that day when ``end_of_day``.
    """
    text = (value or "").strip()
    if not text:
        raise ValueError("empty date string")

    if is_date_only(text):
        day = date.fromisoformat(text)
        return datetime.combine(day, time.max if end_of_day else time.min, tzinfo=timezone.utc)

    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return as_utc(datetime.fromisoformat(text))


def start_of_day(value: datetime) -> datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def weekday_index(value: datetime) -> int:
    """Day of week with Sunday=0 ... Saturday=6."""
    return (value.weekday() + 1) % 7
