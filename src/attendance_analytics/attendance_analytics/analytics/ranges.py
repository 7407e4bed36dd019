from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..common.datetime_utils import as_utc, is_date_only, parse_iso_instant, start_of_day
from ..core.enums import TimeRange
from ..core.logging import get_logger


@dataclass(frozen=True)
class TimeInterval:
    """Inclusive UTC interval; a missing bound means unbounded on that side."""

    start: Optional[datetime] = None
    end: Optional[datetime] = None

    def contains(self, instant: datetime) -> bool:
        if self.start is not None and instant < self.start:
            return False
        if self.end is not None and instant > self.end:
            return False
        return True

    @property
    def is_single_day(self) -> bool:
        return self.start is not None and self.end is not None and self.start.date() == self.end.date()

    def to_dict(self) -> dict:
        return {
            "start": self.start.isoformat() if self.start else None,
            "end": self.end.isoformat() if self.end else None,
        }


def preset_interval(time_range: TimeRange, *, now: datetime) -> TimeInterval:
    """Concrete UTC window for a preset, anchored on ``now``."""
    now = as_utc(now)

    if time_range == TimeRange.TODAY:
        start = start_of_day(now)
    elif time_range == TimeRange.WEEK:
        start = now - timedelta(days=7)
    elif time_range == TimeRange.MONTH:
        start = start_of_day(now.replace(day=1))
    elif time_range == TimeRange.QUARTER:
        first_month = (now.month - 1) // 3 * 3 + 1
        start = start_of_day(now.replace(month=first_month, day=1))
    elif time_range == TimeRange.YEAR:
        start = start_of_day(now.replace(month=1, day=1))
    else:
        raise ValueError(f"Unsupported time range: {time_range!r}")
    return TimeInterval(start=start, end=now)


def _parse_bound(value: Optional[str], *, name: str, end_of_day: bool, logger: logging.Logger) -> Optional[datetime]:
    if value is None or not value.strip():
        return None
    try:
        return parse_iso_instant(value, end_of_day=end_of_day and is_date_only(value))
    except (ValueError, OverflowError):
        # OverflowError: valid ISO text whose UTC instant is outside datetime range
        logger.warning("Ignoring unparsable %s=%r", name, value)
        return None


def explicit_interval(
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    *,
    logger: Optional[logging.Logger] = None,
) -> Optional[TimeInterval]:
    """Interval from explicit bounds, or None unless both parse and are ordered.

    Bad input is dropped with a warning, never raised.
    """
    log = logger or get_logger("analytics.ranges")

    start = _parse_bound(start_date, name="startDate", end_of_day=False, logger=log)
    end = _parse_bound(end_date, name="endDate", end_of_day=True, logger=log)

    if start is None or end is None:
        return None
    if start > end:
        log.warning("Ignoring inverted date range startDate=%r endDate=%r", start_date, end_date)
        return None
    return TimeInterval(start=start, end=end)


def resolve_range(
    time_range: TimeRange,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    *,
    now: datetime,
    logger: Optional[logging.Logger] = None,
) -> TimeInterval:
    """Turn a preset plus optional explicit bounds into a concrete interval.

    Explicit bounds win only when both parse and are ordered; otherwise the
    preset window is used.
    """
    interval = explicit_interval(start_date, end_date, logger=logger)
    if interval is not None:
        return interval
    return preset_interval(time_range, now=now)
