from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...common.datetime_utils import start_of_day
from ...core.enums import Granularity, TimeRange, TrendType
from .base import BucketGranularity
from .calendar import (
    CalendarMonth,
    CalendarWeek,
    CalendarYear,
    DayOfMonth,
    DayOfWeek,
    HourOfDay,
    MonthOfYear,
    WeekOfQuarter,
)

_BY_TIME_RANGE = {
    TimeRange.TODAY: Granularity.HOUR,
    TimeRange.WEEK: Granularity.DAY_OF_WEEK,
    TimeRange.MONTH: Granularity.DAY_OF_MONTH,
    TimeRange.QUARTER: Granularity.WEEK_OF_QUARTER,
    TimeRange.YEAR: Granularity.MONTH,
}

_BY_TREND = {
    TrendType.WEEKLY: Granularity.CALENDAR_WEEK,
    TrendType.MONTHLY: Granularity.CALENDAR_MONTH,
    TrendType.YEARLY: Granularity.CALENDAR_YEAR,
    TrendType.TIME_OF_DAY: Granularity.HOUR,
    TrendType.DAY_OF_WEEK: Granularity.DAY_OF_WEEK,
}

_UNANCHORED = {
    Granularity.HOUR: HourOfDay,
    Granularity.DAY_OF_WEEK: DayOfWeek,
    Granularity.MONTH: MonthOfYear,
    Granularity.CALENDAR_WEEK: CalendarWeek,
    Granularity.CALENDAR_MONTH: CalendarMonth,
    Granularity.CALENDAR_YEAR: CalendarYear,
}


@dataclass
class GranularityFactory:
    """Factory Pattern: choose the bucket strategy for a granularity."""

    def granularity_for(self, time_range: TimeRange) -> Granularity:
        return _BY_TIME_RANGE[time_range]

    def granularity_for_trend(self, trend_type: TrendType) -> Granularity:
        return _BY_TREND[trend_type]

    def create(self, granularity: Granularity, *, anchor: Optional[datetime] = None) -> BucketGranularity:
        """``anchor`` is the first instant of the series; open-ended axes need it."""

        if granularity in _UNANCHORED:
            return _UNANCHORED[granularity]()

        if anchor is None:
            raise ValueError(f"{granularity.value} buckets need an anchor instant")
        if granularity == Granularity.DAY_OF_MONTH:
            return DayOfMonth(anchor=anchor.date())
        if granularity == Granularity.WEEK_OF_QUARTER:
            return WeekOfQuarter(anchor=start_of_day(anchor))
        raise ValueError(f"Unsupported granularity: {granularity!r}")
