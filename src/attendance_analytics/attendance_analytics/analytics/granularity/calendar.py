from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta

from ...common.datetime_utils import weekday_index
from ...core.constants import DAY_NAMES, MONTH_LABELS
from ...core.enums import Granularity
from .base import BucketGranularity, Slot


class HourOfDay(BucketGranularity):
    """24 fixed slots, 0-23."""

    kind = Granularity.HOUR

    def slot_for(self, instant: datetime) -> Slot:
        return Slot(index=instant.hour, label=f"{instant.hour:02d}:00")

    def skeleton(self) -> list[Slot]:
        return [Slot(index=h, label=f"{h:02d}:00") for h in range(24)]


class DayOfWeek(BucketGranularity):
    """7 fixed slots, Sunday=0 ... Saturday=6."""

    kind = Granularity.DAY_OF_WEEK

    def slot_for(self, instant: datetime) -> Slot:
        idx = weekday_index(instant)
        return Slot(index=idx, label=DAY_NAMES[idx])

    def skeleton(self) -> list[Slot]:
        return [Slot(index=i, label=name) for i, name in enumerate(DAY_NAMES)]


@dataclass(frozen=True)
class DayOfMonth(BucketGranularity):
    """One slot per calendar day, indexed from ``anchor``."""

    anchor: date
    kind = Granularity.DAY_OF_MONTH

    def slot_for(self, instant: datetime) -> Slot:
        day = instant.date()
        return Slot(index=(day - self.anchor).days, label=day.isoformat())


@dataclass(frozen=True)
class WeekOfQuarter(BucketGranularity):
    """One slot per 7-day window counted from ``anchor``."""

    anchor: datetime
    kind = Granularity.WEEK_OF_QUARTER

    def slot_for(self, instant: datetime) -> Slot:
        idx = (instant - self.anchor).days // 7
        return Slot(index=idx, label=f"Week {idx + 1}")


class MonthOfYear(BucketGranularity):
    """12 fixed month slots, 0=Jan."""

    kind = Granularity.MONTH

    def slot_for(self, instant: datetime) -> Slot:
        idx = instant.month - 1
        return Slot(index=idx, label=MONTH_LABELS[idx])

    def skeleton(self) -> list[Slot]:
        return [Slot(index=i, label=label) for i, label in enumerate(MONTH_LABELS)]


class CalendarWeek(BucketGranularity):
    """Monday-start weeks, labelled by the Monday's date."""

    kind = Granularity.CALENDAR_WEEK

    def slot_for(self, instant: datetime) -> Slot:
        monday = instant.date() - timedelta(days=instant.weekday())
        return Slot(index=monday.toordinal(), label=monday.isoformat())


class CalendarMonth(BucketGranularity):
    kind = Granularity.CALENDAR_MONTH

    def slot_for(self, instant: datetime) -> Slot:
        return Slot(index=instant.year * 12 + instant.month - 1, label=f"{instant.year:04d}-{instant.month:02d}")


class CalendarYear(BucketGranularity):
    kind = Granularity.CALENDAR_YEAR

    def slot_for(self, instant: datetime) -> Slot:
        return Slot(index=instant.year, label=str(instant.year))
