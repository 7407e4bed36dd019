from __future__ import annotations

from collections import Counter
from typing import Iterable

from ..core.enums import AttendanceStatus, TimeRange
from ..records.model import AttendanceEvent
from ..records.repository import AttendanceRecordSource
from .filters import AnalyticsFilter
from .granularity.base import BucketGranularity
from .granularity.calendar import DayOfWeek, HourOfDay
from .model import LateBucket, percentage


def distribute_late(events: Iterable[AttendanceEvent], axis: BucketGranularity) -> list[LateBucket]:
    """LATE counts per slot, with every event in the slot as the denominator."""
    totals: Counter[int] = Counter()
    lates: Counter[int] = Counter()
    labels: dict[int, str] = {}

    for event in events:
        slot = axis.slot_for(event.instant)
        labels.setdefault(slot.index, slot.label)
        totals[slot.index] += 1
        if event.status == AttendanceStatus.LATE:
            lates[slot.index] += 1

    return [
        LateBucket(
            label=labels[index],
            index=index,
            late_count=lates[index],
            total_count=totals[index],
            late_rate=percentage(lates[index], totals[index]),
        )
        for index in sorted(lates)
    ]


class LateArrivalAnalyzer:
    def __init__(self, source: AttendanceRecordSource):
        self._source = source

    def compute(self, flt: AnalyticsFilter, time_range: TimeRange) -> list[LateBucket]:
        single_day = time_range == TimeRange.TODAY or flt.interval.is_single_day
        axis = HourOfDay() if single_day else DayOfWeek()
        return distribute_late(self._source.find_events(flt), axis)
