from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Optional

from ..core.enums import Granularity
from ..records.model import AttendanceEvent
from ..records.repository import AttendanceRecordSource
from .filters import AnalyticsFilter
from .granularity.base import BucketGranularity, Slot
from .granularity.factory import GranularityFactory
from .model import StatusTally, TimeBucket


def aggregate(
    events: Iterable[AttendanceEvent],
    granularity: BucketGranularity,
    *,
    dense: bool = False,
) -> list[TimeBucket]:
    """Group events into buckets ordered by slot index.

    Empty slots are dropped unless ``dense`` asks for the granularity's fixed skeleton.
    """
    tallies: dict[int, StatusTally] = defaultdict(StatusTally)
    labels: dict[int, str] = {}

    if dense:
        for slot in granularity.skeleton():
            labels[slot.index] = slot.label
            tallies.setdefault(slot.index, StatusTally())

    for event in events:
        slot: Slot = granularity.slot_for(event.instant)
        labels.setdefault(slot.index, slot.label)
        tallies[slot.index].add(event.status)

    buckets = []
    for index in sorted(tallies):
        tally = tallies[index]
        if tally.total == 0 and not dense:
            continue
        buckets.append(
            TimeBucket(
                label=labels[index],
                index=index,
                attendance_rate=tally.attendance_rate,
                total_count=tally.total,
                present_count=tally.present,
                late_count=tally.late,
                absent_count=tally.absent,
            )
        )
    return buckets


class BucketAggregator:
    def __init__(self, source: AttendanceRecordSource, *, factory: Optional[GranularityFactory] = None):
        self._source = source
        self._factory = factory or GranularityFactory()

    def series(self, flt: AnalyticsFilter, granularity: Granularity, *, dense: bool = False) -> list[TimeBucket]:
        events = self._source.find_events(flt)
        if not events:
            return []

        anchor = flt.interval.start or min(e.instant for e in events)
        strategy = self._factory.create(granularity, anchor=anchor)
        return aggregate(events, strategy, dense=dense)
