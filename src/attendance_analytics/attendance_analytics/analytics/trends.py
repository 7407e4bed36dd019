from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Optional

from ..core.enums import TrendType
from ..records.model import AttendanceEvent
from ..records.repository import AttendanceRecordSource
from .filters import AnalyticsFilter
from .granularity.base import BucketGranularity
from .granularity.factory import GranularityFactory
from .model import StatusTally, TrendPoint


def trend_series(events: Iterable[AttendanceEvent], granularity: BucketGranularity) -> list[TrendPoint]:
    """Status counts and distinct actors per period, ordered by slot index.

    Periods without events are left out.
    """
    tallies: dict[int, StatusTally] = defaultdict(StatusTally)
    actors: dict[int, set[int]] = defaultdict(set)
    labels: dict[int, str] = {}

    for event in events:
        slot = granularity.slot_for(event.instant)
        labels.setdefault(slot.index, slot.label)
        tallies[slot.index].add(event.status)
        actors[slot.index].add(event.actor_id)

    return [
        TrendPoint(
            period=labels[index],
            index=index,
            present=tallies[index].present,
            late=tallies[index].late,
            absent=tallies[index].absent,
            excused=tallies[index].excused,
            unique_actors=len(actors[index]),
        )
        for index in sorted(tallies)
    ]


class TrendAnalyzer:
    """Long-range attendance series: calendar weeks, months or years, or a time-of-day / weekday profile."""

    def __init__(self, source: AttendanceRecordSource, *, factory: Optional[GranularityFactory] = None):
        self._source = source
        self._factory = factory or GranularityFactory()

    def compute(self, flt: AnalyticsFilter, trend_type: TrendType) -> list[TrendPoint]:
        strategy = self._factory.create(self._factory.granularity_for_trend(trend_type))
        return trend_series(self._source.find_events(flt), strategy)
