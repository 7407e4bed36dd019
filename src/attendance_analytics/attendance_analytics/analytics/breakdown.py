from __future__ import annotations

from collections import defaultdict

from ..core.constants import RISK_BG_COLORS, RISK_LABELS, STATUS_STYLES
from ..core.enums import AttendanceStatus, BreakdownType
from ..records.repository import AttendanceRecordSource
from .filters import AnalyticsFilter
from .model import StatusBreakdown, percentage
from .risk import RiskClassifier


class AttendanceBreakdown:
    """Share of events per status, or share of actors per risk tier."""

    def __init__(self, source: AttendanceRecordSource):
        self._source = source

    def by_status(self, flt: AnalyticsFilter) -> list[StatusBreakdown]:
        counts: dict[AttendanceStatus, int] = defaultdict(int)
        actors: dict[AttendanceStatus, set[int]] = defaultdict(set)
        events = self._source.find_events(flt)
        for event in events:
            counts[event.status] += 1
            actors[event.status].add(event.actor_id)

        rows = []
        for status in AttendanceStatus:
            label, color, bg_color = STATUS_STYLES[status.value]
            rows.append(
                StatusBreakdown(
                    status=status,
                    label=label,
                    count=counts[status],
                    unique_actors=len(actors[status]),
                    percentage=percentage(counts[status], len(events)),
                    color=color,
                    bg_color=bg_color,
                )
            )
        return rows

    def by_risk_level(self, flt: AnalyticsFilter) -> list[dict]:
        buckets = RiskClassifier(self._source).classify_cohort(flt).buckets()
        return [
            {**b.to_dict(), "label": RISK_LABELS[b.level.value], "bgColor": RISK_BG_COLORS[b.level.value]}
            for b in buckets
        ]

    def compute(self, flt: AnalyticsFilter, breakdown_type: BreakdownType) -> list[dict]:
        if breakdown_type == BreakdownType.RISK_LEVEL:
            return self.by_risk_level(flt)
        return [row.to_dict() for row in self.by_status(flt)]
