from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Optional

from ..core.constants import RISK_COLORS, RISK_LOW_MIN_RATE, RISK_MEDIUM_MIN_RATE, RISK_NONE_MIN_RATE
from ..core.enums import RiskLevel
from ..records.repository import AttendanceRecordSource
from .filters import AnalyticsFilter
from .model import RiskBucket, StatusTally, percentage


def classify(present: int, total: int) -> RiskLevel:
    """Risk tier for one entity.

    No recorded events means no data, which is tier ``none`` rather than ``high``.
    """
    if total <= 0:
        return RiskLevel.NONE

    # Cross-multiplied so boundary rates (e.g. 17/20) compare exactly.
    scaled = present * 100
    if scaled >= RISK_NONE_MIN_RATE * total:
        return RiskLevel.NONE
    if scaled >= RISK_LOW_MIN_RATE * total:
        return RiskLevel.LOW
    if scaled >= RISK_MEDIUM_MIN_RATE * total:
        return RiskLevel.MEDIUM
    return RiskLevel.HIGH


@dataclass(frozen=True)
class RiskClassification:
    tiers: dict[int, RiskLevel]

    def count(self, level: RiskLevel) -> int:
        return sum(1 for tier in self.tiers.values() if tier == level)

    def buckets(self, requested: Optional[RiskLevel] = None) -> list[RiskBucket]:
        """Per-tier counts and shares.

        A requested tier narrows the cohort first, so it reports 100% and the
        other tiers report zero (drill-down).
        """
        counts = {level: self.count(level) for level in RiskLevel}
        if requested is not None:
            counts = {level: (n if level == requested else 0) for level, n in counts.items()}

        cohort = sum(counts.values())
        return [
            RiskBucket(
                level=level,
                count=counts[level],
                percentage=percentage(counts[level], cohort),
                color=RISK_COLORS[level.value],
            )
            for level in RiskLevel
        ]


class RiskClassifier:
    def __init__(self, source: AttendanceRecordSource):
        self._source = source

    def classify_cohort(self, flt: AnalyticsFilter) -> RiskClassification:
        scope = flt.for_risk()
        tallies: dict[int, StatusTally] = defaultdict(StatusTally)

        for actor_id in self._source.list_actor_ids(scope.actor_type, scope.department_id):
            tallies.setdefault(actor_id, StatusTally())
        for event in self._source.find_events(scope):
            tallies[event.actor_id].add(event.status)

        return RiskClassification(tiers={actor_id: classify(t.present, t.total) for actor_id, t in tallies.items()})

    def compute(self, flt: AnalyticsFilter) -> list[RiskBucket]:
        return self.classify_cohort(flt).buckets(flt.risk_level)
