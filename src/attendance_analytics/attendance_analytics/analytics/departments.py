from __future__ import annotations

from collections import defaultdict
from typing import Mapping

from ..core.constants import DEPARTMENT_TARGET_RATE, DEPARTMENT_TREND_DOWN_BELOW, RATE_DECIMALS
from ..records.model import DepartmentInfo
from ..records.repository import AttendanceRecordSource
from .filters import AnalyticsFilter
from .model import DepartmentStat, StatusTally

UNKNOWN_DEPARTMENT_NAME = "Unknown"
UNKNOWN_DEPARTMENT_CODE = "UNK"


def department_info(lookup: Mapping[int, DepartmentInfo], department_id: int) -> DepartmentInfo:
    """Lookup row, or the Unknown placeholder for ids with no department record."""
    return lookup.get(department_id) or DepartmentInfo(
        department_id=department_id,
        name=UNKNOWN_DEPARTMENT_NAME,
        code=UNKNOWN_DEPARTMENT_CODE,
    )


def department_trend(rate: float) -> str:
    if rate > DEPARTMENT_TARGET_RATE:
        return "up"
    if rate < DEPARTMENT_TREND_DOWN_BELOW:
        return "down"
    return "stable"


class DepartmentRollup:
    """Per-department head count joined with attendance rate, keyed by department id."""

    def __init__(self, source: AttendanceRecordSource):
        self._source = source

    def compute(self, flt: AnalyticsFilter) -> list[DepartmentStat]:
        headcounts = self._source.count_actors_by_department(flt.actor_type, flt.department_id)
        members = {h.department_id: h.count for h in headcounts if h.count > 0}
        if not members:
            return []

        tallies: dict[int, StatusTally] = defaultdict(StatusTally)
        for event in self._source.find_events(flt):
            if event.department_id in members:
                tallies[event.department_id].add(event.status)

        lookup = self._source.get_departments()
        stats = []
        for department_id, member_count in members.items():
            info = department_info(lookup, department_id)
            tally = tallies.get(department_id, StatusTally())
            rate = tally.attendance_rate
            stats.append(
                DepartmentStat(
                    department_id=department_id,
                    name=info.name,
                    code=info.code,
                    member_count=member_count,
                    attendance_rate=rate,
                    total_count=tally.total,
                    trend=department_trend(rate),
                    change=round(rate - DEPARTMENT_TARGET_RATE, RATE_DECIMALS),
                )
            )

        stats.sort(key=lambda s: (s.name, s.department_id))
        return stats
