from __future__ import annotations

from collections import defaultdict

from ..core.constants import DEFAULT_REPORT_LIMIT
from ..records.repository import AttendanceRecordSource
from .departments import department_info
from .filters import AnalyticsFilter
from .model import DepartmentComparisonRow, StatusTally


class DepartmentComparison:
    """Departments ranked against each other by attendance rate.

    Covers every department with members or events in scope; events with no
    department are left out.
    """

    def __init__(self, source: AttendanceRecordSource):
        self._source = source

    def compute(self, flt: AnalyticsFilter, *, limit: int = DEFAULT_REPORT_LIMIT) -> list[DepartmentComparisonRow]:
        members = {
            h.department_id: h.count for h in self._source.count_actors_by_department(flt.actor_type, flt.department_id)
        }
        tallies: dict[int, StatusTally] = defaultdict(StatusTally)
        actors: dict[int, set[int]] = defaultdict(set)
        for event in self._source.find_events(flt):
            if event.department_id is None:
                continue
            tallies[event.department_id].add(event.status)
            actors[event.department_id].add(event.actor_id)

        lookup = self._source.get_departments()
        unranked = []
        for department_id in set(members) | set(tallies):
            info = department_info(lookup, department_id)
            tally = tallies.get(department_id, StatusTally())
            unranked.append((tally, info, department_id))

        unranked.sort(key=lambda row: (-row[0].attendance_rate, -row[0].total, row[1].name, row[2]))
        return [
            DepartmentComparisonRow(
                rank=rank,
                department_id=department_id,
                name=info.name,
                code=info.code,
                member_count=members.get(department_id, 0),
                present=tally.present,
                late=tally.late,
                absent=tally.absent,
                excused=tally.excused,
                unique_actors=len(actors.get(department_id, ())),
            )
            for rank, (tally, info, department_id) in enumerate(unranked[:limit], start=1)
        ]
