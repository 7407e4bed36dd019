from __future__ import annotations

from collections import defaultdict
from typing import Optional

from ..core.constants import ATTENDANCE_GOALS, DEFAULT_REPORT_LIMIT, RANKING_MIN_EVENTS, RATE_DECIMALS
from ..core.enums import RankingType
from ..records.repository import AttendanceRecordSource
from .departments import UNKNOWN_DEPARTMENT_NAME, department_info
from .filters import AnalyticsFilter
from .model import ActorPerformance, GoalAchievement, StatusTally, percentage

UNKNOWN_ACTOR_NAME = "Unknown"


def _best_first(performance: ActorPerformance) -> tuple:
    return (-performance.attendance_rate, -performance.present, performance.actor_id)


def _ranked(performances: list[ActorPerformance]) -> list[dict]:
    return [p.to_dict(rank=rank) for rank, p in enumerate(performances, start=1)]


class ActorRanking:
    """Per-actor league tables over the events in scope.

    Only actors with at least one event in scope take part.
    """

    def __init__(self, source: AttendanceRecordSource, *, min_events: int = RANKING_MIN_EVENTS):
        self._source = source
        self._min_events = int(min_events)

    def performances(self, flt: AnalyticsFilter) -> list[ActorPerformance]:
        tallies: dict[int, StatusTally] = defaultdict(StatusTally)
        departments: dict[int, Optional[int]] = {}
        for event in self._source.find_events(flt):
            tallies[event.actor_id].add(event.status)
            departments[event.actor_id] = event.department_id
        if not tallies:
            return []

        names = self._source.get_actor_names(flt.actor_type, sorted(tallies))
        lookup = self._source.get_departments()
        rows = []
        for actor_id, tally in tallies.items():
            department_id = departments[actor_id]
            rows.append(
                ActorPerformance(
                    actor_id=actor_id,
                    name=names.get(actor_id) or UNKNOWN_ACTOR_NAME,
                    department_id=department_id,
                    department=(
                        department_info(lookup, department_id).name
                        if department_id is not None
                        else UNKNOWN_DEPARTMENT_NAME
                    ),
                    present=tally.present,
                    late=tally.late,
                    absent=tally.absent,
                    excused=tally.excused,
                )
            )
        rows.sort(key=_best_first)
        return rows

    def compute(self, flt: AnalyticsFilter, ranking_type: RankingType, *, limit: int = DEFAULT_REPORT_LIMIT) -> list:
        rows = self.performances(flt)
        if ranking_type == RankingType.GOAL_ACHIEVEMENT:
            return [g.to_dict() for g in self.goal_achievement(rows, limit=limit)]
        if ranking_type == RankingType.STATISTICAL:
            return [self.statistical(rows, limit=limit)]
        return _ranked(self.eligible(rows)[:limit])

    def eligible(self, rows: list[ActorPerformance]) -> list[ActorPerformance]:
        """Actors with enough events for a rate to mean something."""
        return [r for r in rows if r.total >= self._min_events]

    def goal_achievement(self, rows: list[ActorPerformance], *, limit: int) -> list[GoalAchievement]:
        goals = []
        for name, target, color in ATTENDANCE_GOALS:
            achieving = [r for r in rows if r.meets(target)]
            goals.append(
                GoalAchievement(
                    goal=name,
                    target=target,
                    achieved=len(achieving),
                    total=len(rows),
                    color=color,
                    actors=achieving[:limit],
                )
            )
        return goals

    def statistical(self, rows: list[ActorPerformance], *, limit: int) -> dict:
        tally = StatusTally(
            present=sum(r.present for r in rows),
            late=sum(r.late for r in rows),
            absent=sum(r.absent for r in rows),
            excused=sum(r.excused for r in rows),
        )
        average = round(sum(r.attendance_rate for r in rows) / len(rows), RATE_DECIMALS) if rows else 0.0
        eligible = self.eligible(rows)
        worst_first = sorted(eligible, key=lambda r: (r.attendance_rate, r.present, r.actor_id))
        return {
            "overall": {
                "totalActors": len(rows),
                "totalPresent": tally.present,
                "totalLate": tally.late,
                "totalAbsent": tally.absent,
                "totalExcused": tally.excused,
                "totalAttendance": tally.total,
                "overallRate": percentage(tally.present, tally.total),
                "averageActorRate": average,
            },
            "topPerformers": _ranked(eligible[:limit]),
            "bottomPerformers": _ranked(worst_first[:limit]),
        }
