from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.constants import RATE_DECIMALS
from ..core.enums import AttendanceStatus, RiskLevel, StreakType


def percentage(part: int, total: int) -> float:
    """``part / total * 100`` rounded for display; 0 when there is nothing to divide."""
    if total <= 0:
        return 0.0
    return round(part / total * 100, RATE_DECIMALS)


@dataclass
class StatusTally:
    """Mutable counter used while scanning; never leaves an analyzer."""

    present: int = 0
    late: int = 0
    absent: int = 0
    excused: int = 0

    def add(self, status: AttendanceStatus) -> None:
        if status == AttendanceStatus.PRESENT:
            self.present += 1
        elif status == AttendanceStatus.LATE:
            self.late += 1
        elif status == AttendanceStatus.ABSENT:
            self.absent += 1
        else:
            self.excused += 1

    @property
    def total(self) -> int:
        return self.present + self.late + self.absent + self.excused

    @property
    def attendance_rate(self) -> float:
        return percentage(self.present, self.total)

    @property
    def late_rate(self) -> float:
        return percentage(self.late, self.total)

    @property
    def absent_rate(self) -> float:
        return percentage(self.absent, self.total)


@dataclass(frozen=True)
class TimeBucket:
    label: str
    index: int
    attendance_rate: float
    total_count: int
    present_count: int
    late_count: int = 0
    absent_count: int = 0

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "index": self.index,
            "attendanceRate": self.attendance_rate,
            "totalCount": self.total_count,
            "presentCount": self.present_count,
            "lateCount": self.late_count,
            "absentCount": self.absent_count,
        }


@dataclass(frozen=True)
class DepartmentStat:
    department_id: int
    name: str
    code: str
    member_count: int
    attendance_rate: float
    total_count: int
    trend: str
    change: float

    def to_dict(self) -> dict:
        return {
            "departmentId": self.department_id,
            "name": self.name,
            "code": self.code,
            "memberCount": self.member_count,
            "attendanceRate": self.attendance_rate,
            "totalCount": self.total_count,
            "trend": self.trend,
            "change": self.change,
        }


@dataclass(frozen=True)
class RiskBucket:
    level: RiskLevel
    count: int
    percentage: float
    color: str

    def to_dict(self) -> dict:
        return {
            "level": self.level.value,
            "count": self.count,
            "percentage": self.percentage,
            "color": self.color,
        }


@dataclass(frozen=True)
class LateBucket:
    label: str
    index: int
    late_count: int
    total_count: int
    late_rate: float

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "index": self.index,
            "lateCount": self.late_count,
            "totalCount": self.total_count,
            "lateRate": self.late_rate,
        }


@dataclass(frozen=True)
class HourPattern:
    hour: int
    attendance_rate: float
    late_rate: float
    absent_rate: float
    total_count: int
    is_peak: bool = False

    @property
    def label(self) -> str:
        return f"{self.hour:02d}:00"

    def to_dict(self) -> dict:
        return {
            "hour": self.hour,
            "label": self.label,
            "attendanceRate": self.attendance_rate,
            "lateRate": self.late_rate,
            "absentRate": self.absent_rate,
            "totalCount": self.total_count,
            "isPeak": self.is_peak,
        }


@dataclass(frozen=True)
class DayPattern:
    day_index: int
    day_name: str
    attendance_rate: float
    late_rate: float
    absent_rate: float
    moving_average: float
    total_count: int
    is_peak: bool
    is_valley: bool
    peak_hours: list[int] = field(default_factory=list)
    hourly_breakdown: list[HourPattern] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "dayIndex": self.day_index,
            "dayName": self.day_name,
            "attendanceRate": self.attendance_rate,
            "lateRate": self.late_rate,
            "absentRate": self.absent_rate,
            "movingAverage": self.moving_average,
            "totalCount": self.total_count,
            "isPeak": self.is_peak,
            "isValley": self.is_valley,
            "peakHours": list(self.peak_hours),
            "hourlyBreakdown": [h.to_dict() for h in self.hourly_breakdown],
        }


@dataclass(frozen=True)
class StreakDay:
    date: str
    attendance_rate: float
    is_good_day: bool
    signed_run_length: int
    streak_type: StreakType
    is_break_point: bool

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "attendanceRate": self.attendance_rate,
            "isGoodDay": self.is_good_day,
            "signedRunLength": self.signed_run_length,
            "streakType": self.streak_type.value,
            "isBreakPoint": self.is_break_point,
        }


@dataclass(frozen=True)
class StreakStats:
    max_good_streak: int = 0
    max_poor_streak: int = 0
    current_streak: int = 0
    current_streak_type: StreakType = StreakType.NONE
    total_good_days: int = 0
    total_poor_days: int = 0

    def to_dict(self) -> dict:
        return {
            "maxGoodStreak": self.max_good_streak,
            "maxPoorStreak": self.max_poor_streak,
            "currentStreak": self.current_streak,
            "currentStreakType": self.current_streak_type.value,
            "totalGoodDays": self.total_good_days,
            "totalPoorDays": self.total_poor_days,
        }


@dataclass(frozen=True)
class StreakReport:
    days: list[StreakDay]
    stats: StreakStats

    def to_dict(self) -> dict:
        return {"data": [d.to_dict() for d in self.days], "stats": self.stats.to_dict()}


@dataclass(frozen=True)
class PatternReport:
    daily: list[DayPattern]
    hourly: list[HourPattern]
    best_day: Optional[str]
    worst_day: Optional[str]
    average_rate: float
    total_events: int
    peak_hour: Optional[int]
    period: dict

    def to_dict(self) -> dict:
        return {
            "dailyPatterns": [d.to_dict() for d in self.daily],
            "hourlyPatterns": [h.to_dict() for h in self.hourly],
            "overallStats": {
                "bestDay": self.best_day,
                "worstDay": self.worst_day,
                "averageRate": self.average_rate,
                "totalEvents": self.total_events,
                "peakHour": self.peak_hour,
                "period": self.period,
            },
        }


@dataclass(frozen=True)
class TrendPoint:
    period: str
    index: int
    present: int
    late: int
    absent: int
    excused: int
    unique_actors: int

    @property
    def total(self) -> int:
        return self.present + self.late + self.absent + self.excused

    @property
    def attendance_rate(self) -> float:
        return percentage(self.present, self.total)

    def to_dict(self) -> dict:
        return {
            "period": self.period,
            "index": self.index,
            "present": self.present,
            "late": self.late,
            "absent": self.absent,
            "excused": self.excused,
            "total": self.total,
            "uniqueActors": self.unique_actors,
            "attendanceRate": self.attendance_rate,
        }


@dataclass(frozen=True)
class DepartmentComparisonRow:
    rank: int
    department_id: int
    name: str
    code: str
    member_count: int
    present: int
    late: int
    absent: int
    excused: int
    unique_actors: int

    @property
    def total(self) -> int:
        return self.present + self.late + self.absent + self.excused

    @property
    def attendance_rate(self) -> float:
        return percentage(self.present, self.total)

    def to_dict(self) -> dict:
        return {
            "rank": self.rank,
            "departmentId": self.department_id,
            "name": self.name,
            "code": self.code,
            "memberCount": self.member_count,
            "present": self.present,
            "late": self.late,
            "absent": self.absent,
            "excused": self.excused,
            "total": self.total,
            "uniqueActors": self.unique_actors,
            "attendanceRate": self.attendance_rate,
        }


@dataclass(frozen=True)
class ActorPerformance:
    actor_id: int
    name: str
    department_id: Optional[int]
    department: str
    present: int
    late: int
    absent: int
    excused: int

    @property
    def total(self) -> int:
        return self.present + self.late + self.absent + self.excused

    @property
    def attendance_rate(self) -> float:
        return percentage(self.present, self.total)

    def meets(self, target: float) -> bool:
        # Cross-multiplied like the risk tiers, so 19/20 meets 95 exactly.
        return self.total > 0 and self.present * 100 >= target * self.total

    def to_dict(self, rank: Optional[int] = None) -> dict:
        body = {
            "actorId": self.actor_id,
            "name": self.name,
            "departmentId": self.department_id,
            "department": self.department,
            "present": self.present,
            "late": self.late,
            "absent": self.absent,
            "excused": self.excused,
            "total": self.total,
            "attendanceRate": self.attendance_rate,
        }
        if rank is not None:
            body = {"rank": rank, **body}
        return body


@dataclass(frozen=True)
class GoalAchievement:
    goal: str
    target: int
    achieved: int
    total: int
    color: str
    actors: list[ActorPerformance] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "goal": self.goal,
            "target": self.target,
            "achieved": self.achieved,
            "total": self.total,
            "percentage": percentage(self.achieved, self.total),
            "color": self.color,
            "actors": [a.to_dict() for a in self.actors],
        }


@dataclass(frozen=True)
class StatusBreakdown:
    status: AttendanceStatus
    label: str
    count: int
    unique_actors: int
    percentage: float
    color: str
    bg_color: str

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "label": self.label,
            "count": self.count,
            "uniqueActors": self.unique_actors,
            "percentage": self.percentage,
            "color": self.color,
            "bgColor": self.bg_color,
        }
