from __future__ import annotations

from enum import Enum


class ActorType(str, Enum):
    """Who an attendance event belongs to."""

    STUDENT = "STUDENT"
    INSTRUCTOR = "INSTRUCTOR"


class AttendanceStatus(str, Enum):
    """Normalized check-in status as stored by the record source."""

    PRESENT = "PRESENT"
    LATE = "LATE"
    ABSENT = "ABSENT"
    EXCUSED = "EXCUSED"


class TimeRange(str, Enum):
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


class Granularity(str, Enum):
    HOUR = "hour"
    DAY_OF_WEEK = "day-of-week"
    DAY_OF_MONTH = "day-of-month"
    WEEK_OF_QUARTER = "week-of-quarter"
    MONTH = "month"
    CALENDAR_WEEK = "calendar-week"
    CALENDAR_MONTH = "calendar-month"
    CALENDAR_YEAR = "calendar-year"


class RiskLevel(str, Enum):
    """Risk tiers, ordered from healthiest to worst."""

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class StreakType(str, Enum):
    GOOD = "good"
    POOR = "poor"
    NONE = "none"


class TrendType(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    TIME_OF_DAY = "timeOfDay"
    DAY_OF_WEEK = "dayOfWeek"


class ComparisonType(str, Enum):
    # Courses, year levels and sections are not part of the read model.
    DEPARTMENT = "department"


class RankingType(str, Enum):
    PERFORMANCE = "performance"
    GOAL_ACHIEVEMENT = "goalAchievement"
    STATISTICAL = "statistical"


class BreakdownType(str, Enum):
    ATTENDANCE = "attendance"
    RISK_LEVEL = "riskLevel"
