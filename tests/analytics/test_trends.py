from __future__ import annotations

from datetime import datetime, timezone

import pytest

from src.attendance_analytics.attendance_analytics.analytics.filters import AnalyticsFilter
from src.attendance_analytics.attendance_analytics.analytics.granularity.calendar import (
    CalendarMonth,
    CalendarWeek,
    CalendarYear,
)
from src.attendance_analytics.attendance_analytics.analytics.granularity.factory import GranularityFactory
from src.attendance_analytics.attendance_analytics.analytics.trends import TrendAnalyzer, trend_series
from src.attendance_analytics.attendance_analytics.core.enums import (
    ActorType,
    AttendanceStatus,
    Granularity,
    TrendType,
)

P, L, A, E = AttendanceStatus.PRESENT, AttendanceStatus.LATE, AttendanceStatus.ABSENT, AttendanceStatus.EXCUSED


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def test_calendar_week_starts_on_monday():
    # Sunday 2025-05-18 still belongs to the week of Monday 2025-05-12.
    monday_slot = CalendarWeek().slot_for(utc(2025, 5, 12, 0, 0))
    sunday_slot = CalendarWeek().slot_for(utc(2025, 5, 18, 23, 59))

    assert monday_slot == sunday_slot
    assert monday_slot.label == "2025-05-12"


def test_calendar_month_and_year_labels_sort_across_years():
    december = CalendarMonth().slot_for(utc(2024, 12, 31))
    january = CalendarMonth().slot_for(utc(2025, 1, 1))

    assert (december.label, january.label) == ("2024-12", "2025-01")
    assert december.index < january.index
    assert CalendarYear().slot_for(utc(2025, 7, 1)).label == "2025"


def test_factory_maps_trend_types():
    factory = GranularityFactory()

    assert [factory.granularity_for_trend(t) for t in TrendType] == [
        Granularity.CALENDAR_WEEK,
        Granularity.CALENDAR_MONTH,
        Granularity.CALENDAR_YEAR,
        Granularity.HOUR,
        Granularity.DAY_OF_WEEK,
    ]


def test_trend_points_count_statuses_and_distinct_actors(make_event):
    events = [
        make_event(P, utc(2025, 5, 12, 9), actor_id=1),
        make_event(P, utc(2025, 5, 13, 9), actor_id=1),
        make_event(L, utc(2025, 5, 14, 9), actor_id=2),
        make_event(E, utc(2025, 5, 15, 9), actor_id=3),
        make_event(A, utc(2025, 5, 20, 9), actor_id=2),
    ]

    points = [p.to_dict() for p in trend_series(events, CalendarWeek())]

    assert [p["period"] for p in points] == ["2025-05-12", "2025-05-19"]
    first = points[0]
    assert (first["present"], first["late"], first["excused"], first["total"]) == (2, 1, 1, 4)
    assert first["uniqueActors"] == 3
    # late does not count as present
    assert first["attendanceRate"] == 50.0
    assert points[1]["attendanceRate"] == 0.0


def test_day_of_week_trend_is_ordered_sunday_first(source, make_event):
    source.events = [
        make_event(P, utc(2025, 5, 16, 9)),  # Friday
        make_event(P, utc(2025, 5, 11, 9)),  # Sunday
        make_event(A, utc(2025, 5, 12, 9)),  # Monday
    ]

    points = TrendAnalyzer(source).compute(AnalyticsFilter(actor_type=ActorType.STUDENT), TrendType.DAY_OF_WEEK)

    assert [(p.period, p.index) for p in points] == [("Sunday", 0), ("Monday", 1), ("Friday", 5)]


@pytest.mark.parametrize("trend_type", list(TrendType))
def test_no_events_gives_empty_trend(source, trend_type):
    assert TrendAnalyzer(source).compute(AnalyticsFilter(actor_type=ActorType.STUDENT), trend_type) == []


def test_trend_respects_filter_scope(source, make_event):
    source.events = [
        make_event(P, utc(2024, 3, 1, 9), department_id=10),
        make_event(P, utc(2025, 3, 1, 9), department_id=20),
        make_event(P, utc(2025, 3, 1, 9), actor_type=ActorType.INSTRUCTOR, actor_id=100),
    ]
    flt = AnalyticsFilter(actor_type=ActorType.STUDENT, department_id=20)

    points = TrendAnalyzer(source).compute(flt, TrendType.YEARLY)

    assert [(p.period, p.total) for p in points] == [("2025", 1)]
