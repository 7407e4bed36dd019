from __future__ import annotations

from datetime import datetime, timezone

import pytest

from src.attendance_analytics.attendance_analytics.analytics.departments import DepartmentRollup, department_trend
from src.attendance_analytics.attendance_analytics.analytics.filters import AnalyticsFilter
from src.attendance_analytics.attendance_analytics.core.enums import ActorType, AttendanceStatus
from src.attendance_analytics.attendance_analytics.records.model import DepartmentInfo

P, A = AttendanceStatus.PRESENT, AttendanceStatus.ABSENT
DAY = datetime(2025, 5, 12, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def campus(source):
    source.departments = {
        10: DepartmentInfo(department_id=10, name="Mathematics", code="MATH"),
        20: DepartmentInfo(department_id=20, name="Biology", code="BIO"),
    }
    source.roster = {
        ActorType.STUDENT: {1: 10, 2: 10, 3: 20, 4: 30, 5: None},
        ActorType.INSTRUCTOR: {100: 10},
    }
    return source


@pytest.mark.parametrize(
    "rate,trend",
    [(100.0, "up"), (85.01, "up"), (85.0, "stable"), (75.0, "stable"), (74.99, "down"), (0.0, "down")],
)
def test_department_trend(rate, trend):
    assert department_trend(rate) == trend


def test_rollup_joins_headcount_with_rates(campus, make_event):
    campus.events = [
        make_event(P, DAY, actor_id=1, department_id=10),
        make_event(P, DAY, actor_id=2, department_id=10),
        make_event(P, DAY, actor_id=3, department_id=20),
        make_event(A, DAY, actor_id=3, department_id=20),
    ]

    stats = DepartmentRollup(campus).compute(AnalyticsFilter(actor_type=ActorType.STUDENT))

    assert [s.to_dict() for s in stats] == [
        {
            "departmentId": 20,
            "name": "Biology",
            "code": "BIO",
            "memberCount": 1,
            "attendanceRate": 50.0,
            "totalCount": 2,
            "trend": "down",
            "change": -35.0,
        },
        {
            "departmentId": 10,
            "name": "Mathematics",
            "code": "MATH",
            "memberCount": 2,
            "attendanceRate": 100.0,
            "totalCount": 2,
            "trend": "up",
            "change": 15.0,
        },
        {
            "departmentId": 30,
            "name": "Unknown",
            "code": "UNK",
            "memberCount": 1,
            "attendanceRate": 0.0,
            "totalCount": 0,
            "trend": "down",
            "change": -85.0,
        },
    ]


def test_rollup_respects_department_scope(campus, make_event):
    campus.events = [make_event(P, DAY, actor_id=1, department_id=10)]

    stats = DepartmentRollup(campus).compute(AnalyticsFilter(actor_type=ActorType.STUDENT, department_id=10))

    assert [(s.department_id, s.member_count) for s in stats] == [(10, 2)]


def test_rollup_uses_requested_actor_type(campus):
    stats = DepartmentRollup(campus).compute(AnalyticsFilter(actor_type=ActorType.INSTRUCTOR))

    assert [(s.name, s.member_count, s.total_count) for s in stats] == [("Mathematics", 1, 0)]


def test_rollup_without_members_is_empty(source):
    assert DepartmentRollup(source).compute(AnalyticsFilter(actor_type=ActorType.STUDENT)) == []
