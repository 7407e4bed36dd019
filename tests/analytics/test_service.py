from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from src.attendance_analytics.attendance_analytics.analytics.cache import ResponseCache
from src.attendance_analytics.attendance_analytics.analytics.service import AnalyticsRequest, AnalyticsService, cache_key
from src.attendance_analytics.attendance_analytics.core.enums import ActorType, AttendanceStatus, TimeRange
from src.attendance_analytics.attendance_analytics.core.exceptions import RecordSourceError, ValidationError
from src.attendance_analytics.attendance_analytics.records.model import DepartmentInfo

P, L, A = AttendanceStatus.PRESENT, AttendanceStatus.LATE, AttendanceStatus.ABSENT


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def campus(source, make_event):
    source.departments = {
        10: DepartmentInfo(department_id=10, name="Mathematics", code="MATH"),
        20: DepartmentInfo(department_id=20, name="Biology", code="BIO"),
    }
    source.roster = {
        ActorType.STUDENT: {1: 10, 2: 10, 3: 20},
        ActorType.INSTRUCTOR: {100: 10, 101: 20, 102: 20},
    }
    source.events = [
        make_event(P, utc(2025, 5, 12, 8, 55), actor_id=1, department_id=10),
        make_event(L, utc(2025, 5, 12, 9, 10), actor_id=2, department_id=10),
        make_event(P, utc(2025, 5, 13, 8, 50), actor_id=3, department_id=20),
        make_event(A, utc(2025, 5, 13, 9, 0), actor_id=1, department_id=10),
        make_event(P, utc(2025, 5, 13, 9, 0), actor_id=100, department_id=10, actor_type=ActorType.INSTRUCTOR),
        # outside the week window
        make_event(A, utc(2025, 4, 30, 9, 0), actor_id=2, department_id=10),
    ]
    return source


def test_request_defaults_and_normalization():
    assert AnalyticsRequest.from_params({}) == AnalyticsRequest(actor_type=ActorType.STUDENT, time_range=TimeRange.WEEK)

    req = AnalyticsRequest.from_params({"type": "Instructor", "timeRange": "MONTH", "startDate": " "})
    assert (req.actor_type, req.time_range, req.start_date) == (ActorType.INSTRUCTOR, TimeRange.MONTH, None)


@pytest.mark.parametrize("params", [{"type": "visitor"}, {"timeRange": "decade"}, {"riskLevel": "extreme"}])
def test_invalid_parameters_raise_validation_error(campus, fixed_now, params):
    with pytest.raises(ValidationError):
        AnalyticsService(campus).build_dashboard(params, now=fixed_now)


def test_dashboard_payload(campus, fixed_now):
    payload = AnalyticsService(campus).build_dashboard({"type": "student", "timeRange": "week"}, now=fixed_now)

    assert set(payload) == {
        "analytics",
        "timeBasedData",
        "departmentStats",
        "riskLevelData",
        "lateArrivalData",
        "patternData",
        "streakData",
        "generatedAt",
    }
    assert payload["analytics"]["totalInstructors"] == 3
    assert payload["analytics"]["averageAttendanceRate"] == 50.0
    assert payload["analytics"]["attendanceTrends"] == payload["timeBasedData"]
    assert payload["analytics"]["departmentStats"] == payload["departmentStats"]
    assert payload["generatedAt"] == fixed_now.isoformat()

    assert [(b["label"], b["totalCount"], b["presentCount"]) for b in payload["timeBasedData"]] == [
        ("Monday", 2, 1),
        ("Tuesday", 2, 1),
    ]
    assert [(d["code"], d["attendanceRate"]) for d in payload["departmentStats"]] == [("BIO", 100.0), ("MATH", 33.33)]
    assert {r["level"]: r["count"] for r in payload["riskLevelData"]} == {"none": 1, "low": 0, "medium": 0, "high": 2}
    assert [(b["label"], b["lateCount"]) for b in payload["lateArrivalData"]] == [("Monday", 1)]
    assert payload["patternData"]["overallStats"]["totalEvents"] == 4
    assert [d["date"] for d in payload["streakData"]["data"]] == ["2025-05-12", "2025-05-13"]


def test_department_scope_applies_to_instructor_headcount(campus, fixed_now):
    payload = AnalyticsService(campus).build_dashboard({"departmentId": "20"}, now=fixed_now)

    assert payload["analytics"]["totalInstructors"] == 2
    assert [d["code"] for d in payload["departmentStats"]] == ["BIO"]
    assert payload["analytics"]["averageAttendanceRate"] == 100.0


def test_instructor_dashboard(campus, fixed_now):
    payload = AnalyticsService(campus).build_dashboard({"type": "instructor"}, now=fixed_now)

    assert payload["analytics"]["averageAttendanceRate"] == 100.0
    assert {r["level"]: r["count"] for r in payload["riskLevelData"]} == {"none": 3, "low": 0, "medium": 0, "high": 0}


def test_components_share_one_event_query(campus, fixed_now):
    AnalyticsService(campus).build_dashboard({}, now=fixed_now)

    assert campus.find_calls == 1


def test_unparsable_start_date_falls_back_to_month(campus, fixed_now):
    payload = AnalyticsService(campus).build_dashboard(
        {"timeRange": "month", "startDate": "not-a-date"},
        now=fixed_now,
    )

    assert [b["label"] for b in payload["timeBasedData"]] == ["2025-05-12", "2025-05-13"]
    assert payload["patternData"]["overallStats"]["period"]["start"] == utc(2025, 5, 1).isoformat()


def test_empty_store_gives_zeroed_payload(source, fixed_now):
    payload = AnalyticsService(source).build_dashboard({}, now=fixed_now)

    assert payload["timeBasedData"] == []
    assert payload["departmentStats"] == []
    assert payload["lateArrivalData"] == []
    assert [(r["count"], r["percentage"]) for r in payload["riskLevelData"]] == [(0, 0.0)] * 4
    assert len(payload["patternData"]["dailyPatterns"]) == 7
    assert payload["streakData"]["stats"]["currentStreakType"] == "none"
    assert payload["analytics"]["averageAttendanceRate"] == 0.0
    assert payload["analytics"]["totalInstructors"] == 0


def test_store_failure_propagates(campus, fixed_now):
    campus.error = RecordSourceError("connection refused")

    with pytest.raises(RecordSourceError):
        AnalyticsService(campus).build_dashboard({}, now=fixed_now)


def test_get_dashboard_reuses_cached_payload(campus):
    service = AnalyticsService(campus, cache=ResponseCache(300))

    first = service.get_dashboard({"type": "student"})
    second = service.get_dashboard({"type": "student"})
    service.get_dashboard({"type": "student", "departmentId": "10"})

    assert first == second
    assert first is not second
    assert campus.find_calls == 2


def test_cached_payload_is_not_shared_with_callers(campus):
    service = AnalyticsService(campus, cache=ResponseCache(300))

    first = service.get_dashboard({"type": "student"})
    first["departmentStats"].clear()
    first["analytics"]["averageAttendanceRate"] = -1
    second = service.get_dashboard({"type": "student"})

    assert second["departmentStats"]
    assert second["analytics"]["averageAttendanceRate"] >= 0
    assert campus.find_calls == 1


def test_cache_key_ignores_unknown_params_and_blank_values():
    assert cache_key({"type": "student", "foo": "bar", "startDate": ""}) == cache_key({"type": "student"})


def test_end_bound_overflowing_in_utc_is_ignored(campus, fixed_now):
    payload = AnalyticsService(campus).build_dashboard(
        {"timeRange": "month", "startDate": "2025-05-01", "endDate": "9999-12-31T23:00:00-05:00"},
        now=fixed_now,
    )

    assert payload["patternData"]["overallStats"]["period"]["start"] == utc(2025, 5, 1).isoformat()
    assert payload["generatedAt"] == fixed_now.isoformat()


def test_aware_now_is_reported_in_utc(campus):
    local_now = datetime(2025, 5, 14, 19, 0, tzinfo=timezone(timedelta(hours=7)))

    payload = AnalyticsService(campus).build_dashboard({"timeRange": "today"}, now=local_now)

    assert payload["generatedAt"] == utc(2025, 5, 14, 12, 0).isoformat()
