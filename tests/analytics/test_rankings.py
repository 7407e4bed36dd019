from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from src.attendance_analytics.attendance_analytics.analytics.filters import AnalyticsFilter
from src.attendance_analytics.attendance_analytics.analytics.rankings import ActorRanking
from src.attendance_analytics.attendance_analytics.core.enums import ActorType, AttendanceStatus, RankingType
from src.attendance_analytics.attendance_analytics.records.model import DepartmentInfo

P, L, A = AttendanceStatus.PRESENT, AttendanceStatus.LATE, AttendanceStatus.ABSENT
STUDENTS = AnalyticsFilter(actor_type=ActorType.STUDENT)


@pytest.fixture
def cohort(source, make_event):
    """Five actors with twenty school days each, except actor 5 who has three."""
    source.departments = {10: DepartmentInfo(department_id=10, name="Mathematics", code="MATH")}
    source.names = {ActorType.STUDENT: {1: "Ada Reyes", 2: "Ben Cruz", 3: "Cara Lim", 4: "Dan Uy"}}
    start = datetime(2025, 4, 1, 9, tzinfo=timezone.utc)

    # actor_id -> present days out of 20
    present_days = {1: 20, 2: 19, 3: 17, 4: 10}
    for actor_id, present in present_days.items():
        for day in range(20):
            status = P if day < present else L
            source.events.append(make_event(status, start + timedelta(days=day), actor_id=actor_id))
    for day in range(3):
        source.events.append(make_event(P, start + timedelta(days=day), actor_id=5, department_id=None))
    return source


def test_performance_ranks_eligible_actors_best_first(cohort):
    rows = ActorRanking(cohort).compute(STUDENTS, RankingType.PERFORMANCE)

    assert [(r["rank"], r["actorId"], r["attendanceRate"]) for r in rows] == [
        (1, 1, 100.0),
        (2, 2, 95.0),
        (3, 3, 85.0),
        (4, 4, 50.0),
    ]
    assert rows[0]["name"] == "Ada Reyes"
    assert rows[0]["department"] == "Mathematics"
    assert rows[3]["late"] == 10


def test_performance_limit(cohort):
    rows = ActorRanking(cohort).compute(STUDENTS, RankingType.PERFORMANCE, limit=2)

    assert [r["actorId"] for r in rows] == [1, 2]


def test_goal_achievement_uses_exact_boundaries(cohort):
    goals = ActorRanking(cohort).compute(STUDENTS, RankingType.GOAL_ACHIEVEMENT, limit=1)

    assert [(g["target"], g["achieved"], g["total"]) for g in goals] == [
        (100, 2, 5),
        (95, 3, 5),
        (90, 3, 5),
        (85, 4, 5),
        (80, 4, 5),
    ]
    assert goals[1]["percentage"] == 60.0
    # listed actors are capped by the limit
    assert [a["actorId"] for a in goals[1]["actors"]] == [1]


def test_statistical_summary(cohort):
    [summary] = ActorRanking(cohort).compute(STUDENTS, RankingType.STATISTICAL, limit=2)

    overall = summary["overall"]
    assert overall["totalActors"] == 5
    assert overall["totalAttendance"] == 83
    assert overall["totalPresent"] == 69
    assert overall["totalLate"] == 14
    assert overall["averageActorRate"] == 86.0
    assert [r["actorId"] for r in summary["topPerformers"]] == [1, 2]
    assert [(r["rank"], r["actorId"]) for r in summary["bottomPerformers"]] == [(1, 4), (2, 3)]


def test_unnamed_actor_and_missing_department_fall_back_to_unknown(cohort):
    rows = ActorRanking(cohort, min_events=1).compute(STUDENTS, RankingType.PERFORMANCE)

    actor_5 = next(r for r in rows if r["actorId"] == 5)
    assert (actor_5["name"], actor_5["department"], actor_5["departmentId"]) == ("Unknown", "Unknown", None)


def test_no_events_gives_empty_rankings(source):
    ranking = ActorRanking(source)

    assert ranking.compute(STUDENTS, RankingType.PERFORMANCE) == []
    goals = ranking.compute(STUDENTS, RankingType.GOAL_ACHIEVEMENT)
    assert [(g["achieved"], g["percentage"]) for g in goals] == [(0, 0.0)] * 5
    [summary] = ranking.compute(STUDENTS, RankingType.STATISTICAL)
    assert summary["overall"]["averageActorRate"] == 0.0
    assert summary["topPerformers"] == []
