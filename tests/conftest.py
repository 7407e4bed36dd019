from __future__ import annotations

from collections import Counter
from datetime import datetime, timezone
from itertools import count
from typing import Optional

import pytest

from src.attendance_analytics.attendance_analytics.core.enums import ActorType, AttendanceStatus
from src.attendance_analytics.attendance_analytics.records.model import (
    AttendanceEvent,
    DepartmentHeadcount,
    DepartmentInfo,
)


class InMemoryRecordSource:
    """Record source over plain lists; honours the filter the same way the SQL does."""

    def __init__(self, events=(), *, roster=None, departments=None, names=None):
        self.events = list(events)
        # {ActorType: {actor_id: department_id}}
        self.roster: dict[ActorType, dict[int, Optional[int]]] = roster or {}
        self.departments: dict[int, DepartmentInfo] = departments or {}
        # {ActorType: {actor_id: full_name}}
        self.names: dict[ActorType, dict[int, str]] = names or {}
        self.find_calls = 0
        self.error: Optional[Exception] = None

    def find_events(self, flt):
        self.find_calls += 1
        if self.error is not None:
            raise self.error
        return [e for e in self.events if flt.matches(e)]

    def count_actors_by_department(self, actor_type, department_id=None):
        counts = Counter(
            dept
            for dept in self.roster.get(actor_type, {}).values()
            if dept is not None and (department_id is None or dept == department_id)
        )
        return [DepartmentHeadcount(department_id=d, count=n) for d, n in sorted(counts.items())]

    def list_actor_ids(self, actor_type, department_id=None):
        return sorted(
            actor_id
            for actor_id, dept in self.roster.get(actor_type, {}).items()
            if department_id is None or dept == department_id
        )

    def get_departments(self):
        return dict(self.departments)

    def get_actor_names(self, actor_type, actor_ids):
        known = self.names.get(actor_type, {})
        return {i: known[i] for i in actor_ids if i in known}


@pytest.fixture
def fixed_now() -> datetime:
    # Wednesday
    return datetime(2025, 5, 14, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_event():
    ids = count(1)

    def _make(
        status: AttendanceStatus,
        timestamp: datetime,
        *,
        actor_id: int = 1,
        actor_type: ActorType = ActorType.STUDENT,
        department_id: Optional[int] = 10,
        subject_schedule_id: Optional[int] = None,
    ) -> AttendanceEvent:
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return AttendanceEvent(
            event_id=next(ids),
            actor_type=actor_type,
            actor_id=actor_id,
            department_id=department_id,
            subject_schedule_id=subject_schedule_id,
            status=status,
            timestamp=timestamp,
        )

    return _make


@pytest.fixture
def source() -> InMemoryRecordSource:
    return InMemoryRecordSource()
