from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import as_utc
from ..core.enums import ActorType, AttendanceStatus


@dataclass(frozen=True)
class AttendanceEvent:
    """Domain entity: one observed check-in. Read-only for the engine."""

    event_id: int
    actor_type: ActorType
    actor_id: int
    department_id: Optional[int]
    subject_schedule_id: Optional[int]
    status: AttendanceStatus
    timestamp: datetime

    @property
    def instant(self) -> datetime:
        """Timestamp normalized to UTC (stores may hand back naive values)."""
        return as_utc(self.timestamp)


@dataclass(frozen=True)
class DepartmentHeadcount:
    department_id: int
    count: int


@dataclass(frozen=True)
class DepartmentInfo:
    department_id: int
    name: str
    code: str
