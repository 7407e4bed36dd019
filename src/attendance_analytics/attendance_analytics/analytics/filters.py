from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Mapping, Optional, Type, TypeVar

from ..core.enums import ActorType, RiskLevel
from ..core.exceptions import ValidationError
from ..records.model import AttendanceEvent
from .ranges import TimeInterval

_ALL = {"", "all"}

E = TypeVar("E", bound=Enum)


@dataclass(frozen=True)
class AnalyticsFilter:
    """Immutable query predicate shared by every analyzer of one request.

    Derived scopes are new objects (copy-on-write); nothing mutates a filter.
    """

    actor_type: ActorType
    interval: TimeInterval = TimeInterval()
    department_id: Optional[int] = None
    subject_schedule_id: Optional[int] = None
    risk_level: Optional[RiskLevel] = None

    def with_interval(self, interval: TimeInterval) -> "AnalyticsFilter":
        return replace(self, interval=interval)

    def for_risk(self) -> "AnalyticsFilter":
        """Risk classification is scoped by actor and department, not by subject schedule."""
        return replace(self, subject_schedule_id=None)

    def matches(self, event: AttendanceEvent) -> bool:
        if event.actor_type != self.actor_type:
            return False
        if self.department_id is not None and event.department_id != self.department_id:
            return False
        if self.subject_schedule_id is not None and event.subject_schedule_id != self.subject_schedule_id:
            return False
        return self.interval.contains(event.instant)


def param_text(params: Mapping[str, Any], key: str) -> Optional[str]:
    value = params.get(key)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_choice(enum_cls: Type[E], raw: Optional[str], *, default: E, name: str) -> E:
    """Case-insensitive lookup of an enum member by value; blank means ``default``."""
    if raw is None or not raw.strip():
        return default
    wanted = raw.strip().lower()
    for member in enum_cls:
        if member.value.lower() == wanted:
            return member
    allowed = ", ".join(member.value for member in enum_cls)
    raise ValidationError(f"{name} must be one of: {allowed}")


def _optional_int(raw: Mapping[str, Any], key: str) -> Optional[int]:
    value = raw.get(key)
    if value is None:
        return None
    text = str(value).strip()
    if text.lower() in _ALL:
        return None
    try:
        return int(text)
    except ValueError:
        raise ValidationError(f"{key} must be an integer or 'all', got {value!r}") from None


def _optional_risk(raw: Mapping[str, Any]) -> Optional[RiskLevel]:
    value = raw.get("riskLevel")
    if value is None:
        return None
    text = str(value).strip().lower()
    if text in _ALL:
        return None
    try:
        return RiskLevel(text)
    except ValueError:
        allowed = ", ".join(level.value for level in RiskLevel)
        raise ValidationError(f"riskLevel must be one of: {allowed}") from None


def build_filter(raw_params: Mapping[str, Any], actor_type: ActorType, interval: TimeInterval) -> AnalyticsFilter:
    """Build a fresh filter from raw request parameters.

    ``subjectId`` is the request name for the subject schedule scope;
    ``subjectScheduleId`` is accepted when ``subjectId`` is absent.
    """
    subject_key = "subjectId" if raw_params.get("subjectId") is not None else "subjectScheduleId"
    return AnalyticsFilter(
        actor_type=actor_type,
        interval=interval,
        department_id=_optional_int(raw_params, "departmentId"),
        subject_schedule_id=_optional_int(raw_params, subject_key),
        risk_level=_optional_risk(raw_params),
    )
