from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from ..common.datetime_utils import as_utc, now_utc
from ..core.constants import PATTERN_DEFAULT_DAYS
from ..core.enums import ActorType, AttendanceStatus, TimeRange
from ..core.exceptions import ValidationError
from ..core.logging import get_logger
from ..records.memo import RequestScopedSource
from ..records.repository import AttendanceRecordSource
from .buckets import BucketAggregator
from .cache import ResponseCache
from .departments import DepartmentRollup
from .filters import build_filter, param_text
from .granularity.factory import GranularityFactory
from .late_arrivals import LateArrivalAnalyzer
from .model import percentage
from .patterns import PatternAnalyzer
from .ranges import resolve_range
from .risk import RiskClassifier
from .streaks import StreakAnalyzer

_CACHE_KEYS = (
    "type",
    "timeRange",
    "departmentId",
    "riskLevel",
    "subjectId",
    "subjectScheduleId",
    "startDate",
    "endDate",
)


@dataclass(frozen=True)
class AnalyticsRequest:
    actor_type: ActorType
    time_range: TimeRange
    start_date: Optional[str] = None
    end_date: Optional[str] = None

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "AnalyticsRequest":
        raw_type = (param_text(params, "type") or "student").upper()
        raw_range = (param_text(params, "timeRange") or "week").lower()
        try:
            actor_type = ActorType(raw_type)
        except ValueError:
            raise ValidationError("type must be 'student' or 'instructor'") from None
        try:
            time_range = TimeRange(raw_range)
        except ValueError:
            allowed = ", ".join(t.value for t in TimeRange)
            raise ValidationError(f"timeRange must be one of: {allowed}") from None

        return cls(
            actor_type=actor_type,
            time_range=time_range,
            start_date=param_text(params, "startDate"),
            end_date=param_text(params, "endDate"),
        )


def cache_key(params: Mapping[str, Any]) -> tuple:
    return tuple((key, param_text(params, key)) for key in _CACHE_KEYS)


class AnalyticsService:
    """Single entry point: resolve the range, build the filter, fan out, assemble."""

    def __init__(
        self,
        source: AttendanceRecordSource,
        *,
        cache: Optional[ResponseCache] = None,
        granularity_factory: Optional[GranularityFactory] = None,
        pattern_days: int = PATTERN_DEFAULT_DAYS,
        logger: Optional[logging.Logger] = None,
    ):
        self._source = source
        self._cache = cache
        self._factory = granularity_factory or GranularityFactory()
        self._pattern_days = int(pattern_days)
        self._logger = logger or get_logger("analytics.service")

    def get_dashboard(self, params: Mapping[str, Any]) -> dict:
        """Cached variant used by the HTTP layer."""
        key = cache_key(params)
        if self._cache is not None:
            hit = self._cache.get(key)
            if hit is not None:
                self._logger.debug("analytics cache hit key=%s", key)
                return copy.deepcopy(hit)

        payload = self.build_dashboard(params)
        if self._cache is not None:
            self._cache.put(key, copy.deepcopy(payload))
        return payload

    def build_dashboard(self, params: Mapping[str, Any], *, now: Optional[datetime] = None) -> dict:
        request = AnalyticsRequest.from_params(params)
        now = as_utc(now) if now is not None else now_utc()

        interval = resolve_range(request.time_range, request.start_date, request.end_date, now=now, logger=self._logger)
        flt = build_filter(params, request.actor_type, interval)
        source = RequestScopedSource(self._source)

        events = source.find_events(flt)
        granularity = self._factory.granularity_for(request.time_range)

        time_based = BucketAggregator(source, factory=self._factory).series(flt, granularity)
        departments = DepartmentRollup(source).compute(flt)
        risk = RiskClassifier(source).compute(flt)
        late = LateArrivalAnalyzer(source).compute(flt, request.time_range)
        patterns = PatternAnalyzer(source, default_days=self._pattern_days).compute(flt, now=now)
        streaks = StreakAnalyzer(source).compute(flt)

        instructor_heads = source.count_actors_by_department(ActorType.INSTRUCTOR, flt.department_id)
        present = sum(1 for e in events if e.status == AttendanceStatus.PRESENT)

        self._logger.debug(
            "analytics built type=%s range=%s interval=%s events=%d queries=%d",
            request.actor_type.value,
            request.time_range.value,
            interval.to_dict(),
            len(events),
            source.query_count,
        )

        department_dicts = [d.to_dict() for d in departments]
        trend_dicts = [b.to_dict() for b in time_based]
        return {
            "analytics": {
                "departmentStats": department_dicts,
                "attendanceTrends": trend_dicts,
                "totalInstructors": sum(h.count for h in instructor_heads),
                "averageAttendanceRate": percentage(present, len(events)),
            },
            "timeBasedData": trend_dicts,
            "departmentStats": department_dicts,
            "riskLevelData": [r.to_dict() for r in risk],
            "lateArrivalData": [b.to_dict() for b in late],
            "patternData": patterns.to_dict(),
            "streakData": streaks.to_dict(),
            "generatedAt": now.isoformat(),
        }
