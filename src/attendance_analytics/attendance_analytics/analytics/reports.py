from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Mapping, Optional

from ..common.datetime_utils import as_utc, now_utc
from ..core.constants import DEFAULT_REPORT_LIMIT, MAX_REPORT_LIMIT
from ..core.enums import ActorType, BreakdownType, ComparisonType, RankingType, TrendType
from ..core.exceptions import ValidationError
from ..core.logging import get_logger
from ..records.memo import RequestScopedSource
from ..records.repository import AttendanceRecordSource
from .breakdown import AttendanceBreakdown
from .comparisons import DepartmentComparison
from .filters import AnalyticsFilter, build_filter, param_text, parse_choice
from .granularity.factory import GranularityFactory
from .ranges import TimeInterval, explicit_interval
from .rankings import ActorRanking
from .trends import TrendAnalyzer


def _limit(params: Mapping[str, Any]) -> int:
    raw = param_text(params, "limit")
    if raw is None:
        return DEFAULT_REPORT_LIMIT
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError(f"limit must be an integer, got {raw!r}") from None
    if not 1 <= value <= MAX_REPORT_LIMIT:
        raise ValidationError(f"limit must be between 1 and {MAX_REPORT_LIMIT}")
    return value


@dataclass(frozen=True)
class ReportRequest:
    """Parameters shared by the trend, comparison, ranking and breakdown reports.

    Reports have no preset window: they cover all time unless both
    ``startDate`` and ``endDate`` are given.
    """

    actor_type: ActorType
    flt: AnalyticsFilter
    limit: int
    start_date: Optional[str] = None
    end_date: Optional[str] = None

    @classmethod
    def from_params(cls, params: Mapping[str, Any], *, logger: Optional[logging.Logger] = None) -> "ReportRequest":
        actor_type = parse_choice(ActorType, param_text(params, "actorType"), default=ActorType.STUDENT, name="actorType")
        start_date = param_text(params, "startDate")
        end_date = param_text(params, "endDate")
        interval = explicit_interval(start_date, end_date, logger=logger) or TimeInterval()
        return cls(
            actor_type=actor_type,
            flt=build_filter(params, actor_type, interval),
            limit=_limit(params),
            start_date=start_date,
            end_date=end_date,
        )

    def filters(self) -> dict:
        return {
            "actorType": self.actor_type.value.lower(),
            "startDate": self.start_date,
            "endDate": self.end_date,
            "departmentId": self.flt.department_id,
            "subjectId": self.flt.subject_schedule_id,
            "limit": self.limit,
        }


class ReportService:
    """Secondary analytics reports served beside the dashboard.

    Each call reads through its own ``RequestScopedSource``; reports are not cached.
    """

    def __init__(
        self,
        source: AttendanceRecordSource,
        *,
        granularity_factory: Optional[GranularityFactory] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._source = source
        self._factory = granularity_factory or GranularityFactory()
        self._logger = logger or get_logger("analytics.reports")

    def trends(self, params: Mapping[str, Any], *, now: Optional[datetime] = None) -> dict:
        trend_type = parse_choice(TrendType, param_text(params, "type"), default=TrendType.WEEKLY, name="type")
        return self._run(
            params,
            trend_type,
            lambda source, req: [
                p.to_dict() for p in TrendAnalyzer(source, factory=self._factory).compute(req.flt, trend_type)
            ],
            now=now,
        )

    def comparisons(self, params: Mapping[str, Any], *, now: Optional[datetime] = None) -> dict:
        comparison_type = parse_choice(
            ComparisonType, param_text(params, "type"), default=ComparisonType.DEPARTMENT, name="type"
        )
        return self._run(
            params,
            comparison_type,
            lambda source, req: [r.to_dict() for r in DepartmentComparison(source).compute(req.flt, limit=req.limit)],
            now=now,
        )

    def rankings(self, params: Mapping[str, Any], *, now: Optional[datetime] = None) -> dict:
        ranking_type = parse_choice(RankingType, param_text(params, "type"), default=RankingType.PERFORMANCE, name="type")
        return self._run(
            params,
            ranking_type,
            lambda source, req: ActorRanking(source).compute(req.flt, ranking_type, limit=req.limit),
            now=now,
        )

    def breakdown(self, params: Mapping[str, Any], *, now: Optional[datetime] = None) -> dict:
        breakdown_type = parse_choice(
            BreakdownType, param_text(params, "type"), default=BreakdownType.ATTENDANCE, name="type"
        )
        return self._run(
            params,
            breakdown_type,
            lambda source, req: AttendanceBreakdown(source).compute(req.flt, breakdown_type),
            now=now,
        )

    def _run(
        self,
        params: Mapping[str, Any],
        report_type,
        build: Callable[[AttendanceRecordSource, ReportRequest], list],
        *,
        now: Optional[datetime],
    ) -> dict:
        req = ReportRequest.from_params(params, logger=self._logger)
        now = as_utc(now) if now is not None else now_utc()
        source = RequestScopedSource(self._source)

        data = build(source, req)
        self._logger.debug(
            "report built type=%s filters=%s rows=%d queries=%d",
            report_type.value,
            req.filters(),
            len(data),
            source.query_count,
        )
        return {
            "data": data,
            "type": report_type.value,
            "filters": req.filters(),
            "generatedAt": now.isoformat(),
        }
