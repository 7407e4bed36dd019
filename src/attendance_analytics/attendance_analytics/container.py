from __future__ import annotations

from dataclasses import dataclass

from .analytics.cache import ResponseCache
from .analytics.reports import ReportService
from .analytics.service import AnalyticsService
from .core.constants import DEFAULT_CACHE_SECONDS, PATTERN_DEFAULT_DAYS
from .database.connection import DatabaseConnection, DBConfig
from .records.mysql_record_source import MySQLRecordSource


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    record_source: MySQLRecordSource
    cache: ResponseCache
    analytics_service: AnalyticsService
    report_service: ReportService


def build_container(
    *,
    db_config: dict,
    cache_seconds: float = DEFAULT_CACHE_SECONDS,
    pattern_days: int = PATTERN_DEFAULT_DAYS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    record_source = MySQLRecordSource(conn)
    cache = ResponseCache(cache_seconds)
    analytics_service = AnalyticsService(record_source, cache=cache, pattern_days=pattern_days)
    report_service = ReportService(record_source)

    return Container(
        conn=conn,
        record_source=record_source,
        cache=cache,
        analytics_service=analytics_service,
        report_service=report_service,
    )
