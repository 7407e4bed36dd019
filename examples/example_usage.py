"""Example: build the dashboard payload from the service layer (no Flask).

Controllers stay thin; the dashboard comes from AnalyticsService, the reports from ReportService.
"""

import importlib
import json

from config import get_settings_module

from src.attendance_analytics.attendance_analytics.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, cache_seconds=0)
    payload = container.analytics_service.get_dashboard({"type": "student", "timeRange": "month"})
    print(json.dumps(payload["riskLevelData"], indent=2))

    ranking = container.report_service.rankings({"type": "performance", "limit": "5"})
    print(json.dumps(ranking["data"], indent=2))


if __name__ == "__main__":
    main()
