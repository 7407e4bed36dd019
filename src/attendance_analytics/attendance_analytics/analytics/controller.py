from __future__ import annotations

from typing import Callable

from flask import Flask, jsonify, request

from ..core.exceptions import RecordSourceError, ValidationError
from ..core.logging import get_logger


def register(app: Flask, container) -> None:
    logger = get_logger("analytics.controller")

    def respond(build: Callable[[dict], dict], failure_message: str):
        params = request.args.to_dict(flat=True)
        try:
            payload = build(params)
            return jsonify({"success": True, **payload}), 200
        except ValidationError as e:
            return jsonify({"success": False, "message": "Invalid analytics request", "details": str(e)}), 400
        except RecordSourceError as e:
            logger.error("Attendance store failure path=%s params=%s", request.path, params, exc_info=True)
            return jsonify({"success": False, "message": failure_message, "details": str(e)}), 500
        except Exception as e:
            logger.exception("Unexpected analytics failure path=%s params=%s", request.path, params)
            return jsonify({"success": False, "message": failure_message, "details": str(e)}), 500

    @app.route("/api/attendance/analytics", methods=["GET"], endpoint="attendance_analytics")
    def attendance_analytics():
        return respond(container.analytics_service.get_dashboard, "Failed to fetch analytics data")

    # Resolved per request, so a container without reports still serves the dashboard.
    @app.route("/api/attendance/analytics/trends", methods=["GET"], endpoint="attendance_analytics_trends")
    def attendance_trends():
        return respond(lambda p: container.report_service.trends(p), "Failed to generate attendance trends")

    @app.route("/api/attendance/analytics/comparisons", methods=["GET"], endpoint="attendance_analytics_comparisons")
    def attendance_comparisons():
        return respond(lambda p: container.report_service.comparisons(p), "Failed to generate attendance comparisons")

    @app.route("/api/attendance/analytics/rankings", methods=["GET"], endpoint="attendance_analytics_rankings")
    def attendance_rankings():
        return respond(lambda p: container.report_service.rankings(p), "Failed to generate attendance rankings")

    @app.route("/api/attendance/analytics/breakdown", methods=["GET"], endpoint="attendance_analytics_breakdown")
    def attendance_breakdown():
        return respond(lambda p: container.report_service.breakdown(p), "Failed to generate attendance breakdown")
