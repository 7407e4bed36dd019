"""Attendance analytics package.

Organized by feature modules (records, analytics, database) with a thin
Flask controller layer over service/analyzer and repository layers.
"""
