from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Mapping, Optional, Sequence

import mysql.connector

from ..common.datetime_utils import as_utc
from ..core.enums import ActorType, AttendanceStatus
from ..core.exceptions import RecordSourceError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, to_db_datetime
from .model import AttendanceEvent, DepartmentHeadcount, DepartmentInfo
from .repository import AttendanceRecordSource

if TYPE_CHECKING:
    from ..analytics.filters import AnalyticsFilter


# Students and instructors reach their department through different tables.
_ACTOR_TABLES = {
    ActorType.STUDENT: ("students", "student_id"),
    ActorType.INSTRUCTOR: ("instructors", "instructor_id"),
}


@contextmanager
def _reading(operation: str):
    try:
        yield
    except mysql.connector.Error as e:
        raise RecordSourceError(f"{operation} failed: {e}") from e


class MySQLRecordSource(AttendanceRecordSource):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_events(self, flt: "AnalyticsFilter") -> Sequence[AttendanceEvent]:
        table, key = _ACTOR_TABLES[flt.actor_type]
        clauses = ["a.user_type=%s"]
        params: list[object] = [flt.actor_type.value]

        if flt.department_id is not None:
            clauses.append("p.department_id=%s")
            params.append(int(flt.department_id))
        if flt.subject_schedule_id is not None:
            clauses.append("a.subject_schedule_id=%s")
            params.append(int(flt.subject_schedule_id))
        if flt.interval.start is not None:
            clauses.append("a.timestamp >= %s")
            params.append(to_db_datetime(flt.interval.start))
        if flt.interval.end is not None:
            clauses.append("a.timestamp <= %s")
            params.append(to_db_datetime(flt.interval.end))

        where = " AND ".join(clauses)

        with _reading("find_events"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    a.attendance_id, a.{key} AS actor_id, p.department_id,
                    a.subject_schedule_id, a.status, a.timestamp
                FROM attendance a
                JOIN {table} p ON p.{key} = a.{key}
                WHERE {where}
                ORDER BY a.timestamp ASC
                """,
                tuple(params),
            )
            rows = fetchall(cur)

        return [
            AttendanceEvent(
                event_id=int(r["attendance_id"]),
                actor_type=flt.actor_type,
                actor_id=int(r["actor_id"]),
                department_id=int(r["department_id"]) if r.get("department_id") is not None else None,
                subject_schedule_id=int(r["subject_schedule_id"]) if r.get("subject_schedule_id") is not None else None,
                status=AttendanceStatus(r["status"]),
                timestamp=as_utc(r["timestamp"]),
            )
            for r in rows
        ]

    def count_actors_by_department(
        self,
        actor_type: ActorType,
        department_id: Optional[int] = None,
    ) -> Sequence[DepartmentHeadcount]:
        table, _ = _ACTOR_TABLES[actor_type]
        clauses = ["department_id IS NOT NULL"]
        params: list[object] = []
        if department_id is not None:
            clauses.append("department_id=%s")
            params.append(int(department_id))
        where = " AND ".join(clauses)

        with _reading("count_actors_by_department"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT department_id, COUNT(*) AS member_count
                FROM {table}
                WHERE {where}
                GROUP BY department_id
                ORDER BY department_id
                """,
                tuple(params),
            )
            rows = fetchall(cur)

        return [DepartmentHeadcount(department_id=int(r["department_id"]), count=int(r["member_count"])) for r in rows]

    def list_actor_ids(self, actor_type: ActorType, department_id: Optional[int] = None) -> Sequence[int]:
        table, key = _ACTOR_TABLES[actor_type]
        sql = f"SELECT {key} AS actor_id FROM {table}"
        params: tuple = ()
        if department_id is not None:
            sql += " WHERE department_id=%s"
            params = (int(department_id),)

        with _reading("list_actor_ids"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            rows = fetchall(cur)
        return [int(r["actor_id"]) for r in rows]

    def get_departments(self) -> Mapping[int, DepartmentInfo]:
        with _reading("get_departments"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT department_id, department_name, department_code FROM departments")
            rows = fetchall(cur)
        return {
            int(r["department_id"]): DepartmentInfo(
                department_id=int(r["department_id"]),
                name=r["department_name"],
                code=r["department_code"],
            )
            for r in rows
        }

    def get_actor_names(self, actor_type: ActorType, actor_ids: Sequence[int]) -> Mapping[int, str]:
        ids = sorted({int(i) for i in actor_ids})
        if not ids:
            return {}
        table, key = _ACTOR_TABLES[actor_type]
        placeholders = ", ".join(["%s"] * len(ids))

        with _reading("get_actor_names"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {key} AS actor_id, full_name FROM {table} WHERE {key} IN ({placeholders})", tuple(ids))
            rows = fetchall(cur)
        return {int(r["actor_id"]): r["full_name"] for r in rows}
