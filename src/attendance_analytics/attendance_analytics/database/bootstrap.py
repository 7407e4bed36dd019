from __future__ import annotations

import random
import re
from datetime import datetime, time, timedelta, timezone
from pathlib import Path
from typing import Iterator, Optional

from ..core.enums import ActorType, AttendanceStatus
from ..core.logging import get_logger
from .connection import DatabaseConnection, DBConfig
from .mysql_base import db_cursor, to_db_datetime

logger = get_logger("database.bootstrap")

SAMPLE_DEPARTMENTS = (
    ("Computer Science", "CS"),
    ("Information Technology", "IT"),
    ("Business Administration", "BA"),
)

# Roughly what a healthy campus looks like; tweak to exercise risk tiers.
SAMPLE_STATUS_WEIGHTS = (
    (AttendanceStatus.PRESENT, 78),
    (AttendanceStatus.LATE, 10),
    (AttendanceStatus.ABSENT, 9),
    (AttendanceStatus.EXCUSED, 3),
)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterator[str]:
    """Split on ';' outside quotes and drop ``--`` comment lines."""
    lines = [line for line in sql.splitlines() if not line.lstrip().startswith("--")]
    buf: list[str] = []
    quote: Optional[str] = None

    for ch in "\n".join(lines):
        if quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue
        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    config = DBConfig.from_mapping(db_config)
    with db_cursor(DatabaseConnection(config), dictionary=False, with_database=False) as (_, cur):
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    with db_cursor(DatabaseConnection(DBConfig.from_mapping(db_config)), dictionary=False) as (_, cur):
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)


def list_tables(db_config: dict) -> list[str]:
    with db_cursor(DatabaseConnection(DBConfig.from_mapping(db_config)), dictionary=False) as (_, cur):
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]


def seed_sample_attendance(
    db_config: dict,
    *,
    actor_type: ActorType = ActorType.INSTRUCTOR,
    actors_per_department: int = 5,
    days: int = 90,
    now: Optional[datetime] = None,
    seed: int = 42,
) -> int:
    """Administrative operation: insert synthetic attendance for demos.

    Never called from a read path. Weekdays only, one check-in per actor per
    day between 07:00 and 10:59 UTC. Returns the number of events inserted.
    """
    rng = random.Random(seed)
    now = now or datetime.now(timezone.utc)
    table, key = ("students", "student_id") if actor_type == ActorType.STUDENT else ("instructors", "instructor_id")
    statuses = [s for s, _ in SAMPLE_STATUS_WEIGHTS]
    weights = [w for _, w in SAMPLE_STATUS_WEIGHTS]

    inserted = 0
    with db_cursor(DatabaseConnection(DBConfig.from_mapping(db_config))) as (_, cur):
        actor_ids: list[int] = []
        for name, code in SAMPLE_DEPARTMENTS:
            cur.execute("SELECT department_id FROM departments WHERE department_code=%s", (code,))
            row = cur.fetchone()
            if row:
                department_id = int(row["department_id"])
            else:
                cur.execute(
                    "INSERT INTO departments (department_name, department_code) VALUES (%s, %s)",
                    (name, code),
                )
                department_id = int(cur.lastrowid)

            for n in range(actors_per_department):
                cur.execute(
                    f"INSERT INTO {table} (full_name, department_id) VALUES (%s, %s)",
                    (f"Sample {code} {actor_type.value.title()} {n + 1}", department_id),
                )
                actor_ids.append(int(cur.lastrowid))

        first_day = (now - timedelta(days=days)).date()
        for offset in range(days + 1):
            day = first_day + timedelta(days=offset)
            if day.weekday() >= 5:
                continue
            for actor_id in actor_ids:
                stamp = datetime.combine(day, time(hour=rng.randint(7, 10), minute=rng.randint(0, 59)), tzinfo=timezone.utc)
                if stamp > now:
                    continue
                status = rng.choices(statuses, weights=weights)[0]
                cur.execute(
                    f"""
                    INSERT INTO attendance (user_type, {key}, subject_schedule_id, status, timestamp)
                    VALUES (%s, %s, %s, %s, %s)
                    """,
                    (actor_type.value, actor_id, rng.randint(1, 6), status.value, to_db_datetime(stamp)),
                )
                inserted += 1

    logger.info("Seeded %d sample %s attendance events", inserted, actor_type.value.lower())
    return inserted
