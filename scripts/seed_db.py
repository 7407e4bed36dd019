"""Insert synthetic attendance so the dashboard has something to show.

This writes to the configured database; the analytics endpoint never seeds.
"""
from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.attendance_analytics.attendance_analytics.core.enums import ActorType
from src.attendance_analytics.attendance_analytics.core.logging import configure_logging
from src.attendance_analytics.attendance_analytics.database.bootstrap import seed_sample_attendance


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--type",
        dest="actor_type",
        choices=[a.value.lower() for a in ActorType],
        default="instructor",
    )
    parser.add_argument("--per-department", type=int, default=5)
    parser.add_argument("--days", type=int, default=90)
    parser.add_argument("--seed", type=int, default=42)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)
    logger = configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    inserted = seed_sample_attendance(
        db_config,
        actor_type=ActorType(args.actor_type.upper()),
        actors_per_department=args.per_department,
        days=args.days,
        seed=args.seed,
    )
    logger.info(
        "Seeded %d events -> %s@%s:%s/%s",
        inserted,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )


if __name__ == "__main__":
    main()
