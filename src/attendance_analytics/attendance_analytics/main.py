from __future__ import annotations

import importlib
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .analytics.controller import register as register_analytics
from .container import build_container
from .core.constants import DEFAULT_CACHE_SECONDS, PATTERN_DEFAULT_DAYS
from .core.logging import configure_logging
from .database.bootstrap import apply_schema, list_tables
from .database.connection import DBConfig


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))

    logger = configure_logging(
        getattr(settings, "LOG_LEVEL", "INFO"),
        json_logs=bool(getattr(settings, "LOG_JSON", False)),
    )
    logger.info("settings=%s db=%s", settings_module, DBConfig.from_mapping(db_config).describe())

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
        apply_schema(db_config, schema_path=schema_path)
        logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

    container = build_container(
        db_config=db_config,
        cache_seconds=float(getattr(settings, "ANALYTICS_CACHE_SECONDS", DEFAULT_CACHE_SECONDS)),
        pattern_days=int(getattr(settings, "PATTERN_DEFAULT_DAYS", PATTERN_DEFAULT_DAYS)),
    )

    register_analytics(app, container)

    return app
