from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import Container, build_container
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .deviations.controller import register as register_deviations
from .ladders.controller import register as register_ladders
from .payroll.controller import register as register_payroll
from .timesheets.model import TimesheetSettings

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]


def timesheet_settings_from(settings) -> TimesheetSettings:
    return TimesheetSettings(
        auto_approve_within_margin=bool(getattr(settings, "AUTO_APPROVE_WITHIN_MARGIN", False)),
        margin_minutes=int(getattr(settings, "DEVIATION_MARGIN_MINUTES", 5)),
        threshold_minutes=int(getattr(settings, "DEVIATION_THRESHOLD_MINUTES", 5)),
    )


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
            logger.info("demo seed ready")

        container = build_container(db_config=db_config, settings=timesheet_settings_from(settings))

    register_ladders(app, container)
    register_deviations(app, container)
    register_payroll(app, container)

    return app
