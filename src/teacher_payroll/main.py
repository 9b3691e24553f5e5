from __future__ import annotations

import importlib
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .settings import get_settings_module

from .core.logging_config import configure_logging, get_logger
from .database.bootstrap import apply_schema, list_tables
from .database.connection import DBConfig, DatabaseConnection

from .container import Container, build_container
from .deductions.controller import register as register_waivers
from .payroll.controller import register as register_salaries
from .schedules.controller import register as register_schedules

logger = get_logger("main")

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

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
            conn = DatabaseConnection(DBConfig.from_dict(db_config))
            apply_schema(conn, schema_path=SCHEMA_PATH)
            logger.info("schema ready (tables=%d)", len(list_tables(conn)))

        container = build_container(
            db_config=db_config,
            default_tenant_id=str(getattr(settings, "PAYROLL_DEFAULT_TENANT", "default")),
            batch_workers=int(getattr(settings, "PAYROLL_BATCH_WORKERS", 4)),
        )

    register_salaries(app, container)
    register_waivers(app, container)
    register_schedules(app, container)

    return app
