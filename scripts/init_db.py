from __future__ import annotations

import importlib
from pathlib import Path

from dotenv import load_dotenv

from teacher_payroll.core.logging_config import configure_logging, get_logger
from teacher_payroll.database.bootstrap import apply_schema, list_tables
from teacher_payroll.database.connection import DBConfig, DatabaseConnection
from teacher_payroll.settings import get_settings_module

logger = get_logger("scripts.init_db")


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    conn = DatabaseConnection(DBConfig.from_dict(dict(settings.DB_CONFIG)))

    schema_path = Path(__file__).resolve().parents[1] / "database" / "schema.sql"
    applied = apply_schema(conn, schema_path=schema_path)
    tables = list_tables(conn)
    cfg = conn.config
    logger.info(
        "applied %d statements -> %s@%s:%s/%s (tables=%d)",
        applied,
        cfg.user,
        cfg.host,
        cfg.port,
        cfg.database,
        len(tables),
    )


if __name__ == "__main__":
    main()
