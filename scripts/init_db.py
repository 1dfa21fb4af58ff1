"""Create the database and its tables from database/schema.sql.

Usage: python scripts/init_db.py [--env production] [--schema path/to/schema.sql]
"""
from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.attendance_admin.attendance_admin.database.bootstrap import apply_schema, list_tables
from src.attendance_admin.attendance_admin.database.connection import DBConfig

logger = logging.getLogger("init_db")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--env", help="settings to use (development, testing, production); defaults to APP_ENV")
    parser.add_argument("--schema", type=Path, default=REPO_ROOT / "database" / "schema.sql")
    args = parser.parse_args(argv)

    load_dotenv(REPO_ROOT / ".env", override=False)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    settings = importlib.import_module(get_settings_module(args.env))
    db_config = dict(settings.DB_CONFIG)

    count = apply_schema(db_config, schema_path=args.schema)
    tables = list_tables(db_config)
    logger.info("%d statements applied to %s; tables: %s", count, DBConfig.from_dict(db_config).describe(), ", ".join(tables))
    return 0


if __name__ == "__main__":
    sys.exit(main())
