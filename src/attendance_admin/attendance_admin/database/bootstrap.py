from __future__ import annotations

import logging
import re
from contextlib import closing
from pathlib import Path
from typing import List, Mapping, Union

from .connection import DBConfig, DatabaseConnection

logger = logging.getLogger(__name__)

# schema.sql names its own database; the configured one wins.
_DATABASE_DIRECTIVES = re.compile(r"^\s*(CREATE\s+DATABASE|USE)\b[^;]*;\s*$", re.IGNORECASE | re.MULTILINE)
_LINE_COMMENT = re.compile(r"^\s*--.*$", re.MULTILINE)


def schema_statements(sql: str) -> List[str]:
    """DDL statements of a schema file, without database directives or comments.

    The schema holds plain CREATE TABLE statements only, so splitting on ';'
    is enough.
    """

    sql = _LINE_COMMENT.sub("", _DATABASE_DIRECTIVES.sub("", sql))
    return [stmt.strip() for stmt in sql.split(";") if stmt.strip()]


def ensure_database_exists(config: DBConfig) -> None:
    with closing(DatabaseConnection(config).connect(with_database=False)) as conn:
        with closing(conn.cursor()) as cur:
            cur.execute(
                f"CREATE DATABASE IF NOT EXISTS `{config.database}` "
                "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
            )
        conn.commit()


def apply_schema(db_config: Mapping, *, schema_path: Union[str, Path]) -> int:
    """Create the database if needed and run every statement of ``schema_path``."""

    config = DBConfig.from_dict(db_config)
    ensure_database_exists(config)
    statements = schema_statements(Path(schema_path).read_text(encoding="utf-8"))

    with closing(DatabaseConnection(config).connect()) as conn:
        with closing(conn.cursor()) as cur:
            for stmt in statements:
                cur.execute(stmt)
        conn.commit()

    logger.info("applied %d statements from %s to %s", len(statements), schema_path, config.describe())
    return len(statements)


def list_tables(db_config: Mapping) -> List[str]:
    with closing(DatabaseConnection(DBConfig.from_dict(db_config)).connect()) as conn:
        with closing(conn.cursor()) as cur:
            cur.execute("SHOW TABLES")
            return sorted(row[0] for row in cur.fetchall())
