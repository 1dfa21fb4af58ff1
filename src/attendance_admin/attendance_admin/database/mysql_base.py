from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

import mysql.connector

from ..core.exceptions import StoreError
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True) -> Iterator[Tuple[Any, Any]]:
    """One unit of work: yields ``(conn, cursor)`` and commits when the block exits cleanly.

    Driver errors, including a failed connect, surface as ``StoreError``;
    any other exception rolls back and propagates unchanged.
    """

    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as exc:
        raise StoreError(f"database unavailable: {exc}") from exc

    cur = None
    try:
        cur = conn.cursor(dictionary=dictionary)
        yield conn, cur
        conn.commit()
    except mysql.connector.Error as exc:
        conn.rollback()
        raise StoreError(str(exc)) from exc
    except Exception:
        conn.rollback()
        raise
    finally:
        if cur is not None:
            cur.close()
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or ())


def in_clause(values: Sequence[Any]) -> str:
    """``%s, %s, ...`` for an ``IN (...)`` list. MySQL rejects ``IN ()``, so empty input is an error."""
    if not values:
        raise ValueError("in_clause requires at least one value")
    return ", ".join("%s" for _ in values)
