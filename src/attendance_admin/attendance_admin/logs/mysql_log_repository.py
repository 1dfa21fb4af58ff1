from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ..common.datetime_utils import to_db
from ..core.enums import LogType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause
from .model import AttendanceLog, NewLog
from .repository import LogRepository

_COLUMNS = "id, employee_id, qr_content, type, created_at, note, manual, event_id"

_INSERT = """
    INSERT INTO attendance_logs(employee_id, qr_content, type, created_at, note, manual, event_id)
    VALUES(%s,%s,%s,%s,%s,%s,%s)
"""


def _params(log: NewLog) -> tuple:
    return (
        log.employee_id,
        log.qr_content,
        log.type.value,
        to_db(log.created_at),
        log.note,
        int(log.manual),
        log.event_id,
    )


class MySQLLogRepository(LogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def fetch_window(
        self,
        *,
        start: datetime,
        end: datetime,
        types: Sequence[LogType],
        offset: int,
        limit: int,
    ) -> Sequence[AttendanceLog]:
        type_values = [t.value for t in types]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM attendance_logs
                WHERE created_at BETWEEN %s AND %s
                  AND type IN ({in_clause(type_values)})
                ORDER BY created_at ASC, id ASC
                LIMIT %s OFFSET %s
                """,
                (to_db(start), to_db(end), *type_values, int(limit), int(offset)),
            )
            return [AttendanceLog.from_row(r) for r in fetchall(cur)]

    def fetch_recent(self, *, types: Sequence[LogType], offset: int, limit: int) -> Sequence[AttendanceLog]:
        type_values = [t.value for t in types]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM attendance_logs
                WHERE type IN ({in_clause(type_values)})
                ORDER BY created_at DESC, id DESC
                LIMIT %s OFFSET %s
                """,
                (*type_values, int(limit), int(offset)),
            )
            return [AttendanceLog.from_row(r) for r in fetchall(cur)]

    def list_page(self, *, offset: int, limit: int) -> tuple[Sequence[AttendanceLog], int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS total FROM attendance_logs
                WHERE employee_id IS NOT NULL AND type IN ('checkin', 'checkout')
                """
            )
            total = int(cur.fetchone()["total"])
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM attendance_logs
                WHERE employee_id IS NOT NULL AND type IN ('checkin', 'checkout')
                ORDER BY created_at DESC, id DESC
                LIMIT %s OFFSET %s
                """,
                (int(limit), int(offset)),
            )
            return [AttendanceLog.from_row(r) for r in fetchall(cur)], total

    def last_for_employee(self, employee_id: str, *, limit: int) -> Sequence[AttendanceLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM attendance_logs
                WHERE employee_id=%s
                ORDER BY created_at DESC, id DESC
                LIMIT %s
                """,
                (employee_id, int(limit)),
            )
            return [AttendanceLog.from_row(r) for r in fetchall(cur)]

    def insert(self, log: NewLog) -> AttendanceLog:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_INSERT, _params(log))
            log_id = int(cur.lastrowid)
        return AttendanceLog(
            id=log_id,
            type=log.type,
            created_at=log.created_at,
            employee_id=log.employee_id,
            qr_content=log.qr_content,
            note=log.note,
            manual=log.manual,
            event_id=log.event_id,
        )

    def insert_many(self, logs: Sequence[NewLog]) -> int:
        if not logs:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(_INSERT, [_params(log) for log in logs])
        return len(logs)

    def distinct_employee_ids(self) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT DISTINCT employee_id FROM attendance_logs WHERE employee_id IS NOT NULL")
            return [str(r["employee_id"]) for r in fetchall(cur)]

    def delete_for_employees(self, employee_ids: Sequence[str]) -> int:
        if not employee_ids:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"DELETE FROM attendance_logs WHERE employee_id IN ({in_clause(employee_ids)})",
                tuple(employee_ids),
            )
            return int(cur.rowcount)
