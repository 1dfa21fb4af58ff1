from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from ..core.enums import LogType
from .model import AttendanceLog, NewLog


class LogRepository(Protocol):
    def fetch_window(
        self,
        *,
        start: datetime,
        end: datetime,
        types: Sequence[LogType],
        offset: int,
        limit: int,
    ) -> Sequence[AttendanceLog]:
        """Logs with ``start <= created_at <= end``, ascending by created_at."""
        raise NotImplementedError

    def fetch_recent(self, *, types: Sequence[LogType], offset: int, limit: int) -> Sequence[AttendanceLog]:
        """All logs of the given types, newest first."""
        raise NotImplementedError

    def list_page(self, *, offset: int, limit: int) -> tuple[Sequence[AttendanceLog], int]:
        """Newest-first page of logs that carry an employee, plus the total count."""
        raise NotImplementedError

    def last_for_employee(self, employee_id: str, *, limit: int) -> Sequence[AttendanceLog]:
        raise NotImplementedError

    def insert(self, log: NewLog) -> AttendanceLog:
        raise NotImplementedError

    def insert_many(self, logs: Sequence[NewLog]) -> int:
        raise NotImplementedError

    def distinct_employee_ids(self) -> Sequence[str]:
        raise NotImplementedError

    def delete_for_employees(self, employee_ids: Sequence[str]) -> int:
        raise NotImplementedError
