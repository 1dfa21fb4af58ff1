from __future__ import annotations

import csv
import io
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from ..attendance.resolution import EventResolverFactory
from ..common.datetime_utils import format_local, get_zone, now_utc, parse_iso_datetime
from ..common.paging import paged_fetch
from ..common.validators import format_cpf, optional_text
from ..core.constants import (
    AUDIT_EXPORT_MAX_ROWS,
    DEFAULT_BATCH_SIZE,
    DEFAULT_LAST_ENTRIES,
    DEFAULT_LOGS_PER_PAGE,
    EMPLOYEE_LOOKUP_BATCH_SIZE,
)
from ..core.enums import LogType
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..events.repository import EventRepository
from .model import AttendanceLog, NewLog
from .repository import LogRepository

logger = logging.getLogger(__name__)

AUDIT_CSV_FIELDS = [
    "Data/Hora",
    "Funcionário",
    "CPF",
    "Loja",
    "Cargo",
    "Função",
    "Evento",
    "Local do Evento",
    "Tipo",
    "Manual",
    "Motivo",
]


class AuditService:
    """Use cases around the raw check-in/check-out log (audit trail)."""

    def __init__(
        self,
        logs: LogRepository,
        employees: EmployeeRepository,
        events: EventRepository,
        *,
        resolver_factory: Optional[EventResolverFactory] = None,
        timezone_name: Optional[str] = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ):
        self._logs = logs
        self._employees = employees
        self._events = events
        self._resolver_factory = resolver_factory or EventResolverFactory()
        self._tz = get_zone(timezone_name)
        self._batch_size = int(batch_size)

    def perform(
        self,
        *,
        employee_id: Any = None,
        qr_content: Any = None,
        manual: bool = False,
        log_type: Any = None,
        timestamp: Any = None,
        reason: Any = None,
        now: Optional[datetime] = None,
    ) -> AttendanceLog:
        """Record one check-in or check-out.

        Without an explicit type the action is the opposite of the employee's
        latest log (check-in when there is none). No locking: two concurrent
        calls for the same employee may both infer the same action.
        """

        employee_id = optional_text(employee_id)
        qr_content = optional_text(qr_content)

        if not employee_id and qr_content:
            employee = self._employees.get_by_id(qr_content)
            if employee:
                employee_id = employee.id
            else:
                logger.warning("no employee found for qr_content %r", qr_content)

        if not employee_id:
            raise ValidationError("employeeId not provided and qrContent did not match any employee")

        action = self._parse_type(log_type)
        if action is None:
            last = self._logs.last_for_employee(employee_id, limit=1)
            action = last[0].type.opposite if last else LogType.CHECKIN

        created_at = parse_iso_datetime(timestamp, "timestamp") if timestamp else None
        return self._logs.insert(
            NewLog(
                type=action,
                created_at=created_at or now or now_utc(),
                employee_id=employee_id,
                qr_content=qr_content,
                note=optional_text(reason),
                manual=bool(manual),
            )
        )

    @staticmethod
    def _parse_type(value: Any) -> Optional[LogType]:
        text = optional_text(value)
        if text is None:
            return None
        try:
            return LogType(text)
        except ValueError:
            raise ValidationError("type deve ser 'checkin' ou 'checkout'")

    def checkout_all(self, *, now: Optional[datetime] = None) -> int:
        """Insert a checkout for every employee, whatever their current state."""

        roster = paged_fetch(
            lambda offset, limit: self._employees.list_page(offset=offset, limit=limit),
            batch_size=self._batch_size,
        )
        if not roster:
            raise NotFoundError("Nenhum colaborador encontrado")

        timestamp = now or now_utc()
        count = self._logs.insert_many(
            [NewLog(type=LogType.CHECKOUT, created_at=timestamp, employee_id=e.id) for e in roster]
        )
        logger.info("checkout-all inserted %d logs", count)
        return count

    def clean_orphans(self) -> dict:
        """Delete logs whose employee no longer exists."""

        employee_ids = sorted(set(self._logs.distinct_employee_ids()))
        existing = {e.id for e in self._employees_by_id(employee_ids).values()}
        orphan_ids = [i for i in employee_ids if i not in existing]
        if not orphan_ids:
            return {"orphans": 0, "deleted": 0}

        deleted = self._logs.delete_for_employees(orphan_ids)
        logger.info("removed %d orphan logs for %d missing employees", deleted, len(orphan_ids))
        return {"orphans": len(orphan_ids), "deleted": deleted}

    def list_logs(self, *, page: int = 1, per_page: int = DEFAULT_LOGS_PER_PAGE) -> dict:
        page = max(int(page), 1)
        per_page = max(int(per_page), 1)
        items, total = self._logs.list_page(offset=(page - 1) * per_page, limit=per_page)
        return {"items": list(items), "total": total, "page": page, "perPage": per_page}

    def last_entries(self, employee_id: Optional[str], *, limit: int = DEFAULT_LAST_ENTRIES) -> Sequence[AttendanceLog]:
        employee_id = optional_text(employee_id)
        if not employee_id:
            return []
        return self._logs.last_for_employee(employee_id, limit=int(limit))

    def _employees_by_id(self, ids: Sequence[str]) -> Dict[str, Employee]:
        found: Dict[str, Employee] = {}
        for i in range(0, len(ids), EMPLOYEE_LOOKUP_BATCH_SIZE):
            for employee in self._employees.get_many(ids[i : i + EMPLOYEE_LOOKUP_BATCH_SIZE]):
                found[employee.id] = employee
        return found

    def export_rows(self) -> List[dict]:
        """Every log enriched with employee and event, newest first."""

        logs = paged_fetch(
            lambda offset, limit: self._logs.fetch_recent(
                types=(LogType.CHECKIN, LogType.CHECKOUT),
                offset=offset,
                limit=limit,
            ),
            batch_size=self._batch_size,
            max_rows=AUDIT_EXPORT_MAX_ROWS,
        )
        candidate_ids = sorted({i for log in logs for i in (log.employee_id, log.qr_content) if i})
        employees = self._employees_by_id(candidate_ids)
        resolver = self._resolver_factory.create(self._events.list_all())
        logger.info("audit export: %d logs, %d employees", len(logs), len(employees))

        rows = []
        for log in logs:
            employee = employees.get(log.employee_id or "") or employees.get(log.qr_content or "")
            event = resolver.resolve_event(log)
            rows.append(self._export_row(log, employee, event))
        return rows

    def _export_row(self, log: AttendanceLog, employee: Optional[Employee], event) -> dict:
        internal = bool(employee and employee.is_internal)
        return {
            "Data/Hora": format_local(log.created_at, self._tz, "%d/%m/%Y %H:%M:%S"),
            "Funcionário": employee.name if employee else "[Colaborador não encontrado]",
            "CPF": format_cpf(employee.cpf if employee else None),
            "Loja": (employee.store or "-") if internal else "-",
            "Cargo": (employee.position or "-") if employee else "-",
            "Função": (employee.role or "-") if employee and not internal else "-",
            "Evento": event.name if event else "-",
            "Local do Evento": (event.location or "-") if event else "-",
            "Tipo": "Check-in" if log.type == LogType.CHECKIN else "Check-out",
            "Manual": "Sim" if log.manual else "Não",
            "Motivo": log.note or "-",
        }

    def export_csv(self) -> bytes:
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=AUDIT_CSV_FIELDS)
        writer.writeheader()
        for row in self.export_rows():
            writer.writerow(row)
        return out.getvalue().encode("utf-8-sig")
