from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from zoneinfo import ZoneInfo

from .attendance.resolution import EventResolverFactory
from .attendance.service import EventAttendanceService
from .common.datetime_utils import get_zone
from .core.constants import DEFAULT_BATCH_SIZE
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.service import EmployeeService
from .events.mysql_event_repository import MySQLEventRepository, MySQLRegistrationRepository
from .events.service import EventService
from .logs.mysql_log_repository import MySQLLogRepository
from .logs.service import AuditService


@dataclass(frozen=True)
class Container:
    employee_service: EmployeeService
    event_service: EventService
    audit_service: AuditService
    attendance_service: EventAttendanceService
    timezone: ZoneInfo
    conn: Optional[DatabaseConnection] = None


def build_services(
    *,
    employees_repo,
    events_repo,
    logs_repo,
    registrations_repo=None,
    timezone_name: Optional[str] = None,
    batch_size: int = DEFAULT_BATCH_SIZE,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services around any set of repositories (MySQL or in-memory)."""

    resolver_factory = EventResolverFactory()
    return Container(
        employee_service=EmployeeService(employees_repo, batch_size=batch_size),
        event_service=EventService(events_repo),
        audit_service=AuditService(
            logs_repo,
            employees_repo,
            events_repo,
            resolver_factory=resolver_factory,
            timezone_name=timezone_name,
            batch_size=batch_size,
        ),
        attendance_service=EventAttendanceService(
            events_repo,
            logs_repo,
            employees_repo,
            registrations_repo,
            resolver_factory=resolver_factory,
            timezone_name=timezone_name,
            batch_size=batch_size,
        ),
        timezone=get_zone(timezone_name),
        conn=conn,
    )


def build_container(
    *,
    db_config: dict,
    timezone_name: Optional[str] = None,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return build_services(
        employees_repo=MySQLEmployeeRepository(conn),
        events_repo=MySQLEventRepository(conn),
        logs_repo=MySQLLogRepository(conn),
        registrations_repo=MySQLRegistrationRepository(conn),
        timezone_name=timezone_name,
        batch_size=batch_size,
        conn=conn,
    )
