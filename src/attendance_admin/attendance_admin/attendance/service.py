from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Dict, Iterator, List, Optional, Sequence, Set, Tuple

from ..common.datetime_utils import end_of_local_day, get_zone
from ..common.paging import paged_fetch
from ..common.validators import require_int
from ..core.constants import DEFAULT_BATCH_SIZE, MULTI_DAY_TRAILING_WINDOW, PROXIMITY_WINDOW
from ..core.enums import LogType
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..events.model import Event, Registration
from ..events.repository import EventRepository, RegistrationRepository
from ..logs.model import AttendanceLog
from ..logs.repository import LogRepository
from .bucketing import BucketKey, bucket_logs, event_days
from .model import AttendanceRecord, EventAttendanceReport
from .resolution import EventResolver, EventResolverFactory

logger = logging.getLogger(__name__)

REPORT_LOG_TYPES = (LogType.CHECKIN, LogType.CHECKOUT)


class EventAttendanceService:
    """Use case: reconstruct per-employee, per-day attendance for one event.

    Pipeline: fetch logs/roster/events, resolve each log to an event, bucket
    the logs of this event by employee and local day, then project one
    record per employee per event day. Nothing is cached between calls.
    """

    def __init__(
        self,
        events: EventRepository,
        logs: LogRepository,
        employees: EmployeeRepository,
        registrations: Optional[RegistrationRepository] = None,
        *,
        resolver_factory: Optional[EventResolverFactory] = None,
        timezone_name: Optional[str] = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ):
        self._events = events
        self._logs = logs
        self._employees = employees
        self._registrations = registrations
        self._resolver_factory = resolver_factory or EventResolverFactory()
        self._tz = get_zone(timezone_name)
        self._batch_size = int(batch_size)

    def build_report(self, event_id: Any) -> EventAttendanceReport:
        if event_id is None or str(event_id).strip() == "":
            raise ValidationError("eventId required")
        event = self._events.get_by_id(require_int(event_id, "eventId"))
        if not event:
            raise NotFoundError("event not found")

        days = event_days(event, self._tz)
        start, end = self.fetch_window(event, days)

        logs = self._fetch_logs(start, end)
        roster = self._fetch_roster()
        resolver = self._resolver_factory.create(self._all_events(event))
        registrations = self._fetch_registrations(event.id)

        roster_ids = {e.id for e in roster}
        matched = list(self._logs_of_event(event, logs, resolver, roster_ids))
        buckets = bucket_logs(matched, days, self._tz)
        records = self._project(roster, days, buckets, registrations)

        logger.info(
            "event %s attendance: %d logs in window, %d matched, %d employees x %d days",
            event.id,
            len(logs),
            len(matched),
            len(roster),
            len(days),
        )
        return EventAttendanceReport(event=event, days=tuple(days), records=tuple(records))

    def fetch_window(self, event: Event, days: Sequence[date]) -> Tuple[datetime, datetime]:
        """Time range of logs that may belong to the event.

        Starts early enough for the proximity heuristic; multi-day events run
        one extra day to catch checkouts after midnight, single-day events to
        the end of the local day.
        """

        if event.start_date is None:
            raise ValidationError("event has no start date")
        start = event.start_date - PROXIMITY_WINDOW
        end_date = event.end_date or event.start_date
        if len(days) > 1:
            end = end_date + MULTI_DAY_TRAILING_WINDOW
        else:
            end = max(end_date, end_of_local_day(days[0], self._tz))
        return start, end

    def _fetch_logs(self, start: datetime, end: datetime) -> List[AttendanceLog]:
        return paged_fetch(
            lambda offset, limit: self._logs.fetch_window(
                start=start,
                end=end,
                types=REPORT_LOG_TYPES,
                offset=offset,
                limit=limit,
            ),
            batch_size=self._batch_size,
        )

    def _fetch_roster(self) -> List[Employee]:
        roster = paged_fetch(
            lambda offset, limit: self._employees.list_page(offset=offset, limit=limit),
            batch_size=self._batch_size,
        )
        return sorted(roster, key=lambda e: ((e.name or e.id).casefold(), e.id))

    def _all_events(self, event: Event) -> List[Event]:
        events = list(self._events.list_all())
        if not any(e.id == event.id for e in events):
            events.append(event)
        return events

    def _fetch_registrations(self, event_id: int) -> Dict[str, Registration]:
        if not self._registrations:
            return {}
        return {r.employee_id: r for r in self._registrations.list_for_event(event_id)}

    def _logs_of_event(
        self,
        event: Event,
        logs: Sequence[AttendanceLog],
        resolver: EventResolver,
        roster_ids: Set[str],
    ) -> Iterator[Tuple[str, AttendanceLog]]:
        for log in logs:
            employee_id = self._employee_of(log, roster_ids)
            if employee_id is None:
                continue
            resolved = resolver.resolve_event(log)
            if resolved is None or resolved.id != event.id:
                continue
            yield employee_id, log

    @staticmethod
    def _employee_of(log: AttendanceLog, roster_ids: Set[str]) -> Optional[str]:
        if log.employee_id and log.employee_id in roster_ids:
            return log.employee_id
        # Scanner badges carry the employee id as their QR payload.
        if log.qr_content and log.qr_content in roster_ids:
            return log.qr_content
        return None

    def _project(
        self,
        roster: Sequence[Employee],
        days: Sequence[date],
        buckets: Dict[BucketKey, List[AttendanceLog]],
        registrations: Dict[str, Registration],
    ) -> List[AttendanceRecord]:
        records: List[AttendanceRecord] = []
        for employee in roster:
            registration = registrations.get(employee.id)
            for day in days:
                records.append(
                    project_record(employee, day, buckets.get((employee.id, day), []), registration)
                )
        return records


def project_record(
    employee: Employee,
    day: date,
    logs: Sequence[AttendanceLog],
    registration: Optional[Registration] = None,
) -> AttendanceRecord:
    """First checkin and last checkout of one employee/day bucket."""

    checkins = [log for log in logs if log.type == LogType.CHECKIN]
    checkouts = [log for log in logs if log.type == LogType.CHECKOUT]
    first_in = min(checkins, key=lambda log: log.created_at) if checkins else None
    last_out = max(checkouts, key=lambda log: log.created_at) if checkouts else None
    source = first_in or last_out

    return AttendanceRecord(
        employee_id=employee.id,
        employee_name=employee.name,
        cpf=employee.cpf,
        position=employee.position,
        store=employee.store,
        sector=employee.sector,
        role=employee.role,
        is_internal=employee.is_internal,
        attendance_day=day,
        checkin_at=first_in.created_at if first_in else None,
        checkout_at=last_out.created_at if last_out else None,
        manual=bool(source and source.manual),
        note=source.note if source else None,
        registered_at=registration.registered_at if registration else None,
        registration_status=registration.status if registration else None,
    )
