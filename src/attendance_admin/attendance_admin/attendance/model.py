from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import iso
from ..events.model import Event


@dataclass(frozen=True)
class AttendanceRecord:
    """Read model: one employee on one event day.

    Derived on every report request, never persisted. Both timestamps are
    None for an employee with no logs that day (absent).
    """

    employee_id: str
    employee_name: str
    cpf: str
    position: Optional[str]
    store: Optional[str]
    sector: Optional[str]
    role: Optional[str]
    is_internal: bool
    attendance_day: date
    checkin_at: Optional[datetime] = None
    checkout_at: Optional[datetime] = None
    manual: bool = False
    note: Optional[str] = None
    registered_at: Optional[datetime] = None
    registration_status: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "cpf": self.cpf,
            "position": self.position,
            "store": self.store,
            "sector": self.sector,
            "role": self.role,
            "isInternal": self.is_internal,
            "attendance_day": self.attendance_day.isoformat(),
            "checkin_at": iso(self.checkin_at),
            "checkout_at": iso(self.checkout_at),
            "manual": self.manual,
            "note": self.note,
            "registered_at": iso(self.registered_at),
            "registration_status": self.registration_status,
        }


@dataclass(frozen=True)
class EventAttendanceReport:
    event: Event
    days: tuple[date, ...]
    records: tuple[AttendanceRecord, ...]

    @property
    def is_multi_day(self) -> bool:
        return len(self.days) > 1

    def records_for(self, day: date) -> list[AttendanceRecord]:
        return [r for r in self.records if r.attendance_day == day]
