from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from ..common.datetime_utils import as_utc, iso
from ..core.enums import LogType


@dataclass(frozen=True)
class AttendanceLog:
    """Immutable check-in/check-out fact written by the scanner or by hand.

    ``employee_id``, ``qr_content`` and ``event_id`` are all optional; the
    link between a log and an event is inferred at report time.
    """

    id: int
    type: LogType
    created_at: datetime
    employee_id: Optional[str] = None
    qr_content: Optional[str] = None
    note: Optional[str] = None
    manual: bool = False
    event_id: Optional[int] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "AttendanceLog":
        event_id = row.get("event_id")
        employee_id = row.get("employee_id")
        return cls(
            id=int(row["id"]),
            type=LogType(row["type"]),
            created_at=as_utc(row["created_at"]),
            employee_id=str(employee_id) if employee_id else None,
            qr_content=row.get("qr_content"),
            note=row.get("note"),
            manual=bool(row.get("manual")),
            event_id=int(event_id) if event_id is not None else None,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "employee_id": self.employee_id,
            "qr_content": self.qr_content,
            "type": self.type.value,
            "created_at": iso(self.created_at),
            "note": self.note,
            "manual": self.manual,
            "event_id": self.event_id,
        }


@dataclass(frozen=True)
class NewLog:
    """Insert payload for ``attendance_logs``."""

    type: LogType
    created_at: datetime
    employee_id: Optional[str] = None
    qr_content: Optional[str] = None
    note: Optional[str] = None
    manual: bool = False
    event_id: Optional[int] = None
