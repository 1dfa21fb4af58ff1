from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from ..common.datetime_utils import as_utc, iso


@dataclass(frozen=True)
class Event:
    """Domain entity: an event attendance is reported against.

    ``end_date`` may equal ``start_date`` (single-day) or fall on a later
    calendar day (multi-day). Timestamps are aware UTC datetimes.
    """

    id: int
    name: str
    start_date: Optional[datetime]
    end_date: Optional[datetime]
    location: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Event":
        def _ts(key: str) -> Optional[datetime]:
            value = row.get(key)
            return as_utc(value) if value else None

        return cls(
            id=int(row["id"]),
            name=str(row.get("name") or ""),
            start_date=_ts("start_date"),
            end_date=_ts("end_date"),
            location=row.get("location"),
            description=row.get("description"),
            created_at=_ts("created_at"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "location": self.location,
            "start_date": iso(self.start_date),
            "end_date": iso(self.end_date),
            "created_at": iso(self.created_at),
        }


@dataclass(frozen=True)
class EventInput:
    name: str
    start_date: Optional[datetime]
    end_date: Optional[datetime]
    location: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class Registration:
    """Read model of ``event_registrations``."""

    event_id: int
    employee_id: str
    registered_at: Optional[datetime]
    status: Optional[str]

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Registration":
        registered_at = row.get("registered_at")
        return cls(
            event_id=int(row["event_id"]),
            employee_id=str(row["employee_id"]),
            registered_at=as_utc(registered_at) if registered_at else None,
            status=row.get("status"),
        )
