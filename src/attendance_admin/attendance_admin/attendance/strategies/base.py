from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence

from ...events.model import Event
from ...logs.model import AttendanceLog


@dataclass(frozen=True)
class EventCatalog:
    """Events in resolution order (start_date descending, undated last)."""

    events: tuple[Event, ...]
    by_id: Dict[str, Event] = field(default_factory=dict)

    @classmethod
    def of(cls, events: Sequence[Event]) -> "EventCatalog":
        ordered = sorted(
            events,
            key=lambda e: (e.start_date is None, -(e.start_date.timestamp() if e.start_date else 0), -e.id),
        )
        return cls(events=tuple(ordered), by_id={str(e.id): e for e in ordered})


class EventMatchStrategy(ABC):
    """Strategy Pattern: one way of linking a log to an event."""

    name: str = "base"

    @abstractmethod
    def match(self, log: AttendanceLog, catalog: EventCatalog) -> Optional[Event]:
        raise NotImplementedError
