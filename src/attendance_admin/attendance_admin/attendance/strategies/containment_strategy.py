from __future__ import annotations

from typing import Optional

from ...events.model import Event
from ...logs.model import AttendanceLog
from .base import EventCatalog, EventMatchStrategy


class ContainmentWindowStrategy(EventMatchStrategy):
    """Log written while the event was running; first event in catalog order wins."""

    name = "containment"

    def match(self, log: AttendanceLog, catalog: EventCatalog) -> Optional[Event]:
        for event in catalog.events:
            if event.start_date and event.end_date and event.start_date <= log.created_at <= event.end_date:
                return event
        return None
