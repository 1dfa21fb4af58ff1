from __future__ import annotations

from typing import Optional

from ...events.model import Event
from ...logs.model import AttendanceLog
from .base import EventCatalog, EventMatchStrategy


class DirectReferenceStrategy(EventMatchStrategy):
    """The log was written with an explicit event_id."""

    name = "direct"

    def match(self, log: AttendanceLog, catalog: EventCatalog) -> Optional[Event]:
        if log.event_id is None:
            return None
        return catalog.by_id.get(str(log.event_id))
