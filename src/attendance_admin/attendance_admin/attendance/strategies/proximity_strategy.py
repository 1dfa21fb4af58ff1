from __future__ import annotations

from datetime import timedelta
from typing import Optional

from ...core.constants import PROXIMITY_WINDOW
from ...events.model import Event
from ...logs.model import AttendanceLog
from .base import EventCatalog, EventMatchStrategy


class ProximityStrategy(EventMatchStrategy):
    """Log written within ``window`` of an event start.

    Several candidates: the nearest start wins; equal distances keep catalog
    order.
    """

    name = "proximity"

    def __init__(self, window: timedelta = PROXIMITY_WINDOW):
        self._window = window

    def match(self, log: AttendanceLog, catalog: EventCatalog) -> Optional[Event]:
        best: Optional[Event] = None
        best_delta: Optional[timedelta] = None
        for event in catalog.events:
            if not event.start_date:
                continue
            delta = abs(log.created_at - event.start_date)
            if delta > self._window:
                continue
            if best_delta is None or delta < best_delta:
                best, best_delta = event, delta
        return best
