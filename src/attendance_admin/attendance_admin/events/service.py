from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import parse_iso_datetime
from ..common.validators import optional_text, require_int, require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from .model import Event, EventInput
from .repository import EventRepository


def build_event_input(payload: Mapping[str, Any]) -> EventInput:
    name = require_non_empty(payload.get("name"), "name")
    start = parse_iso_datetime(payload.get("startDate"), "startDate")
    end = parse_iso_datetime(payload.get("endDate"), "endDate")
    if start and end and end < start:
        raise ValidationError("endDate deve ser posterior a startDate")
    return EventInput(
        name=name,
        start_date=start,
        end_date=end,
        location=optional_text(payload.get("location")),
        description=optional_text(payload.get("description")),
    )


class EventService:
    """Use cases: event management."""

    def __init__(self, events: EventRepository):
        self._events = events

    def list(self, query: Optional[str] = None) -> Sequence[Event]:
        return self._events.list_all(name_query=optional_text(query))

    def get(self, event_id: Any) -> Event:
        if event_id is None or str(event_id).strip() == "":
            raise ValidationError("eventId required")
        event = self._events.get_by_id(require_int(event_id, "eventId"))
        if not event:
            raise NotFoundError("event not found")
        return event

    def create(self, payload: Mapping[str, Any]) -> Event:
        return self._events.create(build_event_input(payload))

    def update(self, event_id: Any, payload: Mapping[str, Any]) -> Event:
        if event_id is None or str(event_id).strip() == "":
            raise ValidationError("event id is required")
        data = build_event_input(payload)
        event = self._events.update(require_int(event_id, "event id"), data)
        if not event:
            raise NotFoundError("event not found")
        return event
