from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Event, EventInput, Registration


class EventRepository(Protocol):
    def list_all(self, *, name_query: Optional[str] = None) -> Sequence[Event]:
        """Events ordered by start_date descending (no start date last)."""
        raise NotImplementedError

    def get_by_id(self, event_id: int) -> Optional[Event]:
        raise NotImplementedError

    def create(self, data: EventInput) -> Event:
        raise NotImplementedError

    def update(self, event_id: int, data: EventInput) -> Optional[Event]:
        raise NotImplementedError


class RegistrationRepository(Protocol):
    def list_for_event(self, event_id: int) -> Sequence[Registration]:
        raise NotImplementedError
