from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional, Sequence

from ..core.constants import PROXIMITY_WINDOW
from ..events.model import Event
from ..logs.model import AttendanceLog
from .strategies.base import EventCatalog, EventMatchStrategy
from .strategies.containment_strategy import ContainmentWindowStrategy
from .strategies.direct_strategy import DirectReferenceStrategy
from .strategies.embedded_strategy import EmbeddedIdentifierStrategy
from .strategies.proximity_strategy import ProximityStrategy


@dataclass(frozen=True)
class Resolution:
    event: Event
    strategy: str


class EventResolver:
    """Chain of match strategies; the first one that matches decides."""

    def __init__(self, events: Sequence[Event], strategies: Sequence[EventMatchStrategy]):
        self._catalog = EventCatalog.of(events)
        self._strategies = tuple(strategies)

    def resolve(self, log: AttendanceLog) -> Optional[Resolution]:
        for strategy in self._strategies:
            event = strategy.match(log, self._catalog)
            if event is not None:
                return Resolution(event=event, strategy=strategy.name)
        return None

    def resolve_event(self, log: AttendanceLog) -> Optional[Event]:
        found = self.resolve(log)
        return found.event if found else None


@dataclass
class EventResolverFactory:
    """Factory Pattern: build the resolver with the standard strategy order."""

    proximity_window: timedelta = PROXIMITY_WINDOW

    def create(self, events: Sequence[Event]) -> EventResolver:
        return EventResolver(
            events,
            [
                DirectReferenceStrategy(),
                EmbeddedIdentifierStrategy(),
                ContainmentWindowStrategy(),
                ProximityStrategy(self.proximity_window),
            ],
        )
