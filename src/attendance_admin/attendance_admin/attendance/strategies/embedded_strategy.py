from __future__ import annotations

import re
from typing import Optional

from ...events.model import Event
from ...logs.model import AttendanceLog
from .base import EventCatalog, EventMatchStrategy

_FIRST_DIGITS = re.compile(r"\d+")


def first_digit_run(text: Optional[str]) -> Optional[str]:
    if not text:
        return None
    m = _FIRST_DIGITS.search(text)
    return m.group(0) if m else None


class EmbeddedIdentifierStrategy(EventMatchStrategy):
    """First run of digits in the QR payload, e.g. ``evt-42-badge`` -> event 42."""

    name = "embedded"

    def match(self, log: AttendanceLog, catalog: EventCatalog) -> Optional[Event]:
        digits = first_digit_run(log.qr_content)
        if digits is None:
            return None
        return catalog.by_id.get(digits)
