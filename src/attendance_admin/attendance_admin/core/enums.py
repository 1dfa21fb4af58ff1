from __future__ import annotations

from enum import Enum


class LogType(str, Enum):
    """Kind of an attendance log row."""

    CHECKIN = "checkin"
    CHECKOUT = "checkout"

    @property
    def opposite(self) -> "LogType":
        return LogType.CHECKOUT if self is LogType.CHECKIN else LogType.CHECKIN


class AttendanceStatus(str, Enum):
    """Classification of a projected attendance record."""

    PRESENT = "present"
    ABSENT = "absent"
    PROBLEM = "problem"
