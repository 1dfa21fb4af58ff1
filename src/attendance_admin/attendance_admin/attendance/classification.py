from __future__ import annotations

from typing import Iterable

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, EventAttendanceReport


def is_present(record: AttendanceRecord) -> bool:
    return record.checkin_at is not None


def is_absent(record: AttendanceRecord) -> bool:
    return record.checkin_at is None


def has_problem(record: AttendanceRecord) -> bool:
    """Checked in but never checked out."""
    return record.checkin_at is not None and record.checkout_at is None


def classify(record: AttendanceRecord) -> AttendanceStatus:
    if is_absent(record):
        return AttendanceStatus.ABSENT
    if has_problem(record):
        return AttendanceStatus.PROBLEM
    return AttendanceStatus.PRESENT


def _percent(value: int, total: int) -> float:
    return 0.0 if total == 0 else round(value / total * 100, 2)


def summarize(records: Iterable[AttendanceRecord]) -> dict:
    records = list(records)
    total = len(records)
    present = sum(1 for r in records if is_present(r))
    problem = sum(1 for r in records if has_problem(r))
    manual = sum(1 for r in records if is_present(r) and r.manual)
    absent = total - present
    return {
        "total": total,
        "present": present,
        "absent": absent,
        "problem": problem,
        "manual": manual,
        "pct_present": _percent(present, total),
        "pct_absent": _percent(absent, total),
        "pct_manual": _percent(manual, total),
    }


def summarize_by_day(report: EventAttendanceReport) -> dict:
    return {day: summarize(report.records_for(day)) for day in report.days}
