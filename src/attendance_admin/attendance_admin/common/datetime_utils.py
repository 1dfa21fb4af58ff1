from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from ..core.constants import DEFAULT_TIMEZONE
from ..core.exceptions import ValidationError


def get_zone(name: Optional[str] = None) -> ZoneInfo:
    return ZoneInfo(name or DEFAULT_TIMEZONE)


def now_utc() -> datetime:
    """Current time as an aware UTC datetime.

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Naive values coming from MySQL DATETIME columns are UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_db(value: Optional[datetime]) -> Optional[datetime]:
    """Aware datetime -> naive UTC for DATETIME columns."""
    if value is None:
        return None
    return as_utc(value).replace(tzinfo=None)


def parse_iso_datetime(value: Optional[str], field_name: str = "data") -> Optional[datetime]:
    """Parse an ISO 8601 timestamp; naive input is read as UTC."""
    if value is None or not str(value).strip():
        return None
    raw = str(value).strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        raise ValidationError(f"{field_name} inválida: {value!r}")
    return as_utc(parsed)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def local_day(value: datetime, tz: ZoneInfo) -> date:
    return as_utc(value).astimezone(tz).date()


def end_of_local_day(day: date, tz: ZoneInfo) -> datetime:
    """Last instant of a local calendar day, expressed in UTC."""
    start_next = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
    return (start_next - timedelta(microseconds=1)).astimezone(timezone.utc)


def format_local(value: Optional[datetime], tz: ZoneInfo, fmt: str = "%d/%m/%Y %H:%M") -> str:
    if value is None:
        return ""
    return as_utc(value).astimezone(tz).strftime(fmt)


def iso(value: Optional[datetime]) -> Optional[str]:
    return as_utc(value).isoformat() if value else None
