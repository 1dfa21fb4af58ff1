from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, Iterable, List, Sequence, Tuple
from zoneinfo import ZoneInfo

from ..common.datetime_utils import local_day
from ..core.exceptions import ValidationError
from ..events.model import Event
from ..logs.model import AttendanceLog

BucketKey = Tuple[str, date]


def event_days(event: Event, tz: ZoneInfo) -> list[date]:
    """Every local calendar day from start to end, inclusive.

    A missing end date means the event lasts one day.
    """

    if not event.start_date:
        raise ValidationError("event has no start date")
    first = local_day(event.start_date, tz)
    last = local_day(event.end_date, tz) if event.end_date else first
    if last < first:
        last = first

    days = []
    current = first
    while current <= last:
        days.append(current)
        current += timedelta(days=1)
    return days


def bucket_logs(
    logs: Iterable[Tuple[str, AttendanceLog]],
    days: Sequence[date],
    tz: ZoneInfo,
) -> Dict[BucketKey, List[AttendanceLog]]:
    """Group ``(employee_id, log)`` pairs by employee and local day.

    Logs before the first day are kept on the first day and logs after the
    last day (checkouts past midnight) on the last day. Single-day events
    therefore end up with one bucket per employee.
    """

    if not days:
        return {}
    first, last = days[0], days[-1]

    buckets: Dict[BucketKey, List[AttendanceLog]] = defaultdict(list)
    for employee_id, log in logs:
        day = local_day(log.created_at, tz)
        if day < first:
            day = first
        elif day > last:
            day = last
        buckets[(employee_id, day)].append(log)
    return buckets
