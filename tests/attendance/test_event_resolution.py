from datetime import timedelta

from src.attendance_admin.attendance_admin.attendance.resolution import EventResolverFactory
from src.attendance_admin.attendance_admin.attendance.strategies.embedded_strategy import first_digit_run
from src.attendance_admin.attendance_admin.core.enums import LogType
from src.attendance_admin.attendance_admin.events.model import Event
from src.attendance_admin.attendance_admin.logs.model import AttendanceLog
from tests.fakes import local


def _event(event_id, start, end=None, name=None):
    return Event(id=event_id, name=name or f"Evento {event_id}", start_date=start, end_date=end)


def _log(created_at, **kwargs):
    return AttendanceLog(id=1, type=LogType.CHECKIN, created_at=created_at, **kwargs)


def _resolver(*events):
    return EventResolverFactory().create(list(events))


def test_direct_reference_wins_over_time_heuristics():
    running = _event(1, local(2024, 5, 10, 9, 0), local(2024, 5, 10, 18, 0))
    other = _event(2, local(2024, 4, 1, 9, 0), local(2024, 4, 1, 18, 0))

    found = _resolver(running, other).resolve(_log(local(2024, 5, 10, 10, 0), event_id=2))

    assert found.event.id == 2
    assert found.strategy == "direct"


def test_unknown_direct_reference_falls_through_to_next_strategy():
    running = _event(1, local(2024, 5, 10, 9, 0), local(2024, 5, 10, 18, 0))

    found = _resolver(running).resolve(_log(local(2024, 5, 10, 10, 0), event_id=999))

    assert found.event.id == 1
    assert found.strategy == "containment"


def test_first_digit_run_of_qr_payload_names_the_event():
    e42 = _event(42, local(2024, 1, 1, 9, 0), local(2024, 1, 1, 18, 0))
    e7 = _event(7, local(2024, 5, 10, 9, 0), local(2024, 5, 10, 18, 0))

    found = _resolver(e42, e7).resolve(_log(local(2024, 5, 10, 10, 0), qr_content="evt-42-badge"))

    assert found.event.id == 42
    assert found.strategy == "embedded"


def test_first_digit_run():
    assert first_digit_run("evt-42-badge-7") == "42"
    assert first_digit_run("no digits") is None
    assert first_digit_run(None) is None


def test_containment_prefers_most_recent_start_when_events_overlap():
    long_event = _event(1, local(2024, 5, 1, 9, 0), local(2024, 5, 31, 18, 0))
    workshop = _event(2, local(2024, 5, 10, 9, 0), local(2024, 5, 10, 18, 0))

    found = _resolver(long_event, workshop).resolve(_log(local(2024, 5, 10, 11, 0)))

    assert found.event.id == 2
    assert found.strategy == "containment"


def test_proximity_matches_early_arrivals_within_two_hours():
    event = _event(3, local(2024, 6, 1, 14, 0), local(2024, 6, 1, 18, 0))

    found = _resolver(event).resolve(_log(local(2024, 6, 1, 12, 30)))

    assert found.event.id == 3
    assert found.strategy == "proximity"


def test_proximity_picks_nearest_start():
    morning = _event(1, local(2024, 6, 1, 9, 30), local(2024, 6, 1, 10, 0))
    noon = _event(2, local(2024, 6, 1, 12, 0), local(2024, 6, 1, 13, 0))

    found = _resolver(morning, noon).resolve(_log(local(2024, 6, 1, 11, 15)))

    assert found.event.id == 2


def test_proximity_tie_keeps_most_recent_start():
    earlier = _event(1, local(2024, 6, 1, 9, 0))
    later = _event(2, local(2024, 6, 1, 11, 0))

    found = _resolver(earlier, later).resolve(_log(local(2024, 6, 1, 10, 0)))

    assert found.event.id == 2


def test_no_strategy_matches():
    event = _event(1, local(2024, 6, 1, 9, 0), local(2024, 6, 1, 18, 0))

    assert _resolver(event).resolve(_log(local(2024, 6, 3, 9, 0))) is None
    assert _resolver(event).resolve_event(_log(local(2024, 6, 3, 9, 0))) is None


def test_custom_proximity_window():
    event = _event(1, local(2024, 6, 1, 9, 0))
    resolver = EventResolverFactory(proximity_window=timedelta(minutes=30)).create([event])

    assert resolver.resolve(_log(local(2024, 6, 1, 8, 0))) is None
    assert resolver.resolve(_log(local(2024, 6, 1, 8, 45))).event.id == 1
