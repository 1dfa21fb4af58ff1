from datetime import date

import pytest

from src.attendance_admin.attendance_admin.attendance.service import EventAttendanceService
from src.attendance_admin.attendance_admin.core.enums import LogType
from src.attendance_admin.attendance_admin.core.exceptions import NotFoundError, StoreError, ValidationError
from src.attendance_admin.attendance_admin.events.model import Event, Registration
from tests.fakes import external_employee, internal_employee, local


@pytest.fixture
def convention(store):
    store.employees.add(internal_employee("a", "Ana", "11111111111"))
    store.employees.add(external_employee("b", "Bruno", "22222222222"))
    return store.events.add(
        Event(id=10, name="Convenção", start_date=local(2024, 3, 1, 9, 0), end_date=local(2024, 3, 3, 18, 0))
    )


def _service(store, batch_size=1000):
    return EventAttendanceService(
        store.events,
        store.logs,
        store.employees,
        store.registrations,
        batch_size=batch_size,
    )


def test_multi_day_event_yields_one_record_per_employee_per_day(store, convention):
    store.logs.add(LogType.CHECKIN, local(2024, 3, 1, 9, 5), employee_id="a", event_id=10)
    store.logs.add(LogType.CHECKOUT, local(2024, 3, 1, 17, 0), employee_id="a", event_id=10)

    report = _service(store).build_report(10)

    assert report.is_multi_day
    assert report.days == (date(2024, 3, 1), date(2024, 3, 2), date(2024, 3, 3))
    assert len(report.records) == 6
    assert [(r.employee_id, r.attendance_day.day) for r in report.records] == [
        ("a", 1), ("a", 2), ("a", 3), ("b", 1), ("b", 2), ("b", 3),
    ]

    first = report.records[0]
    assert first.checkin_at == local(2024, 3, 1, 9, 5)
    assert first.checkout_at == local(2024, 3, 1, 17, 0)
    for r in report.records[1:]:
        assert r.checkin_at is None
        assert r.checkout_at is None


def test_earliest_checkin_and_latest_checkout_win(store, convention):
    store.logs.add(LogType.CHECKIN, local(2024, 3, 2, 10, 0), employee_id="a", manual=True, note="esqueceu o crachá")
    store.logs.add(LogType.CHECKIN, local(2024, 3, 2, 8, 30), employee_id="a")
    store.logs.add(LogType.CHECKOUT, local(2024, 3, 2, 12, 0), employee_id="a")
    store.logs.add(LogType.CHECKOUT, local(2024, 3, 2, 17, 45), employee_id="a")

    report = _service(store).build_report("10")
    day2 = next(r for r in report.records if r.employee_id == "a" and r.attendance_day == date(2024, 3, 2))

    assert day2.checkin_at == local(2024, 3, 2, 8, 30)
    assert day2.checkout_at == local(2024, 3, 2, 17, 45)
    assert day2.manual is False
    assert day2.note is None


def test_manual_flag_and_note_come_from_first_checkin(store, convention):
    store.logs.add(LogType.CHECKIN, local(2024, 3, 1, 9, 0), employee_id="b", manual=True, note="QR ilegível")

    report = _service(store).build_report(10)
    record = next(r for r in report.records if r.employee_id == "b" and r.attendance_day == date(2024, 3, 1))

    assert record.manual is True
    assert record.note == "QR ilegível"
    assert record.checkout_at is None


def test_qr_content_identifies_employee_when_employee_id_is_missing(store, convention):
    store.logs.add(LogType.CHECKIN, local(2024, 3, 2, 9, 10), qr_content="b")

    report = _service(store).build_report(10)
    record = next(r for r in report.records if r.employee_id == "b" and r.attendance_day == date(2024, 3, 2))

    assert record.checkin_at == local(2024, 3, 2, 9, 10)


def test_logs_resolved_to_another_event_are_ignored(store, convention):
    store.events.add(
        Event(id=11, name="Treinamento", start_date=local(2024, 3, 2, 14, 0), end_date=local(2024, 3, 2, 15, 0))
    )
    store.logs.add(LogType.CHECKIN, local(2024, 3, 2, 14, 30), employee_id="b", event_id=11)
    # Inside both events; the most recent start wins.
    store.logs.add(LogType.CHECKIN, local(2024, 3, 2, 14, 40), employee_id="a")

    report = _service(store).build_report(10)

    assert all(r.checkin_at is None for r in report.records)


def test_logs_of_unknown_employees_are_dropped(store, convention):
    store.logs.add(LogType.CHECKIN, local(2024, 3, 1, 9, 0), employee_id="ghost", event_id=10)

    report = _service(store).build_report(10)

    assert len(report.records) == 6
    assert {r.employee_id for r in report.records} == {"a", "b"}


def test_checkout_after_midnight_lands_on_last_day(store, convention):
    store.logs.add(LogType.CHECKIN, local(2024, 3, 3, 9, 0), employee_id="a", event_id=10)
    store.logs.add(LogType.CHECKOUT, local(2024, 3, 4, 0, 40), employee_id="a", event_id=10)

    report = _service(store).build_report(10)
    last = next(r for r in report.records if r.employee_id == "a" and r.attendance_day == date(2024, 3, 3))

    assert last.checkout_at == local(2024, 3, 4, 0, 40)


def test_single_day_event_has_one_record_per_employee(store):
    store.employees.add(internal_employee("a", "Ana", "11111111111"))
    store.employees.add(internal_employee("c", "Carla", "33333333333"))
    store.events.add(Event(id=5, name="Palestra", start_date=local(2024, 3, 5, 9, 0), end_date=local(2024, 3, 5, 12, 0)))
    store.logs.add(LogType.CHECKIN, local(2024, 3, 5, 7, 30), employee_id="a")
    store.logs.add(LogType.CHECKOUT, local(2024, 3, 5, 20, 0), employee_id="a", event_id=5)

    report = _service(store).build_report(5)

    assert not report.is_multi_day
    assert len(report.records) == 2
    ana, carla = report.records
    assert ana.checkin_at == local(2024, 3, 5, 7, 30)
    assert ana.checkout_at == local(2024, 3, 5, 20, 0)
    assert carla.checkin_at is None and carla.checkout_at is None


def test_logs_outside_fetch_window_are_not_considered(store):
    store.employees.add(internal_employee("a", "Ana", "11111111111"))
    store.events.add(Event(id=5, name="Palestra", start_date=local(2024, 3, 5, 9, 0), end_date=local(2024, 3, 5, 12, 0)))
    store.logs.add(LogType.CHECKIN, local(2024, 3, 5, 6, 0), employee_id="a", event_id=5)

    report = _service(store).build_report(5)

    assert report.records[0].checkin_at is None


def test_registration_enriches_records(store, convention):
    store.registrations.rows.append(
        Registration(event_id=10, employee_id="a", registered_at=local(2024, 2, 20, 10, 0), status="confirmed")
    )

    report = _service(store).build_report(10)

    ana = [r for r in report.records if r.employee_id == "a"]
    bruno = [r for r in report.records if r.employee_id == "b"]
    assert all(r.registration_status == "confirmed" for r in ana)
    assert all(r.registration_status is None for r in bruno)


def test_reads_every_batch(store, convention):
    for hour in range(9, 14):
        store.logs.add(LogType.CHECKIN, local(2024, 3, 1, hour, 0), employee_id="a", event_id=10)
    store.logs.add(LogType.CHECKOUT, local(2024, 3, 1, 17, 0), employee_id="a", event_id=10)

    report = _service(store, batch_size=2).build_report(10)

    assert [offset for offset, _ in store.logs.window_calls] == [0, 2, 4, 6]
    assert store.employees.page_calls == [(0, 2), (2, 2)]
    assert report.records[0].checkout_at == local(2024, 3, 1, 17, 0)


def test_store_failure_mid_fetch_propagates(store, convention):
    for hour in range(9, 14):
        store.logs.add(LogType.CHECKIN, local(2024, 3, 1, hour, 0), employee_id="a", event_id=10)
    store.logs.fail_at_offset = 2

    with pytest.raises(StoreError):
        _service(store, batch_size=2).build_report(10)


def test_event_id_is_validated(store, convention):
    service = _service(store)

    with pytest.raises(ValidationError, match="eventId required"):
        service.build_report(None)
    with pytest.raises(ValidationError):
        service.build_report("abc")
    with pytest.raises(NotFoundError, match="event not found"):
        service.build_report(999)


def test_event_without_start_date_is_rejected(store):
    store.events.add(Event(id=3, name="Rascunho", start_date=None, end_date=None))

    with pytest.raises(ValidationError):
        _service(store).build_report(3)


def test_fetch_window_requires_start_date(store):
    event = Event(id=3, name="Rascunho", start_date=None, end_date=None)

    with pytest.raises(ValidationError, match="no start date"):
        _service(store).fetch_window(event, [date(2024, 3, 1)])
