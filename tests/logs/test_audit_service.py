import csv
import io

import pytest

from src.attendance_admin.attendance_admin.core.enums import LogType
from src.attendance_admin.attendance_admin.core.exceptions import NotFoundError, ValidationError
from src.attendance_admin.attendance_admin.events.model import Event
from src.attendance_admin.attendance_admin.logs.service import AuditService
from tests.fakes import external_employee, internal_employee, local


@pytest.fixture
def audit(store):
    store.employees.add(internal_employee("a", "Ana", "11111111111"))
    store.employees.add(external_employee("b", "Bruno", "22222222222"))
    return AuditService(store.logs, store.employees, store.events)


def test_perform_without_history_checks_in(store, audit, fixed_now):
    log = audit.perform(employee_id="a", now=fixed_now)

    assert log.type == LogType.CHECKIN
    assert log.created_at == fixed_now
    assert log.manual is False
    assert store.logs.rows == [log]


def test_perform_alternates_with_last_log(store, audit, fixed_now):
    store.logs.add(LogType.CHECKIN, local(2024, 3, 1, 7, 0), employee_id="a")

    assert audit.perform(employee_id="a", now=fixed_now).type == LogType.CHECKOUT
    assert audit.perform(employee_id="a", now=local(2024, 3, 1, 9, 0)).type == LogType.CHECKIN


def test_log_type_opposite():
    assert LogType.CHECKIN.opposite is LogType.CHECKOUT
    assert LogType.CHECKOUT.opposite is LogType.CHECKIN


def test_perform_resolves_employee_from_qr_content(audit, fixed_now):
    log = audit.perform(qr_content="b", now=fixed_now)

    assert log.employee_id == "b"
    assert log.qr_content == "b"


def test_perform_rejects_unknown_qr_content(audit, fixed_now):
    with pytest.raises(ValidationError, match="did not match any employee"):
        audit.perform(qr_content="not-a-badge", now=fixed_now)


def test_manual_perform_with_explicit_type_timestamp_and_reason(store, audit, fixed_now):
    log = audit.perform(
        employee_id="a",
        manual=True,
        log_type="checkout",
        timestamp="2024-03-01T20:00:00Z",
        reason="saiu sem registrar",
        now=fixed_now,
    )

    assert log.type == LogType.CHECKOUT
    assert log.manual is True
    assert log.note == "saiu sem registrar"
    assert log.created_at == local(2024, 3, 1, 17, 0)


def test_perform_rejects_unknown_type(audit, fixed_now):
    with pytest.raises(ValidationError):
        audit.perform(employee_id="a", log_type="pause", now=fixed_now)


def test_checkout_all_writes_one_checkout_per_employee(store, audit, fixed_now):
    count = audit.checkout_all(now=fixed_now)

    assert count == 2
    assert sorted(r.employee_id for r in store.logs.rows) == ["a", "b"]
    assert all(r.type == LogType.CHECKOUT and r.created_at == fixed_now for r in store.logs.rows)


def test_checkout_all_with_empty_roster(store):
    service = AuditService(store.logs, store.employees, store.events)

    with pytest.raises(NotFoundError):
        service.checkout_all()


def test_clean_orphans_deletes_only_logs_of_missing_employees(store, audit):
    for minute in range(10):
        store.logs.add(LogType.CHECKIN, local(2024, 3, 1, 9, minute), employee_id="removed")
    store.logs.add(LogType.CHECKIN, local(2024, 3, 1, 9, 0), employee_id="a")
    store.logs.add(LogType.CHECKOUT, local(2024, 3, 1, 17, 0), employee_id="b")

    result = audit.clean_orphans()

    assert result == {"orphans": 1, "deleted": 10}
    assert sorted(r.employee_id for r in store.logs.rows) == ["a", "b"]


def test_clean_orphans_when_nothing_to_do(store, audit):
    store.logs.add(LogType.CHECKIN, local(2024, 3, 1, 9, 0), employee_id="a")

    assert audit.clean_orphans() == {"orphans": 0, "deleted": 0}
    assert len(store.logs.rows) == 1


def test_list_logs_pages_newest_first(store, audit):
    for hour in range(8, 13):
        store.logs.add(LogType.CHECKIN, local(2024, 3, 1, hour, 0), employee_id="a")

    page = audit.list_logs(page=2, per_page=2)

    assert page["total"] == 5
    assert page["page"] == 2
    assert page["perPage"] == 2
    assert [r.created_at for r in page["items"]] == [local(2024, 3, 1, 10, 0), local(2024, 3, 1, 9, 0)]


def test_last_entries(store, audit):
    for hour in range(8, 15):
        store.logs.add(LogType.CHECKIN, local(2024, 3, 1, hour, 0), employee_id="a")

    entries = audit.last_entries("a")

    assert len(entries) == 5
    assert entries[0].created_at == local(2024, 3, 1, 14, 0)
    assert audit.last_entries("") == []


def test_export_csv_enriches_logs_with_employee_and_event(store, audit):
    store.events.add(
        Event(id=7, name="Feira", start_date=local(2024, 3, 1, 9, 0), end_date=local(2024, 3, 1, 18, 0), location="Expo")
    )
    store.logs.add(LogType.CHECKIN, local(2024, 3, 1, 9, 30), qr_content="a")
    store.logs.add(LogType.CHECKOUT, local(2024, 3, 1, 19, 0), employee_id="gone", manual=True, note="ajuste")

    rows = list(csv.DictReader(io.StringIO(audit.export_csv().decode("utf-8-sig"))))

    assert len(rows) == 2
    newest, oldest = rows
    assert newest["Funcionário"] == "[Colaborador não encontrado]"
    assert newest["Tipo"] == "Check-out"
    assert newest["Manual"] == "Sim"
    assert newest["Motivo"] == "ajuste"
    assert oldest["Funcionário"] == "Ana"
    assert oldest["CPF"] == "111.111.111-11"
    assert oldest["Loja"] == "Loja 01"
    assert oldest["Evento"] == "Feira"
    assert oldest["Local do Evento"] == "Expo"
    assert oldest["Data/Hora"] == "01/03/2024 09:30:00"
