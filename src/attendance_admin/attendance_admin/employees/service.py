from __future__ import annotations

import io
import logging
import uuid
from datetime import date
from typing import Any, Mapping, Optional, Sequence

import qrcode

from ..common.datetime_utils import parse_iso_date
from ..common.paging import paged_fetch
from ..common.validators import normalize_cpf, optional_text, require_non_empty
from ..core.constants import DEFAULT_BATCH_SIZE, DEFAULT_EMPLOYEES_PER_PAGE, SEARCH_RESULT_LIMIT
from ..core.exceptions import NotFoundError, ValidationError
from .model import Employee, EmployeeFilters, EmployeeInput
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

INTERNAL_FIELDS_MESSAGE = "Para colaboradores internos, Loja, Cargo, Setor e Data de Início são obrigatórios"
EXTERNAL_ROLE_MESSAGE = "Para colaboradores externos, a função (role) é obrigatória"


def _parse_start_date(value: Any) -> Optional[date]:
    if value is None or isinstance(value, date):
        return value
    text = optional_text(value)
    if text is None:
        return None
    try:
        return parse_iso_date(text[:10])
    except ValueError:
        raise ValidationError("Data de Início inválida")


def build_employee_input(payload: Mapping[str, Any]) -> EmployeeInput:
    """Validate a create/update payload.

    Exactly one of the internal field set (store, position, sector,
    startDate) or ``role`` must be filled, depending on ``isInternal``.
    """

    name = require_non_empty(payload.get("name"), "Nome")
    cpf = normalize_cpf(payload.get("cpf"))
    is_internal = bool(payload.get("isInternal", payload.get("is_internal", False)))
    store = optional_text(payload.get("store"))
    position = optional_text(payload.get("position"))
    sector = optional_text(payload.get("sector"))
    start_date = _parse_start_date(payload.get("startDate", payload.get("start_date")))
    role = optional_text(payload.get("role"))

    if is_internal:
        if not (store and position and sector and start_date):
            raise ValidationError(INTERNAL_FIELDS_MESSAGE)
        role = None
    elif not role:
        raise ValidationError(EXTERNAL_ROLE_MESSAGE)

    return EmployeeInput(
        cpf=cpf,
        name=name,
        is_internal=is_internal,
        store=store,
        position=position,
        sector=sector,
        start_date=start_date,
        role=role,
    )


class EmployeeService:
    """Use cases: roster management."""

    def __init__(self, employees: EmployeeRepository, *, batch_size: int = DEFAULT_BATCH_SIZE):
        self._employees = employees
        self._batch_size = int(batch_size)

    def list_all(self) -> list[Employee]:
        return paged_fetch(
            lambda offset, limit: self._employees.list_page(offset=offset, limit=limit),
            batch_size=self._batch_size,
        )

    def list_page(
        self,
        *,
        page: int = 1,
        per_page: int = DEFAULT_EMPLOYEES_PER_PAGE,
        filters: Optional[EmployeeFilters] = None,
    ) -> dict:
        """One page of the roster table with the exact filtered total."""

        page = max(int(page), 1)
        per_page = max(int(per_page), 1)
        filters = filters or EmployeeFilters()
        total = self._employees.count(filters)
        items = self._employees.find_page(filters, offset=(page - 1) * per_page, limit=per_page)
        return {"items": list(items), "total": total, "page": page, "perPage": per_page}

    def count(self) -> int:
        return self._employees.count(EmployeeFilters())

    def get(self, employee_id: str) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Colaborador não encontrado")
        return employee

    def search(self, query: str, *, exact: bool = False) -> Sequence[Employee]:
        query = (query or "").strip()
        if not query:
            return []
        if exact:
            employee = self._employees.get_by_id(query)
            return [employee] if employee else []
        return self._employees.search(query, limit=SEARCH_RESULT_LIMIT)

    def create(self, payload: Mapping[str, Any]) -> Employee:
        data = build_employee_input(payload)
        if self._employees.get_by_cpfs([data.cpf]):
            raise ValidationError("CPF já cadastrado.")
        employee = self._employees.create(str(uuid.uuid4()), data)
        logger.info("employee %s created", employee.id)
        return employee

    def update(self, employee_id: str, payload: Mapping[str, Any]) -> Employee:
        data = build_employee_input(payload)
        for other in self._employees.get_by_cpfs([data.cpf]):
            if other.id != employee_id:
                raise ValidationError("CPF já cadastrado.")
        employee = self._employees.update(employee_id, data)
        if not employee:
            raise NotFoundError("Colaborador não encontrado")
        return employee

    def delete(self, employee_id: str) -> None:
        if not self._employees.delete(employee_id):
            raise NotFoundError("Colaborador não encontrado")
        logger.info("employee %s deleted", employee_id)

    def bulk_upsert(self, payloads: Sequence[Mapping[str, Any]]) -> dict:
        """Insert new employees and update existing ones, keyed by CPF."""

        if not payloads:
            return {"added": 0, "updated": 0, "total": 0}

        validated: list[EmployeeInput] = []
        for payload in payloads:
            try:
                validated.append(build_employee_input(payload))
            except ValidationError as e:
                raise ValidationError(f"Colaborador {payload.get('name') or '?'}: {e}")

        existing = {e.cpf: e.id for e in self._employees.get_by_cpfs([d.cpf for d in validated])}
        rows = [(existing.get(d.cpf) or str(uuid.uuid4()), d) for d in validated]
        self._employees.upsert_by_cpf(rows)

        updated = sum(1 for d in validated if d.cpf in existing)
        return {"added": len(validated) - updated, "updated": updated, "total": len(validated)}

    def qr_png(self, employee_id: str) -> io.BytesIO:
        """Badge QR code; the scanner reads the employee id back from it."""

        employee = self.get(employee_id)
        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_L,
            box_size=10,
            border=2,
        )
        qr.add_data(employee.id)
        qr.make(fit=True)
        img = qr.make_image(fill_color="black", back_color="white")

        buf = io.BytesIO()
        img.save(buf, format="PNG")
        buf.seek(0)
        return buf
