from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Mapping, Optional

from ..common.validators import optional_text


@dataclass(frozen=True)
class Employee:
    """Domain entity: a roster member.

    Internal employees carry store/position/sector/start_date; external ones
    (staff, security, ...) carry a role instead.
    """

    id: str
    cpf: str
    name: str
    is_internal: bool
    store: Optional[str] = None
    position: Optional[str] = None
    sector: Optional[str] = None
    start_date: Optional[date] = None
    role: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Employee":
        return cls(
            id=str(row["id"]),
            cpf=str(row.get("cpf") or ""),
            name=str(row.get("name") or ""),
            is_internal=bool(row.get("is_internal")),
            store=row.get("store"),
            position=row.get("position"),
            sector=row.get("sector"),
            start_date=row.get("start_date"),
            role=row.get("role"),
        )

    def to_dict(self) -> dict:
        data = asdict(self)
        data["start_date"] = self.start_date.isoformat() if self.start_date else None
        return data


@dataclass(frozen=True)
class EmployeeInput:
    """Validated write payload (no id)."""

    cpf: str
    name: str
    is_internal: bool
    store: Optional[str] = None
    position: Optional[str] = None
    sector: Optional[str] = None
    start_date: Optional[date] = None
    role: Optional[str] = None


INTERNAL_TYPE = "interno"
EXTERNAL_TYPE = "externo"

_FILTER_FIELDS = ("cpf", "name", "store", "position", "sector", "type")


@dataclass(frozen=True)
class EmployeeFilters:
    """Roster table filters, all case-insensitive substrings.

    ``type`` is ``interno`` or ``externo``; any other value matches the role.
    """

    cpf: Optional[str] = None
    name: Optional[str] = None
    store: Optional[str] = None
    position: Optional[str] = None
    sector: Optional[str] = None
    type: Optional[str] = None

    @classmethod
    def from_mapping(cls, args: Mapping[str, Any]) -> "EmployeeFilters":
        values = {f: optional_text(args.get(f)) for f in _FILTER_FIELDS}
        if values["cpf"]:
            # CPFs are stored as digits; "123.456" should still match.
            values["cpf"] = re.sub(r"\D", "", values["cpf"]) or values["cpf"]
        return cls(**values)

    @property
    def is_internal(self) -> Optional[bool]:
        kind = (self.type or "").lower()
        if kind == INTERNAL_TYPE:
            return True
        if kind == EXTERNAL_TYPE:
            return False
        return None

    @property
    def role(self) -> Optional[str]:
        return self.type if self.type and self.is_internal is None else None
