from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee, EmployeeFilters, EmployeeInput


class EmployeeRepository(Protocol):
    """Repository interface for the roster.

    Services depend on this interface, never on a concrete database.
    """

    def list_page(self, *, offset: int, limit: int) -> Sequence[Employee]:
        """Employees ordered by name then id."""
        raise NotImplementedError

    def find_page(self, filters: EmployeeFilters, *, offset: int, limit: int) -> Sequence[Employee]:
        """One page of the filtered roster, ordered by name then id."""
        raise NotImplementedError

    def count(self, filters: EmployeeFilters) -> int:
        raise NotImplementedError

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def get_many(self, employee_ids: Sequence[str]) -> Sequence[Employee]:
        raise NotImplementedError

    def get_by_cpfs(self, cpfs: Sequence[str]) -> Sequence[Employee]:
        raise NotImplementedError

    def search(self, query: str, *, limit: int) -> Sequence[Employee]:
        raise NotImplementedError

    def create(self, employee_id: str, data: EmployeeInput) -> Employee:
        raise NotImplementedError

    def update(self, employee_id: str, data: EmployeeInput) -> Optional[Employee]:
        raise NotImplementedError

    def delete(self, employee_id: str) -> bool:
        raise NotImplementedError

    def upsert_by_cpf(self, rows: Sequence[tuple[str, EmployeeInput]]) -> int:
        """Insert or update on CPF conflict; returns the number of rows sent."""
        raise NotImplementedError
