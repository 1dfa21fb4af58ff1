from __future__ import annotations

from dataclasses import asdict
from typing import Any, List, Optional, Sequence, Tuple

import mysql.connector

from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import Employee, EmployeeFilters, EmployeeInput
from .repository import EmployeeRepository

_COLUMNS = "id, cpf, name, is_internal, store, position, sector, start_date, role"

DUPLICATE_KEY_ERRNO = 1062


def _values(data: EmployeeInput) -> tuple:
    return (
        data.cpf,
        data.name,
        int(data.is_internal),
        data.store,
        data.position,
        data.sector,
        data.start_date,
        data.role,
    )


def _like(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _where(filters: EmployeeFilters) -> Tuple[str, List[Any]]:
    clauses: List[str] = []
    params: List[Any] = []
    for column in ("cpf", "name", "store", "position", "sector"):
        value = getattr(filters, column)
        if value:
            clauses.append(f"{column} LIKE %s")
            params.append(_like(value))

    if filters.is_internal is not None:
        clauses.append("is_internal = %s")
        params.append(int(filters.is_internal))
    elif filters.role:
        clauses.append("role LIKE %s")
        params.append(_like(filters.role))

    if not clauses:
        return "", params
    return "WHERE " + " AND ".join(clauses), params


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_page(self, *, offset: int, limit: int) -> Sequence[Employee]:
        return self.find_page(EmployeeFilters(), offset=offset, limit=limit)

    def find_page(self, filters: EmployeeFilters, *, offset: int, limit: int) -> Sequence[Employee]:
        where, params = _where(filters)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees {where} ORDER BY name ASC, id ASC LIMIT %s OFFSET %s",
                (*params, int(limit), int(offset)),
            )
            return [Employee.from_row(r) for r in fetchall(cur)]

    def count(self, filters: EmployeeFilters) -> int:
        where, params = _where(filters)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM employees {where}", tuple(params))
            return int(fetchone(cur)["total"])

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE id=%s", (employee_id,))
            row = fetchone(cur)
            return Employee.from_row(row) if row else None

    def get_many(self, employee_ids: Sequence[str]) -> Sequence[Employee]:
        if not employee_ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE id IN ({in_clause(employee_ids)})",
                tuple(employee_ids),
            )
            return [Employee.from_row(r) for r in fetchall(cur)]

    def get_by_cpfs(self, cpfs: Sequence[str]) -> Sequence[Employee]:
        if not cpfs:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE cpf IN ({in_clause(cpfs)})",
                tuple(cpfs),
            )
            return [Employee.from_row(r) for r in fetchall(cur)]

    def search(self, query: str, *, limit: int) -> Sequence[Employee]:
        pattern = f"%{query}%"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM employees
                WHERE name LIKE %s OR cpf LIKE %s
                ORDER BY name ASC
                LIMIT %s
                """,
                (pattern, pattern, int(limit)),
            )
            return [Employee.from_row(r) for r in fetchall(cur)]

    def create(self, employee_id: str, data: EmployeeInput) -> Employee:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    f"INSERT INTO employees({_COLUMNS}) VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)",
                    (employee_id, *_values(data)),
                )
            except mysql.connector.IntegrityError as exc:
                if exc.errno == DUPLICATE_KEY_ERRNO:
                    raise ValidationError("CPF já cadastrado.") from exc
                raise
        return Employee(id=employee_id, **asdict(data))

    def update(self, employee_id: str, data: EmployeeInput) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    """
                    UPDATE employees
                    SET cpf=%s, name=%s, is_internal=%s, store=%s, position=%s,
                        sector=%s, start_date=%s, role=%s
                    WHERE id=%s
                    """,
                    (*_values(data), employee_id),
                )
            except mysql.connector.IntegrityError as exc:
                if exc.errno == DUPLICATE_KEY_ERRNO:
                    raise ValidationError("CPF já cadastrado.") from exc
                raise
        return self.get_by_id(employee_id)

    def delete(self, employee_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM employees WHERE id=%s", (employee_id,))
            return cur.rowcount > 0

    def upsert_by_cpf(self, rows: Sequence[tuple[str, EmployeeInput]]) -> int:
        if not rows:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                f"""
                INSERT INTO employees({_COLUMNS}) VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    name=VALUES(name), is_internal=VALUES(is_internal), store=VALUES(store),
                    position=VALUES(position), sector=VALUES(sector),
                    start_date=VALUES(start_date), role=VALUES(role)
                """,
                [(employee_id, *_values(data)) for employee_id, data in rows],
            )
        return len(rows)
