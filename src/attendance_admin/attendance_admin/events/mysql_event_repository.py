from __future__ import annotations

from typing import Optional, Sequence

from ..common.datetime_utils import now_utc, to_db
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Event, EventInput, Registration
from .repository import EventRepository, RegistrationRepository

_COLUMNS = "id, name, description, location, start_date, end_date, created_at"


class MySQLEventRepository(EventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self, *, name_query: Optional[str] = None) -> Sequence[Event]:
        where = ""
        params: tuple = ()
        if name_query:
            where = "WHERE name LIKE %s"
            params = (f"%{name_query}%",)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM events
                {where}
                ORDER BY start_date IS NULL, start_date DESC, id DESC
                """,
                params,
            )
            return [Event.from_row(r) for r in fetchall(cur)]

    def get_by_id(self, event_id: int) -> Optional[Event]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM events WHERE id=%s", (int(event_id),))
            row = fetchone(cur)
            return Event.from_row(row) if row else None

    def create(self, data: EventInput) -> Event:
        created_at = now_utc()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO events(name, description, location, start_date, end_date, created_at)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    data.name,
                    data.description,
                    data.location,
                    to_db(data.start_date),
                    to_db(data.end_date),
                    to_db(created_at),
                ),
            )
            event_id = int(cur.lastrowid)
        return Event(
            id=event_id,
            name=data.name,
            start_date=data.start_date,
            end_date=data.end_date,
            location=data.location,
            description=data.description,
            created_at=created_at,
        )

    def update(self, event_id: int, data: EventInput) -> Optional[Event]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE events
                SET name=%s, description=%s, location=%s, start_date=%s, end_date=%s
                WHERE id=%s
                """,
                (
                    data.name,
                    data.description,
                    data.location,
                    to_db(data.start_date),
                    to_db(data.end_date),
                    int(event_id),
                ),
            )
        return self.get_by_id(event_id)


class MySQLRegistrationRepository(RegistrationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_event(self, event_id: int) -> Sequence[Registration]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT event_id, employee_id, registered_at, status
                FROM event_registrations
                WHERE event_id=%s
                ORDER BY registered_at ASC
                """,
                (int(event_id),),
            )
            return [Registration.from_row(r) for r in fetchall(cur)]
