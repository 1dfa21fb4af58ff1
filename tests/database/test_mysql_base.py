import mysql.connector
import pytest

from src.attendance_admin.attendance_admin.core.exceptions import StoreError
from src.attendance_admin.attendance_admin.database.mysql_base import db_cursor


class FakeCursor:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, cursor_error=None):
        self.cursor_error = cursor_error
        self.cursors = []
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=False):
        if self.cursor_error:
            raise self.cursor_error
        cur = FakeCursor()
        self.cursors.append(cur)
        return cur

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeFactory:
    def __init__(self, conn=None, connect_error=None):
        self.conn = conn
        self.connect_error = connect_error

    def connect(self):
        if self.connect_error:
            raise self.connect_error
        return self.conn


def test_commits_and_closes_on_success():
    conn = FakeConnection()

    with db_cursor(FakeFactory(conn)) as (_, cur):
        assert cur is conn.cursors[0]

    assert conn.committed and not conn.rolled_back
    assert conn.cursors[0].closed and conn.closed


def test_driver_error_rolls_back_as_store_error():
    conn = FakeConnection()

    with pytest.raises(StoreError, match="lock wait timeout"):
        with db_cursor(FakeFactory(conn)):
            raise mysql.connector.Error("lock wait timeout")

    assert conn.rolled_back and not conn.committed
    assert conn.cursors[0].closed and conn.closed


def test_other_errors_propagate_unchanged():
    conn = FakeConnection()

    with pytest.raises(KeyError):
        with db_cursor(FakeFactory(conn)):
            raise KeyError("total")

    assert conn.rolled_back and conn.closed


def test_failed_cursor_still_closes_connection():
    conn = FakeConnection(cursor_error=mysql.connector.Error("server has gone away"))

    with pytest.raises(StoreError, match="server has gone away"):
        with db_cursor(FakeFactory(conn)):
            pass

    assert conn.closed
    assert conn.cursors == []


def test_failed_connect_is_store_error():
    factory = FakeFactory(connect_error=mysql.connector.Error("refused"))

    with pytest.raises(StoreError, match="database unavailable"):
        with db_cursor(factory):
            pass
