from datetime import time, timedelta

import mysql.connector
import pytest

from src.salary_system.salary_system.core.exceptions import StoreUnavailableError
from src.salary_system.salary_system.database.bootstrap import iter_sql_statements
from src.salary_system.salary_system.database.connection import DBConfig, DatabaseConnection
from src.salary_system.salary_system.database.mysql_base import db_cursor, normalize_mysql_time, slot_text
from tests.fakes import FakeConnectionFactory


def test_connector_errors_become_store_unavailable():
    factory = FakeConnectionFactory(error=mysql.connector.errors.OperationalError("Lost connection"))

    with pytest.raises(StoreUnavailableError) as exc_info:
        with db_cursor(factory) as (_, cur):
            cur.execute("SELECT 1 FROM teachers")

    assert isinstance(exc_info.value.__cause__, mysql.connector.Error)
    assert factory.connections[0].closed is True
    assert factory.cursor.closed is True


def test_other_errors_roll_back_and_propagate():
    factory = FakeConnectionFactory()

    with pytest.raises(KeyError):
        with db_cursor(factory) as (_, cur):
            cur.execute("SELECT teacher_id FROM teachers")
            raise KeyError("teacher_id")

    assert factory.connections[0].rollbacks == 1


def test_successful_block_commits():
    factory = FakeConnectionFactory({"teachers": [{"teacher_id": "T1"}]})
    with db_cursor(factory) as (_, cur):
        cur.execute("SELECT teacher_id FROM teachers")
        assert cur.fetchall() == [{"teacher_id": "T1"}]
    assert factory.connections[0].commits == 1


def test_connect_failure_is_store_unavailable(monkeypatch):
    def refuse(**kwargs):
        raise mysql.connector.errors.InterfaceError("Can't connect")

    monkeypatch.setattr(mysql.connector, "connect", refuse)
    conn = DatabaseConnection(DBConfig(host="db", port=3306, user="u", password="p", database="salary_db"))

    with pytest.raises(StoreUnavailableError):
        conn.connect()


def test_normalize_mysql_time_variants():
    assert normalize_mysql_time(None) is None
    assert normalize_mysql_time(time(8, 30)) == time(8, 30)
    assert normalize_mysql_time(timedelta(hours=16, minutes=5)) == time(16, 5)
    assert normalize_mysql_time("07:45:10") == time(7, 45, 10)


def test_slot_text_keeps_free_text_and_formats_time_values():
    assert slot_text(timedelta(hours=16)) == "16:00"
    assert slot_text(" 4:00 PM ") == "4:00 PM"
    assert slot_text("") is None


def test_sql_splitter_ignores_semicolons_in_quotes():
    sql = "CREATE TABLE a (x INT); INSERT INTO a VALUES ('1;2'); "
    assert list(iter_sql_statements(sql)) == ["CREATE TABLE a (x INT)", "INSERT INTO a VALUES ('1;2')"]
