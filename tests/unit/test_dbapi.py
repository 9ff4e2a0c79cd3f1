from __future__ import annotations

import datetime
import sqlite3
from collections.abc import Iterator
from decimal import Decimal

import pytest

from sqlfluent.adapters.dbapi import BufferedResult, DBAPIConnection
from sqlfluent.adapters.sqlite import SqliteConnection
from sqlfluent.exceptions import DriverError


@pytest.fixture
def sqlite_connection() -> Iterator[SqliteConnection]:
    connection = SqliteConnection.connect()
    yield connection
    connection.close()


def test_base_adapter_requires_from_config() -> None:
    raw = sqlite3.connect(":memory:")
    try:
        with pytest.raises(TypeError):
            DBAPIConnection(raw)  # type: ignore[abstract]
    finally:
        raw.close()


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("O'Reilly", "'O''Reilly'"),
        (datetime.date(2024, 1, 2), "'2024-01-02'"),
        (datetime.datetime(2024, 1, 2, 3, 4, 5), "'2024-01-02 03:04:05'"),
        (Decimal("1.50"), "'1.50'"),
        (b"abc", "'abc'"),
    ],
)
def test_quote(sqlite_connection: SqliteConnection, value: object, expected: str) -> None:
    assert sqlite_connection.quote(value) == expected


def test_driver_errors_become_driver_error(sqlite_connection: SqliteConnection) -> None:
    with pytest.raises(DriverError) as exc_info:
        sqlite_connection.run_query("SELECT * FROM missing")
    assert "no such table" in exc_info.value.detail
    assert isinstance(exc_info.value.__cause__, sqlite3.Error)


def test_run_query_buffers_rows(sqlite_connection: SqliteConnection) -> None:
    result = sqlite_connection.run_query("SELECT 1 AS a UNION ALL SELECT 2")
    assert result.row_count == 2
    assert result.column_names == ["a"]
    assert result.fetchone() == {"a": 1}
    assert result.fetchall() == [{"a": 2}]
    assert result.fetchone() is None


def test_truncate_is_sent_as_delete(sqlite_connection: SqliteConnection) -> None:
    assert sqlite_connection.prepare_sql("TRUNCATE TABLE users") == "DELETE FROM users"
    assert sqlite_connection.prepare_sql("DELETE FROM users WHERE id = 1") == "DELETE FROM users WHERE id = 1"


def test_failed_transaction_statement_returns_false(sqlite_connection: SqliteConnection) -> None:
    assert sqlite_connection.commit() is False
    assert sqlite_connection.begin() is True
    assert sqlite_connection.rollback() is True


def test_empty_buffered_result() -> None:
    result = BufferedResult([], [], 0)
    assert result.fetchone() is None
    assert result.fetchall() == []
