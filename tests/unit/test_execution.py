"""Unit tests for statement execution, fetch modes and handle bookkeeping."""

from __future__ import annotations

from dataclasses import dataclass
from types import SimpleNamespace
from typing import TYPE_CHECKING, Optional

import msgspec
import pytest

from sqlfluent.builder import StatementPhase
from sqlfluent.core.result import FetchMode, resolve_fetch_mode
from sqlfluent.driver import Database, normalize_whitespace, returns_rows
from sqlfluent.exceptions import DriverError, ImproperConfigurationError, QueryError

if TYPE_CHECKING:
    from tests.conftest import FakeConnection

USERS = [{"id": 1, "name": "ann"}, {"id": 2, "name": "bob"}]


@dataclass
class UserRecord:
    id: int
    name: str


class UserStruct(msgspec.Struct):
    id: int
    name: str


class PlainUser:
    def __init__(self, id: int, name: str) -> None:
        self.id = id
        self.name = name


def test_normalize_whitespace() -> None:
    assert normalize_whitespace("  SELECT *\n\tFROM   users  ") == "SELECT * FROM users"
    assert normalize_whitespace("INSERT INTO t (body) VALUES ('a\nb\tc')") == "INSERT INTO t (body) VALUES ('a\nb\tc')"
    assert normalize_whitespace("SELECT 1\t\tFROM t") == "SELECT 1 FROM t"


@pytest.mark.parametrize(
    ("sql", "expected"),
    [
        ("SELECT 1", True),
        ("select * from t", True),
        ("Optimize TABLE t", True),
        ("CHECK TABLE t", True),
        ("CHECKSUM TABLE t", True),
        ("repair TABLE t", True),
        ("ANALYZE TABLE t", True),
        ("INSERT INTO t (a) VALUES (1)", False),
        ("UPDATE t SET a=1", False),
        ("DELETE FROM t", False),
        ("CREATE TABLE t (a INT)", False),
    ],
)
def test_returns_rows(sql: str, expected: bool) -> None:
    assert returns_rows(sql) is expected


@pytest.mark.parametrize(
    ("mode", "expected"),
    [
        (None, FetchMode.OBJECT),
        ("object", FetchMode.OBJECT),
        ("anything", FetchMode.OBJECT),
        ("array", FetchMode.ARRAY),
        (FetchMode.ARRAY, FetchMode.ARRAY),
    ],
)
def test_resolve_fetch_mode(mode: Optional[str], expected: FetchMode) -> None:
    assert resolve_fetch_mode(mode) is expected


def test_class_mode_requires_schema_type() -> None:
    with pytest.raises(ImproperConfigurationError):
        resolve_fetch_mode("class")
    assert resolve_fetch_mode("class", UserRecord) is FetchMode.CLASS


def test_get_all_returns_object_rows(db: Database, connection: FakeConnection) -> None:
    connection.default_rows = USERS
    rows = db.table("users").get_all()
    assert rows == [SimpleNamespace(id=1, name="ann"), SimpleNamespace(id=2, name="bob")]
    assert rows[0].name == "ann"
    assert connection.sql_calls("run_query") == ["SELECT * FROM users"]
    assert db.num_rows == 2


def test_get_returns_first_row(db: Database, connection: FakeConnection) -> None:
    connection.default_rows = USERS
    row = db.table("users").where("id", 1).get(mode="array")
    assert row == {"id": 1, "name": "ann"}
    assert connection.sql_calls("run_query") == ["SELECT * FROM users WHERE id = 1 LIMIT 1"]


def test_no_rows(db: Database) -> None:
    assert db.table("users").get() is None
    assert db.table("users").get_all() == []
    assert db.num_rows == 0


@pytest.mark.parametrize("schema_type", [UserRecord, UserStruct, PlainUser])
def test_class_hydration(db: Database, connection: FakeConnection, schema_type: type) -> None:
    connection.default_rows = USERS
    rows = db.table("users").get_all(FetchMode.CLASS, schema_type)
    assert [type(row) for row in rows] == [schema_type, schema_type]
    assert [row.name for row in rows] == ["ann", "bob"]


def test_class_hydration_without_type_raises(db: Database, connection: FakeConnection) -> None:
    with pytest.raises(ImproperConfigurationError):
        db.table("users").get_all("class")
    assert connection.calls == []


def test_mutating_statement_returns_affected_rows(db: Database, connection: FakeConnection) -> None:
    connection.affected = 3
    assert db.table("users").where("age", "<", 18).update({"minor": True}) == 3
    assert connection.sql_calls("execute") == ["UPDATE users SET minor=1 WHERE age < 18"]
    assert db.num_rows == 3


def test_delete_without_conditions_truncates(prefixed_db: Database, connection: FakeConnection) -> None:
    prefixed_db.table("users").delete()
    assert connection.sql_calls("execute") == ["TRUNCATE TABLE app_users"]


def test_insert_returns_generated_id(db: Database, connection: FakeConnection) -> None:
    assert db.table("users").insert({"name": "a"}) == 42
    assert db.insert_id == 42
    assert connection.sql_calls("execute") == ["INSERT INTO users (name) VALUES ('a')"]


def test_insert_returns_false_when_nothing_written(db: Database, connection: FakeConnection) -> None:
    connection.affected = 0
    assert db.table("users").insert({"name": "a"}) is False
    assert db.insert_id is None


def test_maintenance_returns_rows(db: Database, connection: FakeConnection) -> None:
    connection.default_rows = [{"Table": "users", "Msg_text": "OK"}]
    assert db.table("users").check(mode="array") == [{"Table": "users", "Msg_text": "OK"}]
    assert connection.sql_calls("run_query") == ["CHECK TABLE users"]


def test_execute_normalizes_and_records_last_query(db: Database, connection: FakeConnection) -> None:
    db.execute("SELECT *\n   FROM users \tWHERE id = 1")
    assert db.last_query == "SELECT * FROM users WHERE id = 1"
    assert connection.sql_calls("run_query") == ["SELECT * FROM users WHERE id = 1"]


def test_dry_run_does_not_reset(db: Database, connection: FakeConnection) -> None:
    db.table("users").where("id", 1)
    assert db.get_all(as_sql=True) == "SELECT * FROM users WHERE id = 1"
    assert db.state is StatementPhase.BUILDING
    assert connection.calls == []
    assert db.query_count == 0


def test_reset_after_terminal_call(db: Database) -> None:
    db.select("id").table("users").where("id", 1).order_by("id").limit(1).get_all()
    assert db.state is StatementPhase.RESET
    fresh = Database(db.connection)
    assert db.table("roles").get_all(as_sql=True) == fresh.table("roles").get_all(as_sql=True) == "SELECT * FROM roles"


def test_query_count_is_cumulative(db: Database) -> None:
    db.table("users").get_all()
    db.table("users").update({"a": 1})
    db.execute("SELECT 1")
    assert db.query_count == 3


def test_state_transitions(db: Database, connection: FakeConnection) -> None:
    observed: list[StatementPhase] = []
    original = connection.run_query

    def run_query(sql: str):  # type: ignore[no-untyped-def]
        observed.append(db.state)
        return original(sql)

    connection.run_query = run_query  # type: ignore[method-assign]
    assert db.state is StatementPhase.RESET
    db.table("users")
    assert db.state is StatementPhase.BUILDING
    db.get_all()
    assert observed == [StatementPhase.EXECUTING]
    assert db.state is StatementPhase.RESET


def test_query_with_params_is_deferred(db: Database, connection: FakeConnection) -> None:
    handle = db.query("SELECT * FROM users WHERE id = ? AND name = ?", [1, "ann"])
    assert handle is db
    assert connection.calls == []
    assert db.last_query == "SELECT * FROM users WHERE id = 1 AND name = 'ann'"


def test_query_then_fetch(db: Database, connection: FakeConnection) -> None:
    connection.default_rows = USERS
    assert db.query("SELECT * FROM users").fetch() == SimpleNamespace(id=1, name="ann")
    assert db.num_rows == 1
    assert db.query("SELECT * FROM users").fetch_all("array") == USERS
    assert db.num_rows == 2
    assert db.query("SELECT * FROM users").fetch_all(FetchMode.CLASS, UserRecord) == [
        UserRecord(1, "ann"),
        UserRecord(2, "bob"),
    ]


def test_query_then_exec(db: Database, connection: FakeConnection) -> None:
    connection.affected = 5
    assert db.query("DELETE FROM users WHERE id > ?", [1]).exec() == 5
    assert connection.sql_calls("execute") == ["DELETE FROM users WHERE id > 1"]


def test_fetch_without_pending_query(db: Database, connection: FakeConnection) -> None:
    assert db.fetch() is None
    assert db.fetch_all() is None
    assert db.exec() is None
    db.table("users").get_all()
    assert db.fetch() is None
    assert connection.sql_calls("run_query") == ["SELECT * FROM users"]


def test_driver_error_raises_query_error(db: Database, connection: FakeConnection) -> None:
    connection.failing["users"] = "no such table: users"
    with pytest.raises(QueryError) as exc_info:
        db.table("users").get_all()
    assert exc_info.value.sql == "SELECT * FROM users"
    assert exc_info.value.error == "no such table: users"
    assert isinstance(exc_info.value.__context__, DriverError)
    assert db.error == "no such table: users"
    assert db.query_count == 0


def test_mutating_driver_error_raises_query_error(db: Database, connection: FakeConnection) -> None:
    connection.failing["UPDATE"] = "read only"
    with pytest.raises(QueryError, match="read only"):
        db.table("users").update({"a": 1})
    assert db.error == "read only"


def test_error_is_cleared_by_next_statement(db: Database, connection: FakeConnection) -> None:
    connection.failing["broken"] = "boom"
    with pytest.raises(QueryError):
        db.execute("SELECT * FROM broken")
    db.execute("SELECT 1")
    assert db.error is None


def test_custom_error_sink_receives_failures(connection: FakeConnection) -> None:
    class RecordingSink:
        def __init__(self) -> None:
            self.reports: list[tuple[str, Optional[str]]] = []

        def report(self, message: str, sql: Optional[str]) -> None:
            self.reports.append((message, sql))
            raise RuntimeError(message)

    sink = RecordingSink()
    database = Database(connection, error_sink=sink)  # type: ignore[arg-type]
    connection.failing["t"] = "bad"
    with pytest.raises(RuntimeError):
        database.table("t").get_all()
    assert sink.reports == [("bad", "SELECT * FROM t")]


def test_escape_uses_connection_quote(db: Database) -> None:
    assert db.escape("it's") == "'it''s'"
    assert db.escape(None) == "NULL"
    assert db.escape(7) == "7"


def test_close_and_context_manager(connection: FakeConnection) -> None:
    with Database(connection) as database:
        assert database.prefix == ""
    assert connection.closed
