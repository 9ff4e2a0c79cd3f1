from __future__ import annotations

from typing import Any

import pytest

from sqlfluent.adapters.dbapi import BufferedResult
from sqlfluent.core.cache import MemoryResultCache
from sqlfluent.driver import Database
from sqlfluent.exceptions import DriverError


class FakeConnection:
    """Connection double that records every call it receives."""

    dialect = "sqlite"

    def __init__(self) -> None:
        self.calls: list[tuple[str, ...]] = []
        self.results: dict[str, list[dict[str, Any]]] = {}
        self.default_rows: list[dict[str, Any]] = []
        self.affected = 1
        self.failing: dict[str, str] = {}
        self.begin_result = True
        self.commit_result = True
        self.rollback_result = True
        self.next_insert_id: Any = 42
        self.closed = False

    def quote(self, value: Any) -> str:
        return "'" + str(value).replace("'", "''") + "'"

    def _maybe_fail(self, sql: str) -> None:
        for fragment, message in self.failing.items():
            if fragment in sql:
                raise DriverError(message)

    def execute(self, sql: str) -> int:
        self.calls.append(("execute", sql))
        self._maybe_fail(sql)
        return self.affected

    def run_query(self, sql: str) -> BufferedResult:
        self.calls.append(("run_query", sql))
        self._maybe_fail(sql)
        rows = [dict(row) for row in self.results.get(sql, self.default_rows)]
        columns = list(rows[0]) if rows else []
        return BufferedResult(columns, rows, len(rows))

    def begin(self) -> bool:
        self.calls.append(("begin",))
        return self.begin_result

    def commit(self) -> bool:
        self.calls.append(("commit",))
        return self.commit_result

    def rollback(self) -> bool:
        self.calls.append(("rollback",))
        return self.rollback_result

    def last_insert_id(self) -> Any:
        return self.next_insert_id

    def close(self) -> None:
        self.closed = True

    def sql_calls(self, kind: str) -> list[str]:
        return [call[1] for call in self.calls if call[0] == kind]


class FakeClock:
    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def connection() -> FakeConnection:
    return FakeConnection()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def db(connection: FakeConnection, clock: FakeClock) -> Database:
    return Database(connection, cache_backend=MemoryResultCache(clock=clock))


@pytest.fixture
def prefixed_db(connection: FakeConnection) -> Database:
    return Database(connection, prefix="app_")
