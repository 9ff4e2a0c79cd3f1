"""Unit tests for result cache backends, the cache scope and cached execution."""

from __future__ import annotations

import hashlib
from pathlib import Path
from types import SimpleNamespace
from typing import TYPE_CHECKING, Any

import pytest

from sqlfluent.core.cache import CacheScope, FileResultCache, MemoryResultCache, cache_file_name
from sqlfluent.core.result import FetchMode, payload_cardinality
from sqlfluent.exceptions import CacheError, QueryError
from sqlfluent.typing import Empty

if TYPE_CHECKING:
    from sqlfluent.driver import Database
    from tests.conftest import FakeClock, FakeConnection

ROWS = [{"id": 1, "name": "ann"}, {"id": 2, "name": "bob"}]


class BrokenBackend:
    def get(self, key: str) -> Any:
        raise CacheError("disk on fire")

    def set(self, key: str, payload: Any, ttl: int) -> None:
        raise CacheError("disk on fire")


def test_memory_cache_expiry(clock: FakeClock) -> None:
    cache = MemoryResultCache(clock=clock)
    assert cache.get("k") is Empty
    cache.set("k", [1, 2], ttl=10)
    assert cache.get("k") == [1, 2]
    clock.advance(10)
    assert cache.get("k") is Empty
    assert cache.size() == 0
    stats = cache.get_stats()
    assert (stats.hits, stats.misses, stats.stores, stats.expirations) == (1, 2, 1, 1)


def test_memory_cache_stores_none_as_hit(clock: FakeClock) -> None:
    cache = MemoryResultCache(clock=clock)
    cache.set("k", None, ttl=10)
    assert cache.get("k") is None


def test_file_cache_round_trip(tmp_path: Path, clock: FakeClock) -> None:
    cache = FileResultCache(tmp_path / "cache", clock=clock)
    cache.set("SELECT 1", ROWS, ttl=30)
    assert (tmp_path / "cache" / cache_file_name("SELECT 1")).is_file()
    assert cache.get("SELECT 1") == ROWS
    clock.advance(31)
    assert cache.get("SELECT 1") is Empty
    assert not (tmp_path / "cache" / cache_file_name("SELECT 1")).exists()


def test_file_cache_miss_without_file(tmp_path: Path) -> None:
    assert FileResultCache(tmp_path).get("SELECT 1") is Empty


def test_file_cache_names_files_by_md5() -> None:
    digest = hashlib.md5(b"SELECT 1").hexdigest()
    assert cache_file_name("SELECT 1") == f"{digest}.cache"


def test_file_cache_corrupt_file_raises(tmp_path: Path) -> None:
    cache = FileResultCache(tmp_path)
    cache.path_for("SELECT 1").write_text("not json")
    with pytest.raises(CacheError):
        cache.get("SELECT 1")


def test_file_cache_clear(tmp_path: Path) -> None:
    cache = FileResultCache(tmp_path)
    cache.set("a", 1, ttl=60)
    cache.set("b", 2, ttl=60)
    cache.clear()
    assert list(tmp_path.glob("*.cache")) == []


def test_scope_converts_rows_for_requested_shape(clock: FakeClock) -> None:
    scope = CacheScope(MemoryResultCache(clock=clock), ttl=60)
    scope.set("q", [SimpleNamespace(id=1)])
    assert scope.get("q", assoc=True) == [{"id": 1}]
    assert scope.get("q", assoc=False) == [SimpleNamespace(id=1)]


def test_scope_treats_backend_errors_as_misses() -> None:
    scope = CacheScope(BrokenBackend(), ttl=60)  # type: ignore[arg-type]
    scope.set("q", [1])
    assert scope.get("q") is Empty


@pytest.mark.parametrize(
    ("payload", "expected"),
    [([1, 2, 3], 3), ([], 0), (None, 0), ("", 0), ({"id": 1}, 1), (SimpleNamespace(id=1), 1)],
)
def test_payload_cardinality(payload: Any, expected: int) -> None:
    assert payload_cardinality(payload) == expected


def test_cached_get_all_skips_driver_until_expiry(db: Database, connection: FakeConnection, clock: FakeClock) -> None:
    connection.default_rows = ROWS
    first = db.cache(60).table("users").get_all()
    second = db.cache(60).table("users").get_all()
    assert first == second
    assert db.num_rows == 2
    assert db.query_count == 2
    assert connection.sql_calls("run_query") == ["SELECT * FROM users"]

    clock.advance(61)
    db.cache(60).table("users").get_all()
    assert connection.sql_calls("run_query") == ["SELECT * FROM users", "SELECT * FROM users"]


def test_cached_payload_served_in_array_mode(db: Database, connection: FakeConnection) -> None:
    connection.default_rows = ROWS
    db.cache(60).table("users").get_all()
    assert db.cache(60).table("users").get_all(mode="array") == ROWS
    assert len(connection.sql_calls("run_query")) == 1


def test_editing_cached_rows_leaves_cache_intact(db: Database, connection: FakeConnection) -> None:
    connection.default_rows = ROWS
    first = db.cache(60).table("users").get_all(mode="array")
    first[0]["name"] = "changed"
    second = db.cache(60).table("users").get_all(mode="array")
    assert second == ROWS
    second[1]["name"] = "changed again"
    assert db.cache(60).table("users").get_all(mode="array") == ROWS
    assert len(connection.sql_calls("run_query")) == 1


def test_cached_single_row(db: Database, connection: FakeConnection) -> None:
    connection.default_rows = ROWS
    db.cache(60).table("users").get()
    assert db.cache(60).table("users").get() == SimpleNamespace(id=1, name="ann")
    assert db.num_rows == 1
    assert len(connection.sql_calls("run_query")) == 1


def test_cached_empty_result(db: Database, connection: FakeConnection) -> None:
    assert db.cache(60).table("users").get() is None
    assert db.cache(60).table("users").get() is None
    assert db.num_rows == 0
    assert len(connection.sql_calls("run_query")) == 1


def test_scope_is_single_use(db: Database, connection: FakeConnection) -> None:
    db.cache(60).table("users").get_all()
    db.table("users").get_all()
    assert len(connection.sql_calls("run_query")) == 2


def test_mutating_statement_consumes_scope(db: Database, connection: FakeConnection) -> None:
    db.cache(60).table("users").update({"a": 1})
    db.table("users").get_all()
    db.cache(60).table("users").get_all()
    assert len(connection.sql_calls("run_query")) == 2


def test_class_mode_bypasses_cache(db: Database, connection: FakeConnection) -> None:
    connection.default_rows = ROWS
    db.cache(60).table("users").get_all(FetchMode.CLASS, dict)
    db.cache(60).table("users").get_all(FetchMode.CLASS, dict)
    db.cache(60).table("users").get_all()
    assert len(connection.sql_calls("run_query")) == 3


def test_driver_error_clears_scope(db: Database, connection: FakeConnection) -> None:
    connection.failing["users"] = "boom"
    with pytest.raises(QueryError):
        db.cache(60).table("users").get_all()
    connection.failing.clear()
    db.table("users").get_all()
    db.table("users").get_all()
    assert len(connection.sql_calls("run_query")) == 3
