"""Statement execution: classification, cache scope, fetching and bookkeeping."""

import logging
import re
from typing import TYPE_CHECKING, Any, Final, NoReturn, Optional, Union, overload

from typing_extensions import Self

from sqlfluent.builder._base import StatementPhase
from sqlfluent.builder._parsing_utils import substitute_placeholders
from sqlfluent.core.cache import CacheScope
from sqlfluent.core.result import FetchMode, hydrate, payload_cardinality, resolve_fetch_mode
from sqlfluent.exceptions import DriverError
from sqlfluent.typing import Empty
from sqlfluent.utils.logging import get_logger, log_with_context

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlfluent.builder._base import BuilderState
    from sqlfluent.protocols import (
        ConnectionProtocol,
        ErrorSinkProtocol,
        ResultCacheBackendProtocol,
        ResultHandleProtocol,
    )
    from sqlfluent.typing import ModelDTOT

__all__ = ("ROW_RETURNING_PREFIXES", "QueryExecutionMixin", "normalize_whitespace", "returns_rows")

logger = get_logger("driver")

ROW_RETURNING_PREFIXES: Final = ("SELECT", "OPTIMIZE", "CHECK", "REPAIR", "CHECKSUM", "ANALYZE")

_WHITESPACE: Final = re.compile(r"\s\s+|\t\t+")


def normalize_whitespace(sql: str) -> str:
    """Strip ``sql`` and collapse runs of two or more whitespace characters into one space.

    A single newline or tab is kept, so one-character breaks inside quoted values
    survive.
    """
    return _WHITESPACE.sub(" ", sql.strip())


def returns_rows(sql: str) -> bool:
    """Check if a statement produces a result set rather than an affected-row count."""
    return sql.upper().startswith(ROW_RETURNING_PREFIXES)


class QueryExecutionMixin:
    """Runs compiled statements against the connection.

    Every execution starts by resetting the clause state, so statements sharing
    one handle never see each other's clauses. A cache scope armed with
    :meth:`cache` is consumed by the next :meth:`execute` whether or not it is used.
    """

    __slots__ = ()

    connection: "ConnectionProtocol"
    _state: "BuilderState"
    _cache_backend: "ResultCacheBackendProtocol"
    _cache_scope: Optional[CacheScope]
    _error_sink: "ErrorSinkProtocol"
    _pending_query: Optional[str]
    _last_query: Optional[str]
    _num_rows: int
    _insert_id: Any
    _query_count: int
    _error: Optional[str]
    _result: Any
    _phase: StatementPhase
    _transaction_depth: int

    if TYPE_CHECKING:

        def escape(self, value: Any) -> str: ...

    def reset(self) -> None:
        """Clear clause state and per-statement metadata.

        ``query_count`` and ``last_query`` survive; the transaction depth does not.
        """
        self._state.reset()
        self._num_rows = 0
        self._insert_id = None
        self._error = None
        self._pending_query = None
        self._result = None
        self._transaction_depth = 0
        self._phase = StatementPhase.RESET

    def cache(self, ttl: int) -> Self:
        """Cache the result of the next row-returning statement for ``ttl`` seconds."""
        self._cache_scope = CacheScope(self._cache_backend, ttl)
        return self

    @overload
    def execute(
        self,
        sql: str,
        *,
        fetch_all: bool = True,
        mode: "Union[FetchMode, str, None]" = None,
        schema_type: None = None,
    ) -> Any: ...

    @overload
    def execute(
        self,
        sql: str,
        *,
        fetch_all: bool = True,
        mode: "Union[FetchMode, str, None]" = None,
        schema_type: "type[ModelDTOT]",
    ) -> "Union[ModelDTOT, list[ModelDTOT], int, None]": ...

    def execute(
        self,
        sql: str,
        *,
        fetch_all: bool = True,
        mode: "Union[FetchMode, str, None]" = None,
        schema_type: "Optional[type[Any]]" = None,
    ) -> Any:
        """Run ``sql`` and return its rows or affected-row count.

        Statements starting with ``SELECT``, ``OPTIMIZE``, ``CHECK``, ``REPAIR``,
        ``CHECKSUM`` or ``ANALYZE`` return rows; everything else returns the number of
        affected rows. Row-returning statements are served from the armed cache
        scope when possible, except in class-hydration mode.

        Args:
            sql: The statement to run.
            fetch_all: Return every row instead of the first one.
            mode: Fetch mode for the returned rows.
            schema_type: Target type for :attr:`FetchMode.CLASS`.

        Returns:
            A list of rows, a single row (or None), or the affected-row count.
        """
        fetch_mode = resolve_fetch_mode(mode, schema_type)
        scope, self._cache_scope = self._cache_scope, None
        self.reset()

        statement = normalize_whitespace(sql)
        self._last_query = statement
        row_returning = returns_rows(statement)
        use_cache = scope is not None and row_returning and fetch_mode is not FetchMode.CLASS

        cached: Any = Empty
        if use_cache:
            cached = scope.get(statement, assoc=fetch_mode is FetchMode.ARRAY)  # type: ignore[union-attr]

        if cached is not Empty:
            result = cached
            self._num_rows = payload_cardinality(cached)
        elif row_returning:
            handle = self._run_statement(statement)
            self._num_rows = handle.row_count
            if self._num_rows > 0:
                rows = handle.fetchall() if fetch_all else handle.fetchone()
                result = hydrate(rows, fetch_mode, schema_type)
            else:
                result = [] if fetch_all else None
            if use_cache:
                scope.set(statement, result)  # type: ignore[union-attr]
        else:
            result = self._exec_statement(statement)
            self._num_rows = result

        self._query_count += 1
        self._result = result
        return result

    def query(self, sql: str, params: "Optional[Sequence[Any]]" = None) -> Self:
        """Prepare a raw statement for :meth:`fetch`, :meth:`fetch_all` or :meth:`exec`.

        Each ``?`` in ``sql`` is replaced, left to right, with the next escaped value
        from ``params``. Nothing is executed.

        Returns:
            The current handle for method chaining.
        """
        self.reset()
        self._pending_query = sql if params is None else substitute_placeholders(sql, params, self.escape)
        self._last_query = self._pending_query
        return self

    def fetch(
        self,
        mode: "Union[FetchMode, str, None]" = None,
        schema_type: "Optional[type[Any]]" = None,
        *,
        fetch_all: bool = False,
    ) -> Any:
        """Run the prepared statement and return its first row.

        The cache is never consulted. Returns None when no statement is prepared.
        """
        if self._pending_query is None:
            return None
        fetch_mode = resolve_fetch_mode(mode, schema_type)
        handle = self._run_statement(self._pending_query)
        rows = handle.fetchall() if fetch_all else handle.fetchone()
        if fetch_all:
            self._num_rows = len(rows)  # type: ignore[arg-type]
        else:
            self._num_rows = 0 if rows is None else 1
        self._query_count += 1
        self._result = hydrate(rows, fetch_mode, schema_type)
        return self._result

    def fetch_all(self, mode: "Union[FetchMode, str, None]" = None, schema_type: "Optional[type[Any]]" = None) -> Any:
        """Run the prepared statement and return every row."""
        return self.fetch(mode, schema_type, fetch_all=True)

    def exec(self) -> Optional[int]:
        """Run the prepared statement and return the affected-row count."""
        if self._pending_query is None:
            return None
        affected = self._exec_statement(self._pending_query)
        self._num_rows = affected
        self._query_count += 1
        return affected

    def _run_statement(self, sql: str) -> "ResultHandleProtocol":
        log_with_context(logger, logging.DEBUG, "statement.query", sql=sql)
        self._phase = StatementPhase.EXECUTING
        try:
            return self.connection.run_query(sql)
        except DriverError as exc:
            self._fail(exc, sql)
        finally:
            self._phase = StatementPhase.RESET

    def _exec_statement(self, sql: str) -> int:
        log_with_context(logger, logging.DEBUG, "statement.execute", sql=sql)
        self._phase = StatementPhase.EXECUTING
        try:
            return self.connection.execute(sql)
        except DriverError as exc:
            self._fail(exc, sql)
        finally:
            self._phase = StatementPhase.RESET

    def _fail(self, exc: DriverError, sql: str) -> NoReturn:
        self._error = exc.detail or str(exc)
        self._error_sink.report(self._error, sql)

    @property
    def num_rows(self) -> int:
        """Rows returned or affected by the last statement."""
        return self._num_rows

    @property
    def insert_id(self) -> Any:
        """Identifier generated by the last successful insert."""
        return self._insert_id

    @property
    def query_count(self) -> int:
        """Statements executed over the lifetime of the handle."""
        return self._query_count

    @property
    def last_query(self) -> Optional[str]:
        """The most recently compiled or prepared SQL."""
        return self._last_query

    @property
    def error(self) -> Optional[str]:
        """Driver message of the last failed statement."""
        return self._error

    @property
    def state(self) -> StatementPhase:
        """Where the handle is in the ``BUILDING -> EXECUTING -> RESET`` cycle."""
        if self._phase is StatementPhase.EXECUTING:
            return StatementPhase.EXECUTING
        if not self._state.is_pristine or self._pending_query is not None:
            return StatementPhase.BUILDING
        return StatementPhase.RESET
