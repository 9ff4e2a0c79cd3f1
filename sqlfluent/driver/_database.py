from types import TracebackType
from typing import TYPE_CHECKING, Any, Optional

from sqlfluent.builder._base import BuilderState, StatementPhase
from sqlfluent.builder._parsing_utils import escape_value
from sqlfluent.builder.mixins import (
    GroupByClauseMixin,
    HavingClauseMixin,
    JoinClauseMixin,
    LimitOffsetClauseMixin,
    OrderByClauseMixin,
    SelectColumnsMixin,
    TableClauseMixin,
    WhereClauseMixin,
)
from sqlfluent.core.cache import MemoryResultCache
from sqlfluent.core.errors import RaisingErrorSink
from sqlfluent.driver._query import QueryExecutionMixin
from sqlfluent.driver._statements import StatementMixin
from sqlfluent.driver._transaction import TransactionMixin
from sqlfluent.utils.logging import get_logger

if TYPE_CHECKING:
    from sqlfluent.protocols import ConnectionProtocol, ErrorSinkProtocol, ResultCacheBackendProtocol

__all__ = ("Database",)

logger = get_logger("driver")


class Database(
    TableClauseMixin,
    SelectColumnsMixin,
    JoinClauseMixin,
    WhereClauseMixin,
    LimitOffsetClauseMixin,
    OrderByClauseMixin,
    GroupByClauseMixin,
    HavingClauseMixin,
    StatementMixin,
    TransactionMixin,
    QueryExecutionMixin,
):
    """Fluent query builder bound to one connection.

    Clause methods accumulate state and return the handle; terminal operations
    compile, execute and reset it::

        db.table("users").select(["id", "name"]).where("age", ">", 18).get_all()

    Args:
        connection: The connection statements run on.
        prefix: Prefix applied to every table name.
        cache_backend: Storage used by :meth:`cache`, in-memory by default.
        error_sink: Receives statement failures, raising :class:`QueryError` by default.
    """

    __slots__ = (
        "_cache_backend",
        "_cache_scope",
        "_error",
        "_error_sink",
        "_insert_id",
        "_last_query",
        "_num_rows",
        "_pending_query",
        "_phase",
        "_prefix",
        "_query_count",
        "_result",
        "_state",
        "_transaction_depth",
        "connection",
    )

    def __init__(
        self,
        connection: "ConnectionProtocol",
        *,
        prefix: str = "",
        cache_backend: "Optional[ResultCacheBackendProtocol]" = None,
        error_sink: "Optional[ErrorSinkProtocol]" = None,
    ) -> None:
        self.connection = connection
        self._prefix = prefix
        self._cache_backend = cache_backend if cache_backend is not None else MemoryResultCache()
        self._error_sink = error_sink if error_sink is not None else RaisingErrorSink()
        self._cache_scope = None
        self._state = BuilderState()
        self._last_query: Optional[str] = None
        self._query_count = 0
        self._num_rows = 0
        self._insert_id = None
        self._error: Optional[str] = None
        self._pending_query: Optional[str] = None
        self._result: Any = None
        self._transaction_depth = 0
        self._phase = StatementPhase.RESET

    @property
    def prefix(self) -> str:
        return self._prefix

    def escape(self, value: Any) -> str:
        """Render ``value`` as a SQL literal using the connection's quoting."""
        return escape_value(value, self.connection.quote)

    def close(self) -> None:
        logger.debug("Closing connection")
        self.connection.close()

    def __enter__(self) -> "Database":
        return self

    def __exit__(
        self,
        exc_type: "Optional[type[BaseException]]",
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(dialect={getattr(self.connection, 'dialect', None)!r}, "
            f"prefix={self._prefix!r}, query_count={self._query_count})"
        )
