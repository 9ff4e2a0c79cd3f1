"""Generic DB-API 2 connection adapter.

Wraps a driver connection running in autocommit mode. Transaction control is
issued as plain SQL so savepoints and real transactions go through the same
cursor path.
"""

import datetime
from abc import ABC, abstractmethod
from collections.abc import Generator
from contextlib import contextmanager
from decimal import Decimal
from typing import TYPE_CHECKING, Any, ClassVar, Optional

from sqlglot import exp

from sqlfluent.exceptions import DriverError
from sqlfluent.utils.logging import get_logger

if TYPE_CHECKING:
    from sqlfluent.config import DatabaseConfig

__all__ = ("BufferedResult", "DBAPIConnection")

logger = get_logger("adapters.dbapi")


class BufferedResult:
    """Result set read completely from the cursor so its row count is known up front."""

    __slots__ = ("_column_names", "_position", "_row_count", "_rows")

    def __init__(self, column_names: "list[str]", rows: "list[dict[str, Any]]", row_count: int) -> None:
        self._column_names = column_names
        self._rows = rows
        self._row_count = row_count
        self._position = 0

    @property
    def row_count(self) -> int:
        return self._row_count

    @property
    def column_names(self) -> "list[str]":
        return self._column_names

    def fetchone(self) -> "Optional[dict[str, Any]]":
        if self._position >= len(self._rows):
            return None
        row = self._rows[self._position]
        self._position += 1
        return row

    def fetchall(self) -> "list[dict[str, Any]]":
        rows = self._rows[self._position :]
        self._position = len(self._rows)
        return rows

    def __repr__(self) -> str:
        return f"BufferedResult(columns={self._column_names!r}, row_count={self._row_count})"


class DBAPIConnection(ABC):
    """Adapter around any DB-API 2 connection.

    Subclasses supply :meth:`from_config` for their driver.

    Args:
        connection: An open driver connection in autocommit mode.
        dialect: ``sqlglot`` dialect used to render quoted literals.
    """

    __slots__ = ("_connection", "_last_row_id", "dialect")

    begin_statement: ClassVar[str] = "BEGIN"
    default_dialect: ClassVar[str] = "sqlite"
    error_types: ClassVar["tuple[type[BaseException], ...]"] = ()

    def __init__(self, connection: Any, dialect: Optional[str] = None) -> None:
        self._connection = connection
        self._last_row_id: Any = None
        self.dialect = dialect or self.default_dialect

    @classmethod
    @abstractmethod
    def from_config(cls, config: "DatabaseConfig") -> "DBAPIConnection":
        """Open a driver connection described by ``config``.

        Raises:
            DatabaseConnectionError: The driver could not connect.
        """

    @property
    def raw_connection(self) -> Any:
        return self._connection

    def _error_types(self) -> "tuple[type[BaseException], ...]":
        if self.error_types:
            return self.error_types
        return (getattr(self._connection, "Error", Exception),)

    @contextmanager
    def handle_database_exceptions(self) -> "Generator[None, None, None]":
        """Re-raise driver errors as :class:`DriverError` carrying the driver message."""
        try:
            yield
        except self._error_types() as exc:
            raise DriverError(str(exc)) from exc

    @contextmanager
    def with_cursor(self) -> "Generator[Any, None, None]":
        cursor = self._connection.cursor()
        try:
            yield cursor
        finally:
            cursor.close()

    def prepare_sql(self, sql: str) -> str:
        """Adjust compiled SQL for the driver before it is sent."""
        return sql

    def execute(self, sql: str) -> int:
        with self.handle_database_exceptions(), self.with_cursor() as cursor:
            cursor.execute(self.prepare_sql(sql))
            self._last_row_id = getattr(cursor, "lastrowid", None)
            return max(cursor.rowcount or 0, 0)

    def run_query(self, sql: str) -> BufferedResult:
        with self.handle_database_exceptions(), self.with_cursor() as cursor:
            cursor.execute(self.prepare_sql(sql))
            if cursor.description is None:
                return BufferedResult([], [], max(cursor.rowcount or 0, 0))
            column_names = [column[0] for column in cursor.description]
            rows = [dict(zip(column_names, row)) for row in cursor.fetchall()]
            return BufferedResult(column_names, rows, len(rows))

    def quote(self, value: Any) -> str:
        """Render ``value`` as a string literal in the connection's dialect."""
        if isinstance(value, (bytes, bytearray)):
            text = bytes(value).decode("utf-8", errors="replace")
        elif isinstance(value, (datetime.date, datetime.time)):
            text = value.isoformat(sep=" ") if isinstance(value, datetime.datetime) else value.isoformat()
        elif isinstance(value, Decimal):
            text = format(value, "f")
        else:
            text = str(value)
        return exp.Literal.string(text).sql(dialect=self.dialect)

    def begin(self) -> bool:
        return self._run_transaction_statement(self.begin_statement)

    def commit(self) -> bool:
        return self._run_transaction_statement("COMMIT")

    def rollback(self) -> bool:
        return self._run_transaction_statement("ROLLBACK")

    def _run_transaction_statement(self, sql: str) -> bool:
        try:
            self.execute(sql)
        except DriverError as exc:
            logger.warning("%s failed: %s", sql, exc)
            return False
        return True

    def last_insert_id(self) -> Any:
        return self._last_row_id

    def close(self) -> None:
        self._connection.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(dialect={self.dialect!r})"
