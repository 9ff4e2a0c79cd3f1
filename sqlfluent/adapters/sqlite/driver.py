"""SQLite connection adapter built on the standard library ``sqlite3`` module."""

import re
import sqlite3
from typing import TYPE_CHECKING, Any, ClassVar, Final

from sqlfluent.adapters.dbapi import DBAPIConnection
from sqlfluent.exceptions import DatabaseConnectionError

if TYPE_CHECKING:
    from sqlfluent.config import DatabaseConfig

__all__ = ("SqliteConnection",)

_TRUNCATE: Final = re.compile(r"^TRUNCATE TABLE\s+(.+)$", re.IGNORECASE)


class SqliteConnection(DBAPIConnection):
    """SQLite adapter.

    The connection runs with ``isolation_level=None`` so ``sqlite3`` never opens
    transactions implicitly. SQLite has no ``TRUNCATE``; it is sent as an
    unconditional ``DELETE``.
    """

    __slots__ = ()

    begin_statement: ClassVar[str] = "BEGIN"
    default_dialect: ClassVar[str] = "sqlite"
    error_types: ClassVar["tuple[type[BaseException], ...]"] = (sqlite3.Error,)

    @classmethod
    def connect(cls, database: str = ":memory:", **options: Any) -> "SqliteConnection":
        """Open ``database`` and wrap it.

        Raises:
            DatabaseConnectionError: ``sqlite3`` could not open the database.
        """
        options.setdefault("isolation_level", None)
        try:
            connection = sqlite3.connect(database, **options)
        except sqlite3.Error as exc:
            msg = f"Could not open SQLite database {database!r}: {exc}"
            raise DatabaseConnectionError(msg) from exc
        return cls(connection)

    @classmethod
    def from_config(cls, config: "DatabaseConfig") -> "SqliteConnection":
        return cls.connect(config.database or ":memory:", **config.options)

    def prepare_sql(self, sql: str) -> str:
        match = _TRUNCATE.match(sql)
        if match:
            return f"DELETE FROM {match.group(1)}"
        return sql
