"""MySQL adapter built on ``pymysql``.

``pymysql`` is optional; it is imported when a connection is opened and a
:class:`~sqlfluent.exceptions.MissingDependencyError` names the extra to install
when it is missing.
"""

from typing import TYPE_CHECKING, Any, ClassVar

from sqlfluent.adapters.dbapi import DBAPIConnection
from sqlfluent.exceptions import DatabaseConnectionError
from sqlfluent.utils.module_loader import ensure_driver

if TYPE_CHECKING:
    from sqlfluent.config import DatabaseConfig

__all__ = ("DEFAULT_MYSQL_PORT", "PyMySQLConnection")

DEFAULT_MYSQL_PORT = 3306


class PyMySQLConnection(DBAPIConnection):
    """MySQL adapter running in autocommit mode."""

    __slots__ = ()

    begin_statement: ClassVar[str] = "START TRANSACTION"
    default_dialect: ClassVar[str] = "mysql"

    def _error_types(self) -> "tuple[type[BaseException], ...]":
        return (ensure_driver("pymysql", "mysql").Error,)

    @classmethod
    def from_config(cls, config: "DatabaseConfig") -> "PyMySQLConnection":
        """Connect and apply the configured character set and collation.

        Raises:
            DatabaseConnectionError: The server refused the connection.
        """
        pymysql = ensure_driver("pymysql", "mysql")
        connect_kwargs: dict[str, Any] = {
            "host": config.host,
            "port": config.port or DEFAULT_MYSQL_PORT,
            "user": config.username,
            "password": config.password,
            "database": config.database or None,
            "charset": config.charset,
            "autocommit": True,
            **config.options,
        }
        try:
            connection = pymysql.connect(**connect_kwargs)
        except pymysql.Error as exc:
            msg = f"Could not connect to MySQL at {config.host}: {exc}"
            raise DatabaseConnectionError(msg) from exc

        adapter = cls(connection)
        adapter.execute(f"SET NAMES {adapter.quote(config.charset)} COLLATE {adapter.quote(config.collation)}")
        adapter.execute(f"SET CHARACTER SET {adapter.quote(config.charset)}")
        return adapter
