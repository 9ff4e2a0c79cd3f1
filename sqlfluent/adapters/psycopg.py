"""PostgreSQL adapter built on ``psycopg`` 3."""

from typing import TYPE_CHECKING, Any, ClassVar

from sqlfluent.adapters.dbapi import DBAPIConnection
from sqlfluent.exceptions import DatabaseConnectionError, DriverError
from sqlfluent.utils.logging import get_logger
from sqlfluent.utils.module_loader import ensure_driver

if TYPE_CHECKING:
    from sqlfluent.config import DatabaseConfig

__all__ = ("DEFAULT_POSTGRES_PORT", "PsycopgConnection", "postgres_encoding")

logger = get_logger("adapters.psycopg")

DEFAULT_POSTGRES_PORT = 5432


def postgres_encoding(charset: str) -> str:
    """Map a MySQL style character set name onto a PostgreSQL client encoding."""
    return "UTF8" if charset.lower().startswith("utf8") else charset


class PsycopgConnection(DBAPIConnection):
    """PostgreSQL adapter running in autocommit mode.

    PostgreSQL has no ``lastrowid``; :meth:`last_insert_id` asks the server for
    ``lastval()`` instead.
    """

    __slots__ = ()

    begin_statement: ClassVar[str] = "BEGIN"
    default_dialect: ClassVar[str] = "postgres"

    def _error_types(self) -> "tuple[type[BaseException], ...]":
        return (ensure_driver("psycopg", "postgres").Error,)

    @classmethod
    def from_config(cls, config: "DatabaseConfig") -> "PsycopgConnection":
        """Connect with the configured client encoding.

        Raises:
            DatabaseConnectionError: The server refused the connection.
        """
        psycopg = ensure_driver("psycopg", "postgres")
        connect_kwargs: dict[str, Any] = {
            "host": config.host,
            "port": config.port or DEFAULT_POSTGRES_PORT,
            "user": config.username,
            "password": config.password,
            "dbname": config.database,
            "client_encoding": postgres_encoding(config.charset),
            "autocommit": True,
            **config.options,
        }
        try:
            connection = psycopg.connect(**connect_kwargs)
        except psycopg.Error as exc:
            msg = f"Could not connect to PostgreSQL at {config.host}: {exc}"
            raise DatabaseConnectionError(msg) from exc
        return cls(connection)

    def last_insert_id(self) -> Any:
        try:
            result = self.run_query("SELECT lastval()")
        except DriverError as exc:
            logger.debug("lastval() unavailable: %s", exc)
            return None
        row = result.fetchone()
        return None if row is None else next(iter(row.values()))
