"""Connection settings and handle construction."""

from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar, Optional, TypedDict, Union

from typing_extensions import NotRequired

from sqlfluent.core.cache import DEFAULT_CACHE_DIR, FileResultCache
from sqlfluent.core.errors import ErrorFormat, create_error_sink
from sqlfluent.exceptions import DatabaseConnectionError, ImproperConfigurationError
from sqlfluent.utils.logging import get_logger
from sqlfluent.utils.module_loader import import_string

if TYPE_CHECKING:
    from sqlfluent.driver import Database
    from sqlfluent.protocols import ConnectionProtocol, ErrorSinkProtocol

__all__ = ("ADAPTERS", "DIALECTS", "ConnectionParams", "DatabaseConfig")

logger = get_logger("config")

ADAPTERS: "dict[str, str]" = {
    "sqlite": "sqlfluent.adapters.sqlite.SqliteConnection",
    "mysql": "sqlfluent.adapters.pymysql.PyMySQLConnection",
    "pgsql": "sqlfluent.adapters.psycopg.PsycopgConnection",
}
"""Adapter class per driver name, imported on first use."""

DIALECTS: "dict[str, str]" = {"sqlite": "sqlite", "mysql": "mysql", "pgsql": "postgres"}
"""``sqlglot`` dialect per driver name."""


class ConnectionParams(TypedDict, total=False):
    """Connection parameters."""

    driver: NotRequired[str]
    host: NotRequired[str]
    port: NotRequired[int]
    database: NotRequired[str]
    username: NotRequired[str]
    password: NotRequired[str]
    charset: NotRequired[str]
    collation: NotRequired[str]
    prefix: NotRequired[str]
    cache_dir: "NotRequired[Union[str, Path]]"
    debug: NotRequired[bool]
    error_format: NotRequired[ErrorFormat]
    options: "NotRequired[dict[str, Any]]"


class DatabaseConfig:
    """Settings for one database and the factory for :class:`~sqlfluent.driver.Database` handles.

    Settings come from a ``ConnectionParams`` mapping, keyword arguments, or both;
    keyword arguments win. A ``host`` of the form ``"name:port"`` supplies the port
    when none is given explicitly.
    """

    __slots__ = (
        "cache_dir",
        "charset",
        "collation",
        "database",
        "debug",
        "driver",
        "error_format",
        "host",
        "options",
        "password",
        "port",
        "prefix",
        "username",
    )

    defaults: "ClassVar[dict[str, Any]]" = {
        "driver": "sqlite",
        "host": "localhost",
        "port": None,
        "database": "",
        "username": "",
        "password": "",
        "charset": "utf8mb4",
        "collation": "utf8mb4_general_ci",
        "prefix": "",
        "cache_dir": None,
        "debug": False,
        "error_format": "text",
        "options": None,
    }

    def __init__(self, params: "Optional[Union[ConnectionParams, dict[str, Any]]]" = None, **kwargs: Any) -> None:
        settings = {**self.defaults, **(params or {}), **kwargs}
        unknown = set(settings) - set(self.defaults)
        if unknown:
            msg = f"Unknown connection parameters: {', '.join(sorted(unknown))}"
            raise ImproperConfigurationError(msg)

        driver = str(settings["driver"]).lower()
        if driver not in ADAPTERS:
            msg = f"Unsupported driver {settings['driver']!r}; expected one of {', '.join(ADAPTERS)}"
            raise ImproperConfigurationError(msg)
        if settings["error_format"] not in {"text", "html"}:
            msg = f"Unknown error format {settings['error_format']!r}; expected 'text' or 'html'"
            raise ImproperConfigurationError(msg)

        host, port = str(settings["host"]), settings["port"]
        if ":" in host:
            host, _, raw_port = host.partition(":")
            if port is None:
                try:
                    port = int(raw_port)
                except ValueError as exc:
                    msg = f"Invalid port in host {settings['host']!r}"
                    raise ImproperConfigurationError(msg) from exc

        self.driver = driver
        self.host = host
        self.port: Optional[int] = port
        self.database: str = settings["database"]
        self.username: str = settings["username"]
        self.password: str = settings["password"]
        self.charset: str = settings["charset"]
        self.collation: str = settings["collation"]
        self.prefix: str = settings["prefix"]
        self.cache_dir = Path(settings["cache_dir"]) if settings["cache_dir"] else Path.cwd() / DEFAULT_CACHE_DIR
        self.debug: bool = bool(settings["debug"])
        self.error_format: ErrorFormat = settings["error_format"]
        self.options: dict[str, Any] = dict(settings["options"] or {})

    @property
    def dialect(self) -> str:
        return DIALECTS[self.driver]

    def create_error_sink(self) -> "ErrorSinkProtocol":
        return create_error_sink(self.debug, self.error_format)

    def create_connection(self) -> "ConnectionProtocol":
        """Open a connection with the configured driver.

        Raises:
            DatabaseConnectionError: The connection failed and ``debug`` is off. In
                debug mode the failure is rendered and the process exits instead.

        Returns:
            The connection adapter.
        """
        adapter = import_string(ADAPTERS[self.driver])
        try:
            connection = adapter.from_config(self)
        except DatabaseConnectionError as exc:
            if self.debug:
                self.create_error_sink().report(f"Cannot connect to the database. {exc}", None)
            raise
        logger.debug("Connected with %s driver", self.driver)
        return connection  # type: ignore[no-any-return]

    def create_database(self) -> "Database":
        """Build a handle wired with the configured prefix, file cache and error sink."""
        from sqlfluent.driver import Database

        return Database(
            self.create_connection(),
            prefix=self.prefix,
            cache_backend=FileResultCache(self.cache_dir),
            error_sink=self.create_error_sink(),
        )

    @contextmanager
    def provide_session(self) -> "Generator[Database, None, None]":
        """Provide a handle and close its connection afterwards.

        Yields:
            Database: A handle with a fresh connection.
        """
        database = self.create_database()
        try:
            yield database
        finally:
            database.close()

    def __repr__(self) -> str:
        parts = ", ".join(
            [
                f"driver={self.driver!r}",
                f"host={self.host!r}",
                f"port={self.port!r}",
                f"database={self.database!r}",
                f"prefix={self.prefix!r}",
                f"debug={self.debug!r}",
            ]
        )
        return f"{type(self).__name__}({parts})"
