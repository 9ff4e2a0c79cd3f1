"""SQLite database configuration."""

from pathlib import Path
from typing import Any, Optional, TypedDict, Union

from typing_extensions import NotRequired, Unpack

from sqlfluent.config import DatabaseConfig
from sqlfluent.core.errors import ErrorFormat

__all__ = ("SqliteConfig", "SqliteConnectionParams")


class SqliteConnectionParams(TypedDict, total=False):
    """Extra keyword arguments forwarded to ``sqlite3.connect``."""

    timeout: NotRequired[float]
    detect_types: NotRequired[int]
    isolation_level: "NotRequired[Optional[str]]"
    check_same_thread: NotRequired[bool]
    cached_statements: NotRequired[int]
    uri: NotRequired[bool]


class SqliteConfig(DatabaseConfig):
    """Configuration for a SQLite database.

    Args:
        database: Database file path, ``":memory:"`` by default.
        prefix: Prefix applied to every table name.
        cache_dir: Directory of the on-disk result cache.
        debug: Render failures and exit instead of raising.
        error_format: ``"text"`` or ``"html"`` rendering in debug mode.
        **options: Forwarded to ``sqlite3.connect``.
    """

    __slots__ = ()

    def __init__(
        self,
        database: str = ":memory:",
        *,
        prefix: str = "",
        cache_dir: "Optional[Union[str, Path]]" = None,
        debug: bool = False,
        error_format: ErrorFormat = "text",
        **options: "Unpack[SqliteConnectionParams]",
    ) -> None:
        params: dict[str, Any] = {
            "driver": "sqlite",
            "database": database,
            "prefix": prefix,
            "cache_dir": cache_dir,
            "debug": debug,
            "error_format": error_format,
            "options": dict(options),
        }
        super().__init__(params)
