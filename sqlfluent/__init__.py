"""sqlfluent: a fluent SQL query builder and execution layer for DB-API connections."""

from sqlfluent import adapters, builder, core, driver, exceptions, typing, utils
from sqlfluent.__metadata__ import __version__
from sqlfluent.adapters.sqlite import SqliteConfig
from sqlfluent.config import ConnectionParams, DatabaseConfig
from sqlfluent.core.cache import CacheScope, FileResultCache, MemoryResultCache
from sqlfluent.core.errors import DebugErrorSink, RaisingErrorSink
from sqlfluent.core.result import FetchMode
from sqlfluent.driver import Database
from sqlfluent.exceptions import (
    CacheError,
    DatabaseConnectionError,
    DriverError,
    ImproperConfigurationError,
    MissingDependencyError,
    QueryError,
    SerializationError,
    SQLFluentError,
)

__all__ = (
    "CacheError",
    "CacheScope",
    "ConnectionParams",
    "Database",
    "DatabaseConfig",
    "DatabaseConnectionError",
    "DebugErrorSink",
    "DriverError",
    "FetchMode",
    "FileResultCache",
    "ImproperConfigurationError",
    "MemoryResultCache",
    "MissingDependencyError",
    "QueryError",
    "RaisingErrorSink",
    "SQLFluentError",
    "SerializationError",
    "SqliteConfig",
    "__version__",
    "adapters",
    "builder",
    "core",
    "driver",
    "exceptions",
    "typing",
    "utils",
)
