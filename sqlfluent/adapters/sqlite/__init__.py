"""SQLite adapter for sqlfluent."""

from sqlfluent.adapters.sqlite.config import SqliteConfig, SqliteConnectionParams
from sqlfluent.adapters.sqlite.driver import SqliteConnection

__all__ = ("SqliteConfig", "SqliteConnection", "SqliteConnectionParams")
