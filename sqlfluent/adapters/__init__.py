"""Connection adapters.

Optional drivers are imported lazily, so importing this package never requires
``pymysql`` or ``psycopg``.
"""

from sqlfluent.adapters.dbapi import BufferedResult, DBAPIConnection
from sqlfluent.adapters.sqlite import SqliteConfig, SqliteConnection

__all__ = ("BufferedResult", "DBAPIConnection", "SqliteConfig", "SqliteConnection")
