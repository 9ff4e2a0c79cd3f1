"""Statement execution and the fluent ``Database`` handle."""

from sqlfluent.driver._database import Database
from sqlfluent.driver._query import ROW_RETURNING_PREFIXES, QueryExecutionMixin, normalize_whitespace, returns_rows
from sqlfluent.driver._statements import StatementMixin
from sqlfluent.driver._transaction import TransactionMixin

__all__ = (
    "ROW_RETURNING_PREFIXES",
    "Database",
    "QueryExecutionMixin",
    "StatementMixin",
    "TransactionMixin",
    "normalize_whitespace",
    "returns_rows",
)
