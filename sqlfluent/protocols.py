"""Runtime-checkable protocols for the collaborators a database handle talks to.

The handle never touches a DB-API connection, a cache directory or an output
stream directly. Everything goes through the narrow interfaces below so that
adapters, cache backends and error sinks can be swapped independently.
"""

from typing import TYPE_CHECKING, Any, ClassVar, NoReturn, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from dataclasses import Field

    from sqlfluent.typing import EmptyType

__all__ = (
    "ConnectionProtocol",
    "DataclassProtocol",
    "ErrorSinkProtocol",
    "ResultCacheBackendProtocol",
    "ResultHandleProtocol",
)


@runtime_checkable
class DataclassProtocol(Protocol):
    """Protocol for instance checking dataclasses."""

    __dataclass_fields__: "ClassVar[dict[str, Field[Any]]]"


@runtime_checkable
class ResultHandleProtocol(Protocol):
    """A buffered result set returned by :meth:`ConnectionProtocol.run_query`."""

    @property
    def row_count(self) -> int:
        """Number of rows returned or affected by the statement."""
        ...

    @property
    def column_names(self) -> "list[str]":
        """Column names in select-list order."""
        ...

    def fetchone(self) -> "Optional[dict[str, Any]]":
        """Return the next row as a dictionary, or None when exhausted."""
        ...

    def fetchall(self) -> "list[dict[str, Any]]":
        """Return every remaining row as dictionaries."""
        ...


@runtime_checkable
class ConnectionProtocol(Protocol):
    """Connection contract consumed by :class:`~sqlfluent.driver.Database`.

    Implementations raise :class:`~sqlfluent.exceptions.DriverError` when the
    driver rejects a statement.
    """

    dialect: str

    def execute(self, sql: str) -> int:
        """Run a statement that returns no rows and report the affected row count."""
        ...

    def run_query(self, sql: str) -> ResultHandleProtocol:
        """Run a statement and return its buffered result set."""
        ...

    def quote(self, value: Any) -> str:
        """Render ``value`` as a quoted SQL literal."""
        ...

    def begin(self) -> bool:
        """Start a real transaction."""
        ...

    def commit(self) -> bool:
        """Commit the current transaction."""
        ...

    def rollback(self) -> bool:
        """Roll the current transaction back."""
        ...

    def last_insert_id(self) -> Any:
        """Identifier generated by the most recent insert."""
        ...

    def close(self) -> None:
        """Release the underlying connection."""
        ...


@runtime_checkable
class ResultCacheBackendProtocol(Protocol):
    """Storage for cached result payloads keyed by SQL text."""

    def get(self, key: str) -> "Any | EmptyType":
        """Return the stored payload, or ``Empty`` on a miss or an expired entry."""
        ...

    def set(self, key: str, payload: Any, ttl: int) -> None:
        """Store ``payload`` for ``ttl`` seconds."""
        ...


@runtime_checkable
class ErrorSinkProtocol(Protocol):
    """Receives statement failures. Never returns normally."""

    def report(self, message: str, sql: Optional[str]) -> NoReturn:
        """Surface a failure for ``sql`` carrying the driver ``message``."""
        ...
