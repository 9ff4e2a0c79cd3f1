from collections.abc import Generator
from contextlib import contextmanager
from typing import Any, Optional

__all__ = (
    "CacheError",
    "DatabaseConnectionError",
    "DriverError",
    "ImproperConfigurationError",
    "MissingDependencyError",
    "QueryError",
    "SQLFluentError",
    "SerializationError",
    "wrap_exceptions",
)


class SQLFluentError(Exception):
    """Base exception class from which all sqlfluent exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``SQLFluentError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class MissingDependencyError(SQLFluentError, ImportError):
    """Missing optional dependency.

    This exception is raised only when a module depends on a dependency that has not been installed.
    """

    def __init__(self, package: str, install_package: Optional[str] = None) -> None:
        super().__init__(
            f"Package {package!r} is not installed but required. You can install it by running "
            f"'pip install sqlfluent[{install_package or package}]' to install sqlfluent with the required extra "
            f"or 'pip install {install_package or package}' to install the package separately",
        )


class ImproperConfigurationError(SQLFluentError):
    """Improper Configuration error.

    Raised for invalid connection settings and for fetch modes used without the arguments they need.
    """


class DatabaseConnectionError(SQLFluentError):
    """The database connection could not be established."""


class DriverError(SQLFluentError):
    """The underlying driver rejected a statement.

    Adapters raise this with the driver's own message so the handle can record it.
    """


class QueryError(SQLFluentError):
    """A statement failed to execute.

    Carries the driver message and the offending SQL.
    """

    sql: Optional[str]
    error: str

    def __init__(self, error: str, sql: Optional[str] = None) -> None:
        detail_message = f"{error}. ({sql})" if sql is not None else error
        super().__init__(detail=detail_message)
        self.error = error
        self.sql = sql


class CacheError(SQLFluentError):
    """A result cache backend failed to read or write an entry."""


class SerializationError(SQLFluentError):
    """Encoding or decoding of an object failed."""


@contextmanager
def wrap_exceptions(wrap_exceptions: bool = True, suppress: "Optional[type[Exception]]" = None) -> Generator[None, None, None]:
    try:
        yield

    except Exception as exc:
        if suppress is not None and isinstance(exc, suppress):
            return
        if wrap_exceptions is False:
            raise
        msg = "An error occurred during the operation."
        raise SQLFluentError(detail=msg) from exc
