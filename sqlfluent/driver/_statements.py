"""Terminal operations that compile the accumulated clauses and run them."""

from typing import TYPE_CHECKING, Any, Literal, Optional, Union, overload

from sqlfluent.builder.compiler import (
    compile_delete,
    compile_insert,
    compile_maintenance,
    compile_select,
    compile_update,
)

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from sqlfluent.builder._base import BuilderState
    from sqlfluent.core.result import FetchMode
    from sqlfluent.protocols import ConnectionProtocol

__all__ = ("StatementMixin",)


class StatementMixin:
    """``get``, ``get_all``, ``insert``, ``update``, ``delete`` and table maintenance.

    Each operation accepts ``as_sql=True`` to return the compiled SQL instead of
    executing it; the clause state is then left untouched.
    """

    __slots__ = ()

    connection: "ConnectionProtocol"
    _state: "BuilderState"
    _insert_id: Any

    if TYPE_CHECKING:

        def escape(self, value: Any) -> str: ...

        def execute(
            self,
            sql: str,
            *,
            fetch_all: bool = True,
            mode: "Union[FetchMode, str, None]" = None,
            schema_type: "Optional[type[Any]]" = None,
        ) -> Any: ...

    @overload
    def get(
        self, mode: "Union[FetchMode, str, None]" = ..., schema_type: "Optional[type[Any]]" = ..., *, as_sql: Literal[True]
    ) -> str: ...

    @overload
    def get(
        self,
        mode: "Union[FetchMode, str, None]" = ...,
        schema_type: "Optional[type[Any]]" = ...,
        *,
        as_sql: Literal[False] = ...,
    ) -> Any: ...

    def get(
        self,
        mode: "Union[FetchMode, str, None]" = None,
        schema_type: "Optional[type[Any]]" = None,
        *,
        as_sql: bool = False,
    ) -> Any:
        """Fetch the first matching row, or None. ``LIMIT 1`` is always applied."""
        self._state.limit = 1
        sql = compile_select(self._state)
        if as_sql:
            return sql
        return self.execute(sql, fetch_all=False, mode=mode, schema_type=schema_type)

    def get_all(
        self,
        mode: "Union[FetchMode, str, None]" = None,
        schema_type: "Optional[type[Any]]" = None,
        *,
        as_sql: bool = False,
    ) -> Any:
        """Fetch every matching row; an empty list when nothing matches."""
        sql = compile_select(self._state)
        if as_sql:
            return sql
        return self.execute(sql, fetch_all=True, mode=mode, schema_type=schema_type)

    def insert(
        self, data: "Union[Mapping[str, Any], Sequence[Mapping[str, Any]]]", *, as_sql: bool = False
    ) -> Any:
        """Insert one row, or several when given a sequence of mappings.

        Returns:
            The generated identifier when rows were written, otherwise False.
        """
        sql = compile_insert(self._state, data, self.escape)
        if as_sql:
            return sql
        if self.execute(sql):
            self._insert_id = self.connection.last_insert_id()
            return self._insert_id
        return False

    def update(self, data: "Mapping[str, Any]", *, as_sql: bool = False) -> "Union[int, str]":
        sql = compile_update(self._state, data, self.escape)
        if as_sql:
            return sql
        return self.execute(sql)  # type: ignore[no-any-return]

    def delete(self, *, as_sql: bool = False) -> "Union[int, str]":
        """Delete matching rows.

        Without WHERE, ORDER BY or LIMIT the table is truncated instead.
        """
        sql = compile_delete(self._state)
        if as_sql:
            return sql
        return self.execute(sql)  # type: ignore[no-any-return]

    def analyze(self, mode: "Union[FetchMode, str, None]" = None, *, as_sql: bool = False) -> Any:
        return self._maintenance("ANALYZE", mode, as_sql)

    def check(self, mode: "Union[FetchMode, str, None]" = None, *, as_sql: bool = False) -> Any:
        return self._maintenance("CHECK", mode, as_sql)

    def checksum(self, mode: "Union[FetchMode, str, None]" = None, *, as_sql: bool = False) -> Any:
        return self._maintenance("CHECKSUM", mode, as_sql)

    def optimize(self, mode: "Union[FetchMode, str, None]" = None, *, as_sql: bool = False) -> Any:
        return self._maintenance("OPTIMIZE", mode, as_sql)

    def repair(self, mode: "Union[FetchMode, str, None]" = None, *, as_sql: bool = False) -> Any:
        return self._maintenance("REPAIR", mode, as_sql)

    def _maintenance(self, command: str, mode: "Union[FetchMode, str, None]", as_sql: bool) -> Any:
        sql = compile_maintenance(self._state, command)
        if as_sql:
            return sql
        return self.execute(sql, fetch_all=True, mode=mode)
