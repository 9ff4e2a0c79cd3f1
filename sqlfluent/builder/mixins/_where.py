from typing import TYPE_CHECKING, Any, Callable, Union, cast

from typing_extensions import Self

from sqlfluent.builder._parsing_utils import render_in_list, resolve_condition

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from sqlfluent.builder.protocols import BuilderProtocol

__all__ = ("WhereClauseMixin",)


class WhereClauseMixin:
    """Mixin providing WHERE predicates for SELECT, UPDATE and DELETE statements.

    Predicates fold left to right into a single string. ``grouped`` opens a
    parenthesised sub-expression around whatever predicates its callback adds.
    """

    __slots__ = ()

    def where(
        self,
        condition: "Union[str, Mapping[str, Any], None]",
        operator: Any = None,
        value: Any = None,
        prefix: str = "",
        joiner: str = "AND",
    ) -> Self:
        """Add a WHERE predicate.

        Args:
            condition: A column name, a template containing ``?`` placeholders, or a
                mapping of column names to values compared for equality.
            operator: A comparison token, the list of template values, or the compared
                value itself (``=`` is then assumed).
            value: The compared value when ``operator`` is a comparison token.
            prefix: Text placed before the predicate, ``"NOT "`` for negation.
            joiner: ``AND`` or ``OR``; joins mapping pairs and links the predicate to
                the ones before it.

        Returns:
            The current builder instance for method chaining.
        """
        builder = cast("BuilderProtocol", self)
        resolved = resolve_condition(condition, operator, value)
        if resolved is None:
            return self
        builder._state.append_where(resolved.render(builder.escape, prefix, joiner), joiner)
        return self

    def or_where(self, condition: "Union[str, Mapping[str, Any], None]", operator: Any = None, value: Any = None) -> Self:
        return self.where(condition, operator, value, "", "OR")

    def not_where(
        self, condition: "Union[str, Mapping[str, Any], None]", operator: Any = None, value: Any = None
    ) -> Self:
        return self.where(condition, operator, value, "NOT ", "AND")

    def or_not_where(
        self, condition: "Union[str, Mapping[str, Any], None]", operator: Any = None, value: Any = None
    ) -> Self:
        return self.where(condition, operator, value, "NOT ", "OR")

    def where_null(self, column: str, negate: bool = False) -> Self:
        """Add ``column IS [NOT] NULL``, always joined with AND."""
        builder = cast("BuilderProtocol", self)
        builder._state.append_where(f"{column} IS NOT NULL" if negate else f"{column} IS NULL")
        return self

    def where_not_null(self, column: str) -> Self:
        return self.where_null(column, negate=True)

    def grouped(self, callback: "Callable[[Self], Any]") -> Self:
        """Wrap the predicates added by ``callback`` in parentheses.

        The callback receives this builder. When it adds no predicate the group
        degenerates to a literal ``()``.

        Returns:
            The current builder instance for method chaining.
        """
        builder = cast("BuilderProtocol", self)
        state = builder._state
        state.grouped = True
        callback(self)
        if state.grouped:
            state.grouped = False
            state.where = f"{state.where or ''}()"
        else:
            state.where = f"{state.where})"
        return self

    def in_(self, column: str, values: "Sequence[Any]", prefix: str = "", joiner: str = "AND") -> Self:
        """Add ``column [NOT ]IN (...)``; numeric values are left unquoted."""
        builder = cast("BuilderProtocol", self)
        builder._state.append_where(f"{column} {prefix}IN ({render_in_list(values, builder.escape)})", joiner)
        return self

    def not_in(self, column: str, values: "Sequence[Any]") -> Self:
        return self.in_(column, values, "NOT ", "AND")

    def or_in(self, column: str, values: "Sequence[Any]") -> Self:
        return self.in_(column, values, "", "OR")

    def or_not_in(self, column: str, values: "Sequence[Any]") -> Self:
        return self.in_(column, values, "NOT ", "OR")

    def like(self, column: str, pattern: str, prefix: str = "", joiner: str = "AND") -> Self:
        """Add ``column [NOT ]LIKE 'pattern'``."""
        builder = cast("BuilderProtocol", self)
        builder._state.append_where(f"{column} {prefix}LIKE {builder.escape(pattern)}", joiner)
        return self

    def or_like(self, column: str, pattern: str) -> Self:
        return self.like(column, pattern, "", "OR")

    def not_like(self, column: str, pattern: str) -> Self:
        return self.like(column, pattern, "NOT ", "AND")

    def or_not_like(self, column: str, pattern: str) -> Self:
        return self.like(column, pattern, "NOT ", "OR")
