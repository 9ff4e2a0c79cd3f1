from typing import TYPE_CHECKING, Optional, cast

from typing_extensions import Self

from sqlfluent.builder._parsing_utils import is_comparison_operator

if TYPE_CHECKING:
    from sqlfluent.builder.protocols import BuilderProtocol

__all__ = ("JoinClauseMixin",)


def _join_condition(left: Optional[str], operator: Optional[str], right: Optional[str]) -> str:
    """Build the ON expression of a join.

    Without an operator ``left`` is the whole expression. An operator that is not a
    comparison token is read as the right-hand column of an equality, so
    ``join("b", "a.id", "b.a_id")`` means ``a.id = b.a_id``.
    """
    if not operator:
        return left or ""
    if is_comparison_operator(operator):
        return f"{left} {operator} {right}"
    return f"{left} = {operator}" if not right else f"{left} = {operator} {right}"


class JoinClauseMixin:
    """Mixin providing JOIN clauses for SELECT statements."""

    __slots__ = ()

    def join(
        self,
        table: str,
        left: Optional[str] = None,
        operator: Optional[str] = None,
        right: Optional[str] = None,
        kind: str = "",
    ) -> Self:
        """Append a ``<kind>JOIN <table> ON <condition>`` clause.

        Args:
            table: Table to join; the configured prefix is applied.
            left: Left-hand side of the condition, or the full ON expression.
            operator: Comparison token. Anything else is taken as the right-hand side
                of an equality.
            right: Right-hand side of the condition.
            kind: Join kind including its trailing space, e.g. ``"LEFT "``.

        Returns:
            The current builder instance for method chaining.
        """
        builder = cast("BuilderProtocol", self)
        fragment = f" {kind}JOIN {builder._prefix}{table} ON {_join_condition(left, operator, right)}"
        state = builder._state
        state.join = fragment if state.join is None else f"{state.join}{fragment}"
        return self

    def inner_join(self, table: str, left: str, operator: Optional[str] = None, right: Optional[str] = None) -> Self:
        return self.join(table, left, operator, right, "INNER ")

    def left_join(self, table: str, left: str, operator: Optional[str] = None, right: Optional[str] = None) -> Self:
        return self.join(table, left, operator, right, "LEFT ")

    def right_join(self, table: str, left: str, operator: Optional[str] = None, right: Optional[str] = None) -> Self:
        return self.join(table, left, operator, right, "RIGHT ")

    def full_outer_join(
        self, table: str, left: str, operator: Optional[str] = None, right: Optional[str] = None
    ) -> Self:
        return self.join(table, left, operator, right, "FULL OUTER ")

    def left_outer_join(
        self, table: str, left: str, operator: Optional[str] = None, right: Optional[str] = None
    ) -> Self:
        return self.join(table, left, operator, right, "LEFT OUTER ")

    def right_outer_join(
        self, table: str, left: str, operator: Optional[str] = None, right: Optional[str] = None
    ) -> Self:
        return self.join(table, left, operator, right, "RIGHT OUTER ")
