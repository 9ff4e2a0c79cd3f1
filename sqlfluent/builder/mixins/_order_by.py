from typing import TYPE_CHECKING, Any, Final, Optional, Union, cast

from typing_extensions import Self

from sqlfluent.builder._parsing_utils import resolve_condition

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlfluent.builder.protocols import BuilderProtocol

__all__ = ("GroupByClauseMixin", "HavingClauseMixin", "OrderByClauseMixin")

RANDOM_ORDER: Final = "rand()"


class OrderByClauseMixin:
    """Mixin providing the ORDER BY clause."""

    __slots__ = ()

    def order_by(self, column: str, direction: Optional[str] = None) -> Self:
        """Set the ORDER BY clause.

        Without a direction ``ASC`` is appended, unless ``column`` already holds a
        full expression (it contains whitespace) or is ``rand()``.

        Returns:
            The current builder instance for method chaining.
        """
        builder = cast("BuilderProtocol", self)
        if direction is not None:
            builder._state.order_by = f"{column} {direction.upper()}"
        elif " " in column or column.lower() == RANDOM_ORDER:
            builder._state.order_by = column
        else:
            builder._state.order_by = f"{column} ASC"
        return self


class GroupByClauseMixin:
    """Mixin providing the GROUP BY clause."""

    __slots__ = ()

    def group_by(self, columns: "Union[str, Sequence[str]]") -> Self:
        builder = cast("BuilderProtocol", self)
        builder._state.group_by = columns if isinstance(columns, str) else ", ".join(columns)
        return self


class HavingClauseMixin:
    """Mixin providing the HAVING clause."""

    __slots__ = ()

    def having(self, column: str, operator: Any = None, value: Any = None) -> Self:
        """Set the HAVING clause.

        Accepts the same shapes as ``where`` except mappings. When ``operator`` is not
        a comparison token it is the compared value and ``>`` is assumed.

        Returns:
            The current builder instance for method chaining.
        """
        builder = cast("BuilderProtocol", self)
        resolved = resolve_condition(column, operator, value, default_operator=">")
        if resolved is not None:
            builder._state.having = resolved.render(builder.escape)
        return self
