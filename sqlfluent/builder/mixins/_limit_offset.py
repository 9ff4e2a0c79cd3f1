from typing import TYPE_CHECKING, Optional, cast

from typing_extensions import Self

if TYPE_CHECKING:
    from sqlfluent.builder.protocols import BuilderProtocol

__all__ = ("LimitOffsetClauseMixin",)


class LimitOffsetClauseMixin:
    """Mixin providing LIMIT and OFFSET clauses."""

    __slots__ = ()

    def limit(self, value: int, end: Optional[int] = None) -> Self:
        """Add LIMIT clause.

        Args:
            value: The maximum number of rows, or the starting row when ``end`` is given.
            end: Row count for the two-argument ``LIMIT start, count`` form.

        Returns:
            The current builder instance for method chaining.
        """
        builder = cast("BuilderProtocol", self)
        builder._state.limit = value if end is None else f"{value}, {end}"
        return self

    def offset(self, value: int) -> Self:
        """Add OFFSET clause.

        Returns:
            The current builder instance for method chaining.
        """
        builder = cast("BuilderProtocol", self)
        builder._state.offset = value
        return self

    def pagination(self, per_page: int, page: int) -> Self:
        """Set LIMIT and OFFSET for a 1-based page number; pages below 1 read as page 1."""
        builder = cast("BuilderProtocol", self)
        builder._state.limit = per_page
        builder._state.offset = (max(page, 1) - 1) * per_page
        return self
