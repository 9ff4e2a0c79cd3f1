from typing import TYPE_CHECKING, Optional, Union, cast

from typing_extensions import Self

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlfluent.builder.protocols import BuilderProtocol

__all__ = ("SelectColumnsMixin",)


class SelectColumnsMixin:
    """Mixin providing the SELECT list."""

    __slots__ = ()

    def select(self, fields: "Union[str, Sequence[str]]") -> Self:
        """Add columns to the SELECT list.

        The first call replaces the default ``*``; later calls append.

        Returns:
            The current builder instance for method chaining.
        """
        builder = cast("BuilderProtocol", self)
        builder._state.append_select(fields if isinstance(fields, str) else ", ".join(fields))
        return self

    def count(self, field: str, alias: Optional[str] = None) -> Self:
        """Add ``COUNT(field)`` to the SELECT list, optionally aliased."""
        builder = cast("BuilderProtocol", self)
        column = f"COUNT({field})" if alias is None else f"COUNT({field}) AS {alias}"
        builder._state.append_select(column)
        return self
