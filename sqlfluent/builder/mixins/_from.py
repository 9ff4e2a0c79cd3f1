from typing import TYPE_CHECKING, cast

from typing_extensions import Self

if TYPE_CHECKING:
    from sqlfluent.builder.protocols import BuilderProtocol
    from sqlfluent.typing import TableNames

__all__ = ("TableClauseMixin",)


class TableClauseMixin:
    """Mixin providing the table list shared by every statement kind."""

    __slots__ = ()

    def table(self, names: "TableNames") -> Self:
        """Set the statement's table(s).

        Args:
            names: A table name, a list of names, or a comma separated string of names.
                Every name receives the configured table prefix. Several names produce
                an implicit cross join.

        Returns:
            The current builder instance for method chaining.
        """
        builder = cast("BuilderProtocol", self)
        if isinstance(names, str):
            tables = names.split(",") if names.find(",") > 0 else [names]
        else:
            tables = list(names)
        builder._state.from_ = ", ".join(f"{builder._prefix}{name.lstrip()}" for name in tables)
        return self
