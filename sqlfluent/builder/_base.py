"""Mutable clause state accumulated by the fluent builder methods."""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Optional, Union

__all__ = ("DEFAULT_SELECT", "BuilderState", "StatementPhase")

DEFAULT_SELECT = "*"


class StatementPhase(str, Enum):
    """Lifecycle of the statement held by a handle.

    ``BUILDING`` while clauses are accumulated, ``EXECUTING`` while the driver runs
    the compiled statement and ``RESET`` once the state has been cleared.
    """

    BUILDING = "building"
    EXECUTING = "executing"
    RESET = "reset"


@dataclass
class BuilderState:
    """Clause fragments for the statement currently being built.

    Each field holds already compiled SQL text. ``None`` means the clause is unset
    and is omitted from the compiled statement.
    """

    select: str = DEFAULT_SELECT
    from_: Optional[str] = None
    join: Optional[str] = None
    where: Optional[str] = None
    grouped: bool = False
    group_by: Optional[str] = None
    having: Optional[str] = None
    order_by: Optional[str] = None
    limit: Optional[Union[int, str]] = None
    offset: Optional[int] = None

    def reset(self) -> None:
        """Restore every clause to its default."""
        for state_field in fields(self):
            setattr(self, state_field.name, state_field.default)

    @property
    def is_pristine(self) -> bool:
        return all(getattr(self, state_field.name) == state_field.default for state_field in fields(self))

    def append_select(self, columns: str) -> None:
        self.select = columns if self.select == DEFAULT_SELECT else f"{self.select}, {columns}"

    def append_where(self, fragment: str, joiner: str = "AND") -> None:
        """Fold ``fragment`` onto the WHERE text, opening a pending group first."""
        if self.grouped:
            fragment = f"({fragment}"
            self.grouped = False
        self.where = fragment if self.where is None else f"{self.where} {joiner} {fragment}"
