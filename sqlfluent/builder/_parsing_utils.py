"""Value escaping and argument-shape resolution for the clause builders.

Every value that ends up inside compiled SQL passes through :func:`escape_value`.
The overloaded ``where``/``having`` argument lists are resolved once into one of
three condition variants which then render themselves with a given escaper.
"""

import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Final, Optional, Union

from sqlfluent.utils.type_guards import is_mapping

__all__ = (
    "COMPARISON_OPERATORS",
    "ColumnEquals",
    "ColumnOpValue",
    "Condition",
    "Escaper",
    "TemplateWithArgs",
    "escape_value",
    "is_comparison_operator",
    "is_numeric",
    "render_in_list",
    "resolve_condition",
    "substitute_placeholders",
)

COMPARISON_OPERATORS: Final = frozenset({"=", "!=", "<", ">", "<=", ">=", "<>"})
PLACEHOLDER: Final = "?"

_NUMERIC_TEXT: Final = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")

Escaper = Callable[[Any], str]


def escape_value(value: Any, quote: "Callable[[Any], str]") -> str:
    """Render ``value`` as a SQL literal.

    ``None`` becomes ``NULL``, booleans become ``1``/``0`` and numbers pass through
    unquoted. Everything else is handed to the driver's ``quote`` function.
    """
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return quote(value)


def is_numeric(value: Any) -> bool:
    """Check if a value is a number or a string spelling a decimal number."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    return isinstance(value, str) and _NUMERIC_TEXT.fullmatch(value) is not None


def is_comparison_operator(token: Any) -> bool:
    return isinstance(token, str) and token in COMPARISON_OPERATORS


def substitute_placeholders(template: str, values: "Sequence[Any]", escape: Escaper) -> str:
    """Replace each ``?`` in ``template`` with the next escaped value.

    Placeholders without a matching value are dropped; surplus values are ignored.
    """
    pieces = template.split(PLACEHOLDER)
    parts = [pieces[0]]
    for index, piece in enumerate(pieces[1:]):
        if index < len(values):
            parts.append(escape(values[index]))
        parts.append(piece)
    return "".join(parts)


def render_in_list(values: "Sequence[Any]", escape: Escaper) -> str:
    """Render the parenthesised body of an ``IN`` predicate."""
    return ", ".join(str(value) if is_numeric(value) else escape(value) for value in values)


@dataclass(frozen=True)
class ColumnEquals:
    """``{column: value, ...}``: one equality per pair."""

    pairs: "tuple[tuple[str, Any], ...]"

    def render(self, escape: Escaper, prefix: str = "", joiner: str = "AND") -> str:
        return f" {joiner} ".join(f"{prefix}{column} = {escape(value)}" for column, value in self.pairs)


@dataclass(frozen=True)
class TemplateWithArgs:
    """``("a = ? AND b = ?", [1, 2])``: positional placeholder substitution."""

    template: str
    args: "tuple[Any, ...]"

    def render(self, escape: Escaper, prefix: str = "", joiner: str = "AND") -> str:
        return f"{prefix}{substitute_placeholders(self.template, self.args, escape)}"


@dataclass(frozen=True)
class ColumnOpValue:
    """``("age", ">", 18)``: a single comparison."""

    column: str
    operator: str
    value: Any

    def render(self, escape: Escaper, prefix: str = "", joiner: str = "AND") -> str:
        return f"{prefix}{self.column} {self.operator} {escape(self.value)}"


Condition = Union[ColumnEquals, TemplateWithArgs, ColumnOpValue]


def resolve_condition(
    condition: "Union[str, Mapping[str, Any], None]",
    operator: Any = None,
    value: Any = None,
    default_operator: str = "=",
) -> Optional[Condition]:
    """Resolve an overloaded argument list into a condition variant.

    Args:
        condition: A column name, a template string or a column-to-value mapping.
        operator: A comparison token, a list of template values, or the value itself
            when it is not a recognised comparison token.
        value: The compared value when ``operator`` is a comparison token.
        default_operator: Operator assumed when ``operator`` is not a comparison token.

    Returns:
        The resolved condition, or None when ``condition`` is empty.
    """
    if is_mapping(condition):
        return ColumnEquals(tuple(condition.items())) if condition else None
    if not condition:
        return None
    if isinstance(operator, (list, tuple)):
        return TemplateWithArgs(condition, tuple(operator))
    if is_comparison_operator(operator):
        return ColumnOpValue(condition, operator, value)
    return ColumnOpValue(condition, default_operator, operator)
