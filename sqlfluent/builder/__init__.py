"""Fluent clause accumulation and statement compilation."""

from sqlfluent.builder._base import DEFAULT_SELECT, BuilderState, StatementPhase
from sqlfluent.builder._parsing_utils import (
    COMPARISON_OPERATORS,
    ColumnEquals,
    ColumnOpValue,
    Condition,
    TemplateWithArgs,
    escape_value,
    is_numeric,
    resolve_condition,
    substitute_placeholders,
)
from sqlfluent.builder.compiler import (
    compile_delete,
    compile_insert,
    compile_maintenance,
    compile_select,
    compile_update,
)

__all__ = (
    "COMPARISON_OPERATORS",
    "DEFAULT_SELECT",
    "BuilderState",
    "ColumnEquals",
    "ColumnOpValue",
    "Condition",
    "StatementPhase",
    "TemplateWithArgs",
    "compile_delete",
    "compile_insert",
    "compile_maintenance",
    "compile_select",
    "compile_update",
    "escape_value",
    "is_numeric",
    "resolve_condition",
    "substitute_placeholders",
)
