"""Assemble accumulated clause state into SQL text.

Clauses are emitted in a fixed order and omitted entirely when unset. All values
have already been escaped by the builder methods, except the row data passed to
``compile_insert`` and ``compile_update`` which is escaped here.
"""

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Final, Union

from sqlfluent.utils.type_guards import is_mapping

if TYPE_CHECKING:
    from sqlfluent.builder._base import BuilderState
    from sqlfluent.builder._parsing_utils import Escaper

__all__ = (
    "MAINTENANCE_COMMANDS",
    "compile_delete",
    "compile_insert",
    "compile_maintenance",
    "compile_select",
    "compile_update",
)

MAINTENANCE_COMMANDS: Final = frozenset({"ANALYZE", "CHECK", "CHECKSUM", "OPTIMIZE", "REPAIR"})

InsertData = Union[Mapping[str, Any], Sequence[Mapping[str, Any]]]


def _where_order_limit(state: "BuilderState") -> str:
    sql = ""
    if state.where is not None:
        sql += f" WHERE {state.where}"
    if state.order_by is not None:
        sql += f" ORDER BY {state.order_by}"
    if state.limit is not None:
        sql += f" LIMIT {state.limit}"
    return sql


def compile_select(state: "BuilderState") -> str:
    sql = f"SELECT {state.select} FROM {state.from_}"
    if state.join is not None:
        sql += state.join
    if state.where is not None:
        sql += f" WHERE {state.where}"
    if state.group_by is not None:
        sql += f" GROUP BY {state.group_by}"
    if state.having is not None:
        sql += f" HAVING {state.having}"
    if state.order_by is not None:
        sql += f" ORDER BY {state.order_by}"
    if state.limit is not None:
        sql += f" LIMIT {state.limit}"
    if state.offset is not None:
        sql += f" OFFSET {state.offset}"
    return sql


def compile_insert(state: "BuilderState", data: InsertData, escape: "Escaper") -> str:
    """Compile a single or multi-row INSERT.

    A sequence of mappings produces one VALUES group per row; the column list is
    taken from the first row.
    """
    rows: Sequence[Mapping[str, Any]] = [data] if is_mapping(data) else data
    columns = ", ".join(rows[0].keys()) if rows else ""
    groups = ", ".join(f"({', '.join(escape(value) for value in row.values())})" for row in rows)
    return f"INSERT INTO {state.from_} ({columns}) VALUES {groups}"


def compile_update(state: "BuilderState", data: "Mapping[str, Any]", escape: "Escaper") -> str:
    assignments = ", ".join(f"{column}={escape(value)}" for column, value in data.items())
    return f"UPDATE {state.from_} SET {assignments}{_where_order_limit(state)}"


def compile_delete(state: "BuilderState") -> str:
    """Compile a DELETE; an unconditional delete becomes ``TRUNCATE TABLE``."""
    clauses = _where_order_limit(state)
    if not clauses:
        return f"TRUNCATE TABLE {state.from_}"
    return f"DELETE FROM {state.from_}{clauses}"


def compile_maintenance(state: "BuilderState", command: str) -> str:
    command = command.upper()
    if command not in MAINTENANCE_COMMANDS:
        msg = f"Unsupported table maintenance command: {command}"
        raise ValueError(msg)
    return f"{command} TABLE {state.from_}"
