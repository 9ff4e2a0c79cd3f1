"""Type guard functions for runtime type checking in sqlfluent."""

import dataclasses
from collections.abc import Mapping, Sequence
from typing import Any

from msgspec import Struct
from typing_extensions import TypeGuard

from sqlfluent.protocols import DataclassProtocol

__all__ = (
    "is_dataclass",
    "is_dict_row",
    "is_mapping",
    "is_msgspec_struct",
    "is_row_sequence",
)


def is_dataclass(obj: Any) -> "TypeGuard[type[DataclassProtocol]]":
    """Check if a class is a dataclass type."""
    return isinstance(obj, type) and dataclasses.is_dataclass(obj)


def is_msgspec_struct(obj: Any) -> "TypeGuard[type[Struct]]":
    """Check if a class is a msgspec ``Struct`` type."""
    return isinstance(obj, type) and issubclass(obj, Struct)


def is_mapping(obj: Any) -> "TypeGuard[Mapping[str, Any]]":
    """Check if a value is a mapping of column names to values."""
    return isinstance(obj, Mapping)


def is_dict_row(row: Any) -> "TypeGuard[dict[str, Any]]":
    """Check if a row is a plain dictionary."""
    return isinstance(row, dict)


def is_row_sequence(obj: Any) -> "TypeGuard[Sequence[Any]]":
    """Check if a value is a sequence of rows rather than a single row or text."""
    return isinstance(obj, Sequence) and not isinstance(obj, (str, bytes))
