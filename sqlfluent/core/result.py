"""Fetch modes and row hydration.

Adapters hand rows over as dictionaries. The requested :class:`FetchMode` decides
what the caller gets back: attribute-access objects, the dictionaries themselves,
or instances of a caller supplied type.
"""

import datetime
from collections.abc import Sequence
from enum import Enum
from functools import partial
from pathlib import Path, PurePath
from types import SimpleNamespace
from typing import Any, Callable, Optional, Union
from uuid import UUID

import msgspec

from sqlfluent.exceptions import ImproperConfigurationError, wrap_exceptions
from sqlfluent.utils.type_guards import is_dataclass, is_dict_row, is_msgspec_struct, is_row_sequence

__all__ = (
    "FetchMode",
    "from_plain",
    "hydrate",
    "hydrate_row",
    "payload_cardinality",
    "resolve_fetch_mode",
    "to_plain",
)

_DEFAULT_TYPE_DECODERS: "list[tuple[Callable[[Any], bool], Callable[[Any, Any], Any]]]" = [
    (lambda x: x is UUID, lambda t, v: t(v.hex) if isinstance(v, UUID) else t(str(v))),
    (lambda x: x is datetime.datetime, lambda t, v: t.fromisoformat(v) if isinstance(v, str) else v),
    (lambda x: x is datetime.date, lambda t, v: t.fromisoformat(v) if isinstance(v, str) else v),
    (lambda x: x is datetime.time, lambda t, v: t.fromisoformat(v) if isinstance(v, str) else v),
]


class FetchMode(str, Enum):
    """Shape that fetched rows are returned in."""

    OBJECT = "object"
    ARRAY = "array"
    CLASS = "class"


def resolve_fetch_mode(mode: "Union[FetchMode, str, None]", schema_type: "Optional[type[Any]]" = None) -> FetchMode:
    """Map a mode token to a :class:`FetchMode`.

    ``"class"`` selects class hydration and requires ``schema_type``; ``"array"``
    selects dictionaries; anything else, including ``None``, selects objects.

    Raises:
        ImproperConfigurationError: Class hydration was requested without a target type.
    """
    if isinstance(mode, FetchMode):
        resolved = mode
    elif mode == FetchMode.CLASS.value:
        resolved = FetchMode.CLASS
    elif mode == FetchMode.ARRAY.value:
        resolved = FetchMode.ARRAY
    else:
        resolved = FetchMode.OBJECT
    if resolved is FetchMode.CLASS and schema_type is None:
        msg = "Fetch mode 'class' requires a schema_type to hydrate rows into."
        raise ImproperConfigurationError(msg)
    return resolved


def _default_msgspec_deserializer(
    target_type: Any, value: Any, type_decoders: "Optional[Sequence[tuple[Any, Any]]]" = None
) -> Any:
    """Convert driver values that msgspec does not handle natively."""
    if type_decoders:
        for predicate, decoder in type_decoders:
            if predicate(target_type):
                with wrap_exceptions(suppress=ValueError):
                    return decoder(target_type, value)
    if isinstance(target_type, type) and issubclass(target_type, Enum) and not isinstance(value, Enum):
        return target_type(value)
    if isinstance(target_type, type) and isinstance(value, target_type):
        return value
    if isinstance(target_type, type) and issubclass(target_type, (Path, PurePath)):
        return target_type(value)
    return value


def hydrate_row(row: "dict[str, Any]", mode: FetchMode, schema_type: "Optional[type[Any]]" = None) -> Any:
    """Convert one dictionary row into the requested shape."""
    if mode is FetchMode.ARRAY:
        return row
    if mode is FetchMode.OBJECT:
        return SimpleNamespace(**row)
    if is_msgspec_struct(schema_type):
        return msgspec.convert(
            row,
            type=schema_type,
            dec_hook=partial(_default_msgspec_deserializer, type_decoders=_DEFAULT_TYPE_DECODERS),
        )
    if is_dataclass(schema_type):
        return schema_type(**row)  # type: ignore[call-arg]
    return schema_type(**row)  # type: ignore[misc]


def hydrate(
    rows: "Union[list[dict[str, Any]], dict[str, Any], None]",
    mode: FetchMode,
    schema_type: "Optional[type[Any]]" = None,
) -> Any:
    """Convert a single row or a list of rows into the requested shape."""
    if rows is None:
        return None
    if is_dict_row(rows):
        return hydrate_row(rows, mode, schema_type)
    return [hydrate_row(row, mode, schema_type) for row in rows]


def to_plain(payload: Any) -> Any:
    """Copy rows into fresh dictionaries so a stored payload shares nothing with the caller."""
    if isinstance(payload, SimpleNamespace):
        return dict(vars(payload))
    if is_dict_row(payload):
        return dict(payload)
    if isinstance(payload, list):
        return [to_plain(item) for item in payload]
    return payload


def from_plain(payload: Any, assoc: bool) -> Any:
    """Rebuild rows read back from a cache in dictionary or object shape.

    Dictionary rows are copied, so editing a returned row leaves the stored payload intact.
    """
    if assoc:
        if is_dict_row(payload):
            return dict(payload)
        if isinstance(payload, list):
            return [dict(item) if is_dict_row(item) else item for item in payload]
        return payload
    if is_dict_row(payload):
        return SimpleNamespace(**payload)
    if isinstance(payload, list):
        return [SimpleNamespace(**item) if is_dict_row(item) else item for item in payload]
    return payload


def payload_cardinality(payload: Any) -> int:
    """Row count of a cached payload: list length, 0 for nothing, otherwise 1."""
    if is_row_sequence(payload):
        return len(payload)
    if payload is None or payload == "":
        return 0
    return 1
