"""JSON encoding and decoding backed by ``msgspec``."""

import datetime
import enum
from decimal import Decimal
from types import SimpleNamespace
from typing import Any, Literal, Union, overload
from uuid import UUID

import msgspec

from sqlfluent.exceptions import SerializationError

__all__ = ("decode_json", "encode_json")


def _type_to_string(value: Any) -> Any:
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, (Decimal, UUID)):
        return str(value)
    if isinstance(value, SimpleNamespace):
        return vars(value)
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    msg = f"Unsupported type: {type(value)!r}"
    raise TypeError(msg)


_encoder = msgspec.json.Encoder(enc_hook=_type_to_string)
_decoder = msgspec.json.Decoder()


@overload
def encode_json(data: Any, *, as_bytes: Literal[False] = ...) -> str: ...


@overload
def encode_json(data: Any, *, as_bytes: Literal[True]) -> bytes: ...


def encode_json(data: Any, *, as_bytes: bool = False) -> Union[str, bytes]:
    """Encode data to JSON.

    Args:
        data: Data to encode.
        as_bytes: Return ``bytes`` instead of ``str``.

    Raises:
        SerializationError: The data holds a value that cannot be encoded.

    Returns:
        The JSON document.
    """
    try:
        encoded = _encoder.encode(data)
    except (TypeError, msgspec.EncodeError) as exc:
        msg = f"Unable to encode value as JSON: {exc}"
        raise SerializationError(msg) from exc
    return encoded if as_bytes else encoded.decode("utf-8")


def decode_json(data: Union[str, bytes]) -> Any:
    """Decode a JSON document.

    Raises:
        SerializationError: The document is not valid JSON.

    Returns:
        The decoded Python object.
    """
    try:
        return _decoder.decode(data)
    except msgspec.DecodeError as exc:
        msg = f"Unable to decode JSON: {exc}"
        raise SerializationError(msg) from exc
