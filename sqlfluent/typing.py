from enum import Enum
from typing import Any, Final, Literal, Union

from typing_extensions import TypeAlias, TypeVar

__all__ = (
    "Empty",
    "EmptyType",
    "ModelDTOT",
    "RowT",
    "TableNames",
)


class _EmptyEnum(Enum):
    """A sentinel enum used as placeholder."""

    EMPTY = 0


EmptyType: TypeAlias = Literal[_EmptyEnum.EMPTY]
Empty: Final = _EmptyEnum.EMPTY

ModelDTOT = TypeVar("ModelDTOT")
"""Type variable for the target type of class-hydrated rows."""

RowT: TypeAlias = Any
"""A fetched row: an attribute-access object, a dictionary or a hydrated instance."""

TableNames: TypeAlias = Union[str, "list[str]", "tuple[str, ...]"]
