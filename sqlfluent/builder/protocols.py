from typing import Any, Protocol

from sqlfluent.builder._base import BuilderState

__all__ = ("BuilderProtocol",)


class BuilderProtocol(Protocol):
    _state: BuilderState
    _prefix: str

    def escape(self, value: Any) -> str: ...
