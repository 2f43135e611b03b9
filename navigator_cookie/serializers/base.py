"""Serializer capability shared by every cookie payload format."""
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from ..result import Result


class Serializer(ABC):
    """Converts session values to bytes and back.

    ``init`` runs once when the store is configured; whatever it returns
    is handed back to every ``encode``/``decode`` call. ``encode`` and
    ``decode`` report failures as ``Err(EncodeError)`` and
    ``Err(DecodeError)`` and must not raise on bad input.
    """

    name: str = ""

    @abstractmethod
    def init(self, options: Mapping[str, Any]) -> Any:
        ...

    @abstractmethod
    def encode(self, value: Any, config: Any) -> Result:
        ...

    @abstractmethod
    def decode(self, data: bytes, config: Any) -> Result:
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"
