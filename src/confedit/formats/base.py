from __future__ import annotations

from abc import ABC, abstractmethod

from ..value import Value


class FormatAdapter(ABC):
    """Convert between document text and the value tree for one syntax.

    Serialization is lossy but valid: comments and layout of the original
    text are not kept, only its content.
    """

    name: str = ""
    suffixes: tuple[str, ...] = ()
    #: Render nulls as an "add field" affordance instead of a plain label.
    null_adds_fields: bool = False

    @abstractmethod
    def parse(self, text: str) -> Value:
        pass

    @abstractmethod
    def serialize(self, value: Value) -> str:
        pass

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return f"<{type(self).__name__} {self.name}>"
