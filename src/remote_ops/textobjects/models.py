"""Dataclasses describing located text-object instances and their bounds."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

from remote_ops.buffer import Position


class RenderingMode(str, Enum):
    LINEWISE = "linewise"
    CHARACTERWISE = "characterwise"


class Variant(str, Enum):
    INNER = "i"
    AROUND = "a"


@dataclass(frozen=True, slots=True)
class TextObjectRef:
    """Parsed text-object argument such as ``i"``, ``am`` or the motion ``L``."""

    key: str
    variant: Optional[Variant] = None

    @classmethod
    def parse(cls, value: str) -> "TextObjectRef":
        if len(value) == 1:
            return cls(key=value)
        if len(value) == 2 and value[0] in ("i", "a"):
            return cls(key=value[1], variant=Variant(value[0]))
        raise ValueError(f"Invalid text object '{value}'")

    @property
    def is_motion(self) -> bool:
        return self.variant is None

    @property
    def inner(self) -> bool:
        return self.variant is not Variant.AROUND

    def __str__(self) -> str:
        return f"{self.variant.value}{self.key}" if self.variant else self.key


@dataclass(slots=True)
class Instance:
    """One occurrence of a text-object kind.

    ``end`` points at the last character of the span (inclusive, like the
    host's change marks). ``anchor`` is the position the kind re-selects
    from; for delimiter kinds that is the opening delimiter.
    """

    start: Position
    end: Position
    preview: str
    anchor: Optional[Position] = None
    metadata: Mapping[str, Any] = field(default_factory=dict)
    display_range: Optional[Tuple[int, int]] = None

    def __post_init__(self) -> None:
        if self.anchor is None:
            self.anchor = self.start
        self.metadata = MappingProxyType(dict(self.metadata))

    @property
    def first_line_preview(self) -> str:
        return self.preview.split("\n", 1)[0]

    @property
    def line_count(self) -> int:
        return self.end[0] - self.start[0] + 1

    @property
    def start_line(self) -> int:
        return self.start[0]

    @property
    def end_line(self) -> int:
        return self.end[0]


@dataclass(frozen=True, slots=True)
class KindBounds:
    """Region a kind resolved for an operation.

    Linewise bounds cover ``start[0]..end[0]``. Characterwise bounds use an
    exclusive end column, except for motion kinds whose end is inclusive.
    """

    start: Position
    end: Position
    linewise: bool = False

    @classmethod
    def lines(cls, first: int, last: int) -> "KindBounds":
        return cls(start=(first, 0), end=(last, 0), linewise=True)


__all__ = [
    "RenderingMode",
    "Variant",
    "TextObjectRef",
    "Instance",
    "KindBounds",
]
