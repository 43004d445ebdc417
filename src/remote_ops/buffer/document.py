"""Core line storage for buffers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence


@dataclass(slots=True)
class BufferDocument:
    """Immutable-ish text storage built on a list-of-lines model.

    Every mutation returns a new document with a bumped version so callers can
    cheaply tell whether the text changed underneath them.
    """

    _lines: List[str] = field(default_factory=lambda: [""])
    version: int = 0
    dirty: bool = False

    @classmethod
    def from_text(cls, text: str) -> "BufferDocument":
        return cls.from_lines(text.split("\n"))

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "BufferDocument":
        return cls(_lines=list(lines) or [""], version=0, dirty=False)

    def snapshot(self) -> Sequence[str]:
        """Return the current lines without exposing internal mutability."""

        return tuple(self._lines)

    @property
    def text(self) -> str:
        return "\n".join(self._lines)

    def update_lines(
        self, start: int, end: int, new_lines: Iterable[str]
    ) -> "BufferDocument":
        """Return a document with the 0-based slice ``[start:end]`` replaced."""

        lines = list(self._lines)
        lines[start:end] = list(new_lines)
        return BufferDocument(
            _lines=lines or [""], version=self.version + 1, dirty=True
        )

    def replace_text(self, text: str) -> "BufferDocument":
        return BufferDocument(
            _lines=text.split("\n"), version=self.version + 1, dirty=True
        )

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def get_line(self, number: int) -> str:
        """Return line ``number`` (1-based)."""

        return self._lines[number - 1]

    def is_blank(self) -> bool:
        return len(self._lines) == 1 and self._lines[0] == ""
