"""Window (viewport) state tracked by the in-memory host."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from remote_ops.buffer import Position


@dataclass(slots=True)
class Window:
    """A view onto one buffer with its own cursor and scroll offset.

    Cursors are remembered per buffer so switching a window to another buffer
    and back lands on the previous position, as editors usually do.
    """

    id: int
    buffer_id: int
    cursor: Position = (1, 0)
    topline: int = 1
    height: int = 40
    width: int = 80
    _buffer_cursors: Dict[int, Position] = field(default_factory=dict)

    def show_buffer(self, buffer_id: int) -> None:
        if buffer_id == self.buffer_id:
            return
        self._buffer_cursors[self.buffer_id] = self.cursor
        self.buffer_id = buffer_id
        self.cursor = self._buffer_cursors.get(buffer_id, (1, 0))
        self.topline = 1

    def center_on(self, line: int) -> None:
        self.topline = max(1, line - self.height // 2)
