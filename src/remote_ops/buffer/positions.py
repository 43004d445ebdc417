"""Position arithmetic over list-of-lines documents.

Positions are ``(line, column)`` tuples with a 1-based line and a 0-based
column, the same convention host cursors use.
"""

from __future__ import annotations

from typing import Sequence, Tuple

Position = Tuple[int, int]


def offset_for_position(lines: Sequence[str], position: Position) -> int:
    line, col = position
    offset = 0
    for index in range(line - 1):
        offset += len(lines[index]) + 1  # newline
    return offset + col


def position_from_offset(lines: Sequence[str], offset: int) -> Position:
    running = 0
    for index, text in enumerate(lines):
        if offset <= running + len(text):
            return (index + 1, offset - running)
        running += len(text) + 1
    last = len(lines)
    return (last, len(lines[-1]) if lines else 0)


def clamp_position(lines: Sequence[str], position: Position) -> Position:
    """Pull ``position`` back inside the document (cursor-style, not past EOL)."""

    if not lines:
        return (1, 0)
    line = max(1, min(position[0], len(lines)))
    text = lines[line - 1]
    col = max(0, min(position[1], max(0, len(text) - 1)))
    return (line, col)


__all__ = [
    "Position",
    "offset_for_position",
    "position_from_offset",
    "clamp_position",
]
