"""Validation helpers shared across buffer services."""

from __future__ import annotations

from remote_ops.errors import BufferValidationError

from .document import BufferDocument
from .positions import Position


def ensure_position(
    document: BufferDocument, position: Position, *, allow_eol: bool = True
) -> Position:
    line, col = position
    if line < 1 or line > document.line_count:
        raise BufferValidationError("Line out of range", position=position)
    text = document.get_line(line)
    limit = len(text) if allow_eol else max(0, len(text) - 1)
    if col < 0 or col > limit:
        raise BufferValidationError("Column out of range", position=position)
    return position
