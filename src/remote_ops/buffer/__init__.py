"""Buffer abstractions: line storage, registers and position helpers."""

from .buffer import Buffer, BufferDelta, Transaction
from .document import BufferDocument
from .positions import (
    Position,
    clamp_position,
    offset_for_position,
    position_from_offset,
)
from .registers import RegisterBank, RegisterSnapshot, RegisterValue
from .validation import ensure_position

__all__ = [
    "Buffer",
    "BufferDelta",
    "BufferDocument",
    "Transaction",
    "Position",
    "clamp_position",
    "offset_for_position",
    "position_from_offset",
    "RegisterBank",
    "RegisterSnapshot",
    "RegisterValue",
    "ensure_position",
]
