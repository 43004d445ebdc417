"""Insert mode entered after a change operation."""

from __future__ import annotations

from remote_ops.errors import BufferValidationError, HostOperationFailure

from .base_mode import KeyInput, ModeResult
from .keymap_helpers import KeymapMode


class InsertMode(KeymapMode):
    name = "insert"

    def handle_unmapped(self, key: KeyInput) -> ModeResult:
        char = key.printable
        if char is None:
            return ModeResult(consumed=False)
        host = self.context.host
        line, col = host.cursor
        try:
            host.current_buffer.insert_text((line, col), char)
        except (BufferValidationError, HostOperationFailure) as exc:
            return ModeResult(consumed=True, status="error", message=str(exc))
        host.set_cursor((line, col + 1))
        return ModeResult(consumed=True, status="insert")


__all__ = ["InsertMode"]
