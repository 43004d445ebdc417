"""Core action implementations shared across modes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from remote_ops.modes.base_mode import ModeContext, ModeResult

if TYPE_CHECKING:  # pragma: no cover
    from remote_ops.keymaps.resolver import ResolutionMatch


def exit_to_normal_mode(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.host.set_mode("normal")
    return ModeResult(consumed=True, switch_to="normal", message="exit_to_normal")


def _move(context: ModeContext, d_line: int, d_col: int) -> ModeResult:
    line, col = context.host.cursor
    context.host.set_cursor((line + d_line, max(0, col + d_col)))
    return ModeResult(consumed=True, status="move")


def move_left(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _move(context, 0, -1)


def move_right(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _move(context, 0, 1)


def move_up(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _move(context, -1, 0)


def move_down(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _move(context, 1, 0)


def insert_backspace(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    host = context.host
    line, col = host.cursor
    if col == 0:
        return ModeResult(consumed=True, status="noop")
    host.current_buffer.delete_range((line, col - 1), (line, col))
    host.set_cursor((line, col - 1))
    return ModeResult(consumed=True, status="insert")


__all__ = [
    "exit_to_normal_mode",
    "move_left",
    "move_right",
    "move_up",
    "move_down",
    "insert_backspace",
]
