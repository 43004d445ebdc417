"""Actions applied to the selection left behind by a select operation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from remote_ops.errors import BufferValidationError, HostOperationFailure
from remote_ops.modes.base_mode import ModeContext, ModeResult
from remote_ops.modes.keymap_helpers import host_mode, require_controller
from remote_ops.operations.models import Operation
from remote_ops.textobjects import KindBounds

if TYPE_CHECKING:  # pragma: no cover
    from remote_ops.keymaps.resolver import ResolutionMatch


def _apply(context: ModeContext, operation: Operation) -> ModeResult:
    host = context.host
    selection = host.visual
    if selection is None:
        return ModeResult(consumed=True, switch_to="normal", message="no_selection")
    if selection.linewise:
        bounds = KindBounds.lines(selection.start[0], selection.end[0])
    else:
        line = host.buffer(selection.buffer_id).get_line(selection.end[0])
        end = (selection.end[0], min(selection.end[1] + 1, len(line)))
        bounds = KindBounds(start=selection.start, end=end)
    executor = require_controller(context).executor
    host.set_mode("normal")
    try:
        result = executor.apply(operation, host.buffer(selection.buffer_id), bounds)
    except (HostOperationFailure, BufferValidationError) as exc:
        return ModeResult(consumed=True, switch_to="normal", status="error", message=str(exc))
    context.bus.emit(f"visual.{operation.value}", result.text)
    return ModeResult(consumed=True, switch_to=host_mode(context), message=f"visual_{operation.value}")


def yank_selection(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _apply(context, Operation.YANK)


def delete_selection(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _apply(context, Operation.DELETE)


def change_selection(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _apply(context, Operation.CHANGE)


__all__ = ["yank_selection", "delete_selection", "change_selection"]
