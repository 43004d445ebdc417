"""Actions that start remote operations from operator bindings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from remote_ops.modes.base_mode import ModeContext, ModeResult
from remote_ops.modes.keymap_helpers import locate_state, require_controller
from remote_ops.modes.locate_mode import LOCATE_PENDING
from remote_ops.operations.models import EntryResult, EntryStatus, Operation

if TYPE_CHECKING:  # pragma: no cover
    from remote_ops.keymaps.resolver import ResolutionMatch


def start_operation(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    """Run the operator named by the binding's ``operation``/``textobj`` arguments."""

    controller = require_controller(context)
    arguments = match.binding.arguments
    operation = Operation(str(arguments["operation"]))
    textobj = arguments.get("textobj")
    result = controller.start(operation, str(textobj) if textobj is not None else None)
    return entry_to_mode_result(context, result)


def entry_to_mode_result(context: ModeContext, result: EntryResult) -> ModeResult:
    if result.status is EntryStatus.LOCATE:
        state = locate_state(context)
        state["text"] = result.seed
        state["target"] = LOCATE_PENDING
        return ModeResult(consumed=True, switch_to="locate", message="locate")
    if result.status is EntryStatus.HANDLED:
        return ModeResult(consumed=True, switch_to="scope", message="scope_open")
    return ModeResult(consumed=True, status="error", message=result.message)


__all__ = ["start_operation", "entry_to_mode_result"]
