"""Actions bound while the scope panel is open."""

from __future__ import annotations

from typing import TYPE_CHECKING

from remote_ops.modes.base_mode import ModeContext, ModeResult
from remote_ops.modes.keymap_helpers import host_mode, locate_state, require_controller
from remote_ops.modes.locate_mode import LOCATE_PANEL

if TYPE_CHECKING:  # pragma: no cover
    from remote_ops.keymaps.resolver import ResolutionMatch


def _moved(context: ModeContext) -> ModeResult:
    session = require_controller(context).session
    if session is None:
        return ModeResult(consumed=True, switch_to=host_mode(context), message="scope_closed")
    return ModeResult(consumed=True, status="scope", message=f"line {session.cursor_line}")


def next_line(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    require_controller(context).scope.move_line(1)
    return _moved(context)


def previous_line(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    require_controller(context).scope.move_line(-1)
    return _moved(context)


def next_instance(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    require_controller(context).scope.next_instance()
    return _moved(context)


def previous_instance(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    require_controller(context).scope.previous_instance()
    return _moved(context)


def select_instance(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    controller = require_controller(context)
    result = controller.scope.select()
    if controller.scope.active:
        return ModeResult(consumed=True, status="scope", message="nothing_selected")
    status = "ok" if result is not None and result.ok else "error"
    return ModeResult(
        consumed=True, switch_to=host_mode(context), status=status, message="scope_select"
    )


def cancel_panel(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    require_controller(context).scope.cancel()
    return ModeResult(consumed=True, switch_to=host_mode(context), message="scope_cancel")


def search_panel(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    state = locate_state(context)
    state["text"] = ""
    state["target"] = LOCATE_PANEL
    return ModeResult(consumed=True, switch_to="locate", message="locate")


__all__ = [
    "next_line",
    "previous_line",
    "next_instance",
    "previous_instance",
    "select_instance",
    "cancel_panel",
    "search_panel",
]
