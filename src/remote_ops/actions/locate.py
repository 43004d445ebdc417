"""Actions bound inside the locate input."""

from __future__ import annotations

from typing import TYPE_CHECKING

from remote_ops.modes.base_mode import ModeContext, ModeResult
from remote_ops.modes.keymap_helpers import host_mode, locate_state, require_controller
from remote_ops.modes.locate_mode import LOCATE_PANEL, publish_locate_text

if TYPE_CHECKING:  # pragma: no cover
    from remote_ops.keymaps.resolver import ResolutionMatch


def confirm_locate(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    state = locate_state(context)
    text = str(state.get("text", ""))
    if state.get("target") == LOCATE_PANEL:
        controller = require_controller(context)
        controller.scope.search_in_panel(text)
        if controller.scope.active:
            return ModeResult(consumed=True, switch_to="scope", message="pattern_not_found")
        return ModeResult(consumed=True, switch_to=host_mode(context), message="scope_select")
    context.bus.emit("locate.confirm", text)
    return ModeResult(consumed=True, switch_to=host_mode(context), message="locate_confirm")


def cancel_locate(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    if locate_state(context).get("target") == LOCATE_PANEL:
        return ModeResult(consumed=True, switch_to="scope", message="locate_cancel")
    context.bus.emit("locate.cancel")
    return ModeResult(consumed=True, switch_to=host_mode(context), message="locate_cancel")


def delete_locate_char(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    state = locate_state(context)
    state["text"] = str(state.get("text", ""))[:-1]
    publish_locate_text(context)
    return ModeResult(consumed=True, status="locate")


__all__ = ["confirm_locate", "cancel_locate", "delete_locate_char"]
