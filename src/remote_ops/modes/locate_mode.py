"""Locate mode: the pattern input that resolves a pending operation.

Every edit of the input is published as ``locate.changed`` so the pending
operation sees the pattern before it is confirmed.
"""

from __future__ import annotations

from typing import Optional

from remote_ops.runtime import telemetry

from .base_mode import KeyInput, ModeResult
from .keymap_helpers import KeymapMode, locate_state

LOCATE_PENDING = "pending"
LOCATE_PANEL = "panel"


class LocateMode(KeymapMode):
    name = "locate"

    def on_enter(self, previous: Optional[str]) -> None:
        del previous
        state = locate_state(self.context)
        state.setdefault("text", "")
        state.setdefault("target", LOCATE_PENDING)
        telemetry.record_event(
            "locate.start",
            level="debug",
            data={"target": state["target"], "seed": state["text"]},
            logger_name="remote_ops.modes",
        )
        publish_locate_text(self.context)

    def on_exit(self, next_mode: Optional[str]) -> None:
        super().on_exit(next_mode)
        self.context.extras.pop("locate_state", None)

    def handle_unmapped(self, key: KeyInput) -> ModeResult:
        char = key.printable
        if char is None:
            return ModeResult(consumed=False)
        state = locate_state(self.context)
        state["text"] = f"{state.get('text', '')}{char}"
        publish_locate_text(self.context)
        return ModeResult(consumed=True, status="locate", message="locate_input")

    @property
    def text(self) -> str:
        return str(locate_state(self.context).get("text", ""))


def publish_locate_text(context) -> None:
    state = locate_state(context)
    if state.get("target") == LOCATE_PENDING:
        context.bus.emit("locate.changed", str(state.get("text", "")))


__all__ = ["LocateMode", "LOCATE_PANEL", "LOCATE_PENDING", "publish_locate_text"]
