"""Visual mode entered after a select operation."""

from __future__ import annotations

from typing import Optional

from .keymap_helpers import KeymapMode


class VisualMode(KeymapMode):
    name = "visual"

    def on_exit(self, next_mode: Optional[str]) -> None:
        super().on_exit(next_mode)
        host = self.context.host
        if host.mode in ("visual", "visual_line") and next_mode != "visual":
            host.set_mode("normal")


__all__ = ["VisualMode"]
