"""Normal mode: remote operator bindings and basic cursor movement."""

from __future__ import annotations

from .keymap_helpers import KeymapMode


class NormalMode(KeymapMode):
    name = "normal"


__all__ = ["NormalMode"]
