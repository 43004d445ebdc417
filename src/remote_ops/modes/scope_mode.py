"""Scope mode: keys handled while the instance panel is open."""

from __future__ import annotations

from .base_mode import KeyInput, ModeResult
from .keymap_helpers import KeymapMode


class ScopeMode(KeymapMode):
    name = "scope"

    def handle_unmapped(self, key: KeyInput) -> ModeResult:
        # The panel is read-only; swallow everything else.
        del key
        return ModeResult(consumed=True, status="ignored")


__all__ = ["ScopeMode"]
