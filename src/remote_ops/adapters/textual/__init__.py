"""Textual-facing adapter; the demo app lives in ``app`` and needs ``textual``."""

from .controller import (
    BufferView,
    PanelView,
    TextualRemoteAdapter,
    TextualUIHooks,
    create_default_manager,
)

__all__ = [
    "BufferView",
    "PanelView",
    "TextualRemoteAdapter",
    "TextualUIHooks",
    "create_default_manager",
]
