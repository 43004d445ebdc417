"""Modes that drive the remote-operation controller from key input."""

from .base_mode import KeyInput, Mode, ModeBus, ModeContext, ModeResult
from .keymap_helpers import KeymapMode
from .normal_mode import NormalMode
from .insert_mode import InsertMode
from .visual_mode import VisualMode
from .locate_mode import LocateMode
from .scope_mode import ScopeMode

__all__ = [
    "KeyInput",
    "Mode",
    "ModeBus",
    "ModeContext",
    "ModeResult",
    "KeymapMode",
    "NormalMode",
    "InsertMode",
    "VisualMode",
    "LocateMode",
    "ScopeMode",
]
