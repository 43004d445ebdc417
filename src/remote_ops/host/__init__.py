"""Reference editor host and the contract the engine consumes."""

from .protocol import EditorHost
from .search import search_forward
from .textobjects import BRACKETS, QUOTES, TextSpan, select_text_object
from .window import Window
from .workspace import (
    HighlightRegion,
    Notification,
    VisualSelection,
    Workspace,
    WorkspaceCheckpoint,
    load_files,
)

__all__ = [
    "EditorHost",
    "search_forward",
    "BRACKETS",
    "QUOTES",
    "TextSpan",
    "select_text_object",
    "Window",
    "HighlightRegion",
    "Notification",
    "VisualSelection",
    "Workspace",
    "WorkspaceCheckpoint",
    "load_files",
]
