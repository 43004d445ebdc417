"""Structural contract the engine expects from an editor host."""

from __future__ import annotations

from typing import Callable, List, Optional, Protocol

from remote_ops.buffer import Buffer, Position, RegisterBank

from .textobjects import TextSpan
from .window import Window


class EditorHost(Protocol):
    registers: RegisterBank
    mode: str

    @property
    def current_buffer(self) -> Buffer: ...

    @property
    def current_window(self) -> Window: ...

    @property
    def cursor(self) -> Position: ...

    def buffer(self, buffer_id: int) -> Buffer: ...

    def list_buffers(self) -> List[Buffer]: ...

    def visible_buffer_ids(self) -> set[int]: ...

    def set_current_buffer(self, buffer_id: int) -> None: ...

    def set_cursor(self, position: Position) -> Position: ...

    def center_cursor(self) -> None: ...

    def focus_window(self, window_id: int) -> None: ...

    def find_window_for_buffer(self, buffer_id: int) -> Optional[Window]: ...

    def split(self, buffer_id: Optional[int] = None) -> Window: ...

    def close_window(self, window_id: int) -> None: ...

    def set_mode(self, mode: str) -> None: ...

    def start_visual(
        self, start: Position, end: Position, *, linewise: bool = False
    ) -> None: ...

    def search(
        self,
        pattern: str,
        *,
        accept_at_cursor: bool = False,
        wrap: bool = False,
        record: bool = True,
    ) -> Optional[Position]: ...

    def nohlsearch(self) -> None: ...

    def select_text_object(
        self, key: str, *, inner: bool, at: Optional[Position] = None
    ) -> Optional[TextSpan]: ...

    def add_highlight(
        self,
        namespace: str,
        buffer_id: int,
        start: Position,
        end: Position,
        *,
        linewise: bool = False,
    ) -> object: ...

    def clear_highlights(self, namespace: str, buffer_id: Optional[int] = None) -> None: ...

    def notify(self, message: str, level: str = "info") -> None: ...

    def defer(self, delay_ms: int, callback: Callable[[], None]) -> int: ...

    def cancel_timer(self, timer_id: int) -> bool: ...

    def checkpoint(self) -> object: ...

    def restore(self, checkpoint: object) -> None: ...


__all__ = ["EditorHost"]
