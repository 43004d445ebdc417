"""In-memory editor host: buffers, windows, registers, highlights and timers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from remote_ops.buffer import Buffer, BufferDocument, Position, RegisterBank
from remote_ops.errors import HostOperationFailure
from remote_ops.runtime import telemetry

from .search import search_forward
from .textobjects import TextSpan, select_text_object
from .window import Window

MODES = ("normal", "insert", "visual", "visual_line")


@dataclass(frozen=True, slots=True)
class HighlightRegion:
    buffer_id: int
    start: Position
    end: Position
    linewise: bool = False


@dataclass(frozen=True, slots=True)
class Notification:
    message: str
    level: str = "info"


@dataclass(frozen=True, slots=True)
class VisualSelection:
    """Active selection; ``end`` is inclusive like an editor's visual marks."""

    buffer_id: int
    start: Position
    end: Position
    linewise: bool = False


@dataclass(slots=True)
class _Timer:
    id: int
    due_ms: int
    callback: Callable[[], None]


@dataclass(frozen=True, slots=True)
class WorkspaceCheckpoint:
    """Window layout and cursors captured before a reversible probe."""

    current_window: int
    windows: Tuple[Tuple[int, int, Position, int], ...]


class Workspace:
    """Reference host the engine drives in tests and in the Textual demo."""

    def __init__(self, *, window_height: int = 40, window_width: int = 80) -> None:
        self.registers = RegisterBank()
        self.mode = "normal"
        self.visual: Optional[VisualSelection] = None
        self.search_highlight = False
        self.notifications: List[Notification] = []
        self.clock_ms = 0
        self._buffers: Dict[int, Buffer] = {}
        self._windows: Dict[int, Window] = {}
        self._current_window: Optional[int] = None
        self._highlights: Dict[str, List[HighlightRegion]] = {}
        self._timers: List[_Timer] = []
        self._next_buffer = 1
        self._next_window = 1000
        self._next_timer = 1
        self._window_height = window_height
        self._window_width = window_width
        self.logger = telemetry.get_logger("remote_ops.host")

    # buffers -----------------------------------------------------------------

    def open_buffer(
        self,
        text: str | Sequence[str] = "",
        *,
        name: str = "",
        filetype: str = "",
        listed: bool = True,
        loaded: bool = True,
        readonly: bool = False,
    ) -> Buffer:
        """Create a buffer; the first one is shown in a fresh window."""

        if isinstance(text, str):
            document = BufferDocument.from_text(text)
        else:
            document = BufferDocument.from_lines(text)
        buffer = Buffer(
            self._next_buffer,
            name=name,
            document=document,
            filetype=filetype,
            listed=listed,
            loaded=loaded,
            readonly=readonly,
        )
        self._next_buffer += 1
        self._buffers[buffer.id] = buffer
        if self._current_window is None:
            window = self._new_window(buffer.id)
            self._current_window = window.id
        return buffer

    def buffer(self, buffer_id: int) -> Buffer:
        try:
            return self._buffers[buffer_id]
        except KeyError as exc:
            raise HostOperationFailure(f"Unknown buffer {buffer_id}") from exc

    def list_buffers(self) -> List[Buffer]:
        """Listed buffers in creation order."""

        return [buffer for buffer in self._buffers.values() if buffer.listed]

    def wipe_buffer(self, buffer_id: int) -> None:
        buffer = self.buffer(buffer_id)
        buffer.valid = False
        buffer.loaded = False

    @property
    def current_buffer(self) -> Buffer:
        return self.buffer(self.current_window.buffer_id)

    def set_current_buffer(self, buffer_id: int) -> None:
        self.buffer(buffer_id)
        self.current_window.show_buffer(buffer_id)

    def visible_buffer_ids(self) -> set[int]:
        return {window.buffer_id for window in self._windows.values()}

    # windows -----------------------------------------------------------------

    @property
    def current_window(self) -> Window:
        if self._current_window is None:
            raise HostOperationFailure("Workspace has no window")
        return self._windows[self._current_window]

    @property
    def windows(self) -> List[Window]:
        return list(self._windows.values())

    def window(self, window_id: int) -> Window:
        try:
            return self._windows[window_id]
        except KeyError as exc:
            raise HostOperationFailure(f"Unknown window {window_id}") from exc

    def focus_window(self, window_id: int) -> None:
        self.window(window_id)
        self._current_window = window_id

    def find_window_for_buffer(self, buffer_id: int) -> Optional[Window]:
        for window in self._windows.values():
            if window.buffer_id == buffer_id:
                return window
        return None

    def split(self, buffer_id: Optional[int] = None) -> Window:
        """Open a secondary view and focus it."""

        target = buffer_id if buffer_id is not None else self.current_window.buffer_id
        self.buffer(target)
        window = self._new_window(target)
        self._current_window = window.id
        return window

    def close_window(self, window_id: int) -> None:
        self.window(window_id)
        if len(self._windows) == 1:
            raise HostOperationFailure("Cannot close the last window")
        del self._windows[window_id]
        if self._current_window == window_id:
            self._current_window = next(iter(self._windows))

    def _new_window(self, buffer_id: int) -> Window:
        window = Window(
            id=self._next_window,
            buffer_id=buffer_id,
            height=self._window_height,
            width=self._window_width,
        )
        self._next_window += 1
        self._windows[window.id] = window
        return window

    # cursor ------------------------------------------------------------------

    @property
    def cursor(self) -> Position:
        return self.current_window.cursor

    def set_cursor(self, position: Position) -> Position:
        """Move the cursor, clamping into the current buffer."""

        lines = self.current_buffer.lines
        line = max(1, min(position[0], len(lines)))
        col = max(0, min(position[1], len(lines[line - 1])))
        self.current_window.cursor = (line, col)
        return self.current_window.cursor

    def center_cursor(self) -> None:
        self.current_window.center_on(self.cursor[0])

    # modes and selection -----------------------------------------------------

    def set_mode(self, mode: str) -> None:
        if mode not in MODES:
            raise HostOperationFailure(f"Unknown mode '{mode}'")
        self.mode = mode
        if mode not in ("visual", "visual_line"):
            self.visual = None

    def start_visual(self, start: Position, end: Position, *, linewise: bool = False) -> None:
        self.visual = VisualSelection(
            buffer_id=self.current_buffer.id, start=start, end=end, linewise=linewise
        )
        self.mode = "visual_line" if linewise else "visual"
        self.set_cursor(end)

    # search ------------------------------------------------------------------

    def search(
        self,
        pattern: str,
        *,
        accept_at_cursor: bool = False,
        wrap: bool = False,
        record: bool = True,
    ) -> Optional[Position]:
        """Forward search in the current buffer; a hit moves the cursor."""

        hit = search_forward(
            self.current_buffer.lines,
            pattern,
            self.cursor,
            accept_at_cursor=accept_at_cursor,
            wrap=wrap,
        )
        if record:
            self.registers.set_last_search(pattern)
        if hit is not None:
            self.current_window.cursor = hit
            if record:
                self.search_highlight = True
        return hit

    def nohlsearch(self) -> None:
        self.search_highlight = False

    # text objects ------------------------------------------------------------

    def select_text_object(
        self, key: str, *, inner: bool, at: Optional[Position] = None
    ) -> Optional[TextSpan]:
        return select_text_object(
            self.current_buffer.lines, at or self.cursor, key, inner=inner
        )

    # highlights --------------------------------------------------------------

    def add_highlight(
        self,
        namespace: str,
        buffer_id: int,
        start: Position,
        end: Position,
        *,
        linewise: bool = False,
    ) -> HighlightRegion:
        region = HighlightRegion(buffer_id, start, end, linewise)
        self._highlights.setdefault(namespace, []).append(region)
        return region

    def clear_highlights(self, namespace: str, buffer_id: Optional[int] = None) -> None:
        if buffer_id is None:
            self._highlights.pop(namespace, None)
            return
        remaining = [
            region
            for region in self._highlights.get(namespace, [])
            if region.buffer_id != buffer_id
        ]
        if remaining:
            self._highlights[namespace] = remaining
        else:
            self._highlights.pop(namespace, None)

    def highlights(self, namespace: str) -> List[HighlightRegion]:
        return list(self._highlights.get(namespace, []))

    # notifications and timers ------------------------------------------------

    def notify(self, message: str, level: str = "info") -> None:
        self.notifications.append(Notification(message, level))
        telemetry.record_event(
            "host.notify",
            level="warning" if level in ("warn", "warning", "error") else "info",
            data={"message": message, "level": level},
            logger_name="remote_ops.host",
        )

    def defer(self, delay_ms: int, callback: Callable[[], None]) -> int:
        timer = _Timer(self._next_timer, self.clock_ms + max(0, delay_ms), callback)
        self._next_timer += 1
        self._timers.append(timer)
        return timer.id

    def cancel_timer(self, timer_id: int) -> bool:
        before = len(self._timers)
        self._timers = [timer for timer in self._timers if timer.id != timer_id]
        return len(self._timers) != before

    @property
    def pending_timers(self) -> int:
        return len(self._timers)

    def advance(self, elapsed_ms: int) -> int:
        """Move the clock forward and fire due timers in order; returns count."""

        self.clock_ms += elapsed_ms
        fired = 0
        while True:
            due = [timer for timer in self._timers if timer.due_ms <= self.clock_ms]
            if not due:
                return fired
            timer = min(due, key=lambda item: (item.due_ms, item.id))
            self._timers.remove(timer)
            timer.callback()
            fired += 1

    def run_timers(self) -> int:
        """Fire every scheduled timer regardless of its deadline."""

        if not self._timers:
            return 0
        latest = max(timer.due_ms for timer in self._timers)
        return self.advance(max(0, latest - self.clock_ms))

    # checkpoints -------------------------------------------------------------

    def checkpoint(self) -> WorkspaceCheckpoint:
        return WorkspaceCheckpoint(
            current_window=self.current_window.id,
            windows=tuple(
                (window.id, window.buffer_id, window.cursor, window.topline)
                for window in self._windows.values()
            ),
        )

    def restore(self, checkpoint: WorkspaceCheckpoint) -> None:
        """Undo window switches and splits made after ``checkpoint``."""

        known = {entry[0] for entry in checkpoint.windows}
        for window_id in [wid for wid in self._windows if wid not in known]:
            del self._windows[window_id]
        for window_id, buffer_id, cursor, topline in checkpoint.windows:
            window = self._windows.get(window_id)
            if window is None:
                continue
            window.show_buffer(buffer_id)
            window.cursor = cursor
            window.topline = topline
        self._current_window = checkpoint.current_window

    def describe(self) -> Dict[str, object]:
        return {
            "buffer": self.current_buffer.id,
            "cursor": self.cursor,
            "mode": self.mode,
            "windows": len(self._windows),
        }


def load_files(workspace: Workspace, paths: Iterable[str]) -> List[Buffer]:
    buffers: List[Buffer] = []
    for path in paths:
        with open(path, "r", encoding="utf-8") as handle:
            text = handle.read()
        if text.endswith("\n"):
            text = text[:-1]
        filetype = "markdown" if path.endswith((".md", ".markdown")) else ""
        buffers.append(workspace.open_buffer(text, name=path, filetype=filetype))
    return buffers


__all__ = [
    "Workspace",
    "WorkspaceCheckpoint",
    "HighlightRegion",
    "Notification",
    "VisualSelection",
    "load_files",
]
