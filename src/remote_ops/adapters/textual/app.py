"""Executable Textual app that hosts the remote-operation engine."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence, Tuple

try:  # pragma: no cover - imported only when demo is run
    from rich.text import Text
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import Horizontal
    from textual.widgets import Footer, Header, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' extra to use remote_ops.adapters.textual.app"
    ) from exc

from remote_ops.config import load_config_file
from remote_ops.host import Workspace, load_files

from .controller import (
    BufferView,
    PanelView,
    TextualRemoteAdapter,
    TextualUIHooks,
    create_default_manager,
)

TICK_MS = 50
SAMPLE_TEXT = """# Remote operations

Try ,yi" to copy "inside quotes" without moving there.
Brackets (like these) and [square ones] work too.

```python
print("hello")
```

Links: https://example.com/docs
"""


class RemoteOpsApp(App[None]):
    """Minimal Textual UI embedding the engine over an in-memory workspace."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#main {
		height: 1fr;
	}

	#buffer-view {
		width: 1fr;
		border: round $accent;
		padding: 0 1;
		overflow: auto;
	}

	#panel-view {
		display: none;
		border: round $warning;
		padding: 0 1;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}

	#locate-line {
		height: 1;
		background: $surface-darken-2;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+c", "quit", "Quit"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, workspace: Workspace, *, config_path: Optional[str] = None) -> None:
        super().__init__()
        self.workspace = workspace
        self.config = load_config_file(config_path)
        self.adapter: TextualRemoteAdapter | None = None
        self._buffer_widget: Static | None = None
        self._panel_widget: Static | None = None
        self._status_widget: Static | None = None
        self._locate_widget: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Horizontal(id="main"):
            self._buffer_widget = Static("", id="buffer-view")
            self._panel_widget = Static("", id="panel-view")
            yield self._buffer_widget
            yield self._panel_widget
        self._status_widget = Static("", id="status-line")
        self._locate_widget = Static("", id="locate-line")
        yield self._status_widget
        yield self._locate_widget
        yield Footer()

    async def on_mount(self) -> None:
        manager = create_default_manager(self.workspace, self.config)
        hooks = TextualUIHooks(
            update_buffer=self._update_buffer,
            update_panel=self._update_panel,
            update_status=self._update_status,
            show_locate=self._show_locate,
        )
        self.adapter = TextualRemoteAdapter(manager, hooks)
        self.set_interval(TICK_MS / 1000, self._tick)

    def _tick(self) -> None:
        if self.adapter:
            self.adapter.tick(TICK_MS)

    async def on_key(self, event: events.Key) -> None:
        if not self.adapter:
            return
        normalized = self._normalize_key(event)
        if normalized is None:
            return
        key, text, modifiers = normalized
        self.adapter.handle_textual_key(key, text=text, modifiers=modifiers)
        event.stop()

    def _update_buffer(self, view: BufferView) -> None:
        if self._buffer_widget is None:
            return
        rendered = Text()
        for number, line in enumerate(view.text.split("\n"), start=1):
            row = Text(line + " ")
            for region in view.highlights:
                if region.start[0] <= number <= region.end[0]:
                    first = region.start[1] if number == region.start[0] and not region.linewise else 0
                    last = region.end[1] if number == region.end[0] and not region.linewise else len(line)
                    row.stylize("reverse yellow", first, max(first + 1, last))
            if number == view.cursor[0]:
                row.stylize("reverse", view.cursor[1], view.cursor[1] + 1)
            rendered.append(row)
            rendered.append("\n")
        self._buffer_widget.update(rendered)
        self._buffer_widget.border_title = f"{view.name} [{view.mode}]"

    def _update_panel(self, panel: Optional[PanelView]) -> None:
        if self._panel_widget is None:
            return
        if panel is None:
            self._panel_widget.styles.display = "none"
            return
        rendered = Text()
        for number, line in enumerate(panel.lines, start=1):
            rendered.append(line, style="bold reverse" if number == panel.cursor_line else "")
            rendered.append("\n")
        self._panel_widget.styles.display = "block"
        self._panel_widget.styles.width = panel.width
        self._panel_widget.border_title = panel.title
        self._panel_widget.update(rendered)

    def _update_status(self, status: str) -> None:
        if self._status_widget:
            self._status_widget.update(status)

    def _show_locate(self, text: str) -> None:
        if self._locate_widget:
            self._locate_widget.update(f"/{text}" if text else "")

    @staticmethod
    def _normalize_key(
        event: events.Key,
    ) -> Optional[Tuple[str, Optional[str], Tuple[str, ...]]]:
        key = event.key
        if key in {"ctrl+c", "ctrl+q"}:
            return None
        if key == "escape":
            return ("ESC", None, ())
        if key in {"enter", "return"}:
            return ("ENTER", None, ())
        if key == "backspace":
            return ("BACKSPACE", None, ())
        if key == "tab":
            return ("TAB", None, ())
        if key in {"shift+tab", "backtab"}:
            return ("TAB", None, ("shift",))
        if key.startswith("ctrl+"):
            return (key.split("+", 1)[1], None, ("ctrl",))
        if event.character and event.is_printable:
            return (event.character, event.character, ())
        return None


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the remote-operation Textual demo.")
    parser.add_argument("files", nargs="*", help="Files to open as buffers")
    parser.add_argument(
        "--config",
        default=None,
        help="TOML configuration file (default: ./remote_ops.toml when present)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    workspace = Workspace()
    if args.files:
        load_files(workspace, args.files)
    else:
        workspace.open_buffer(SAMPLE_TEXT.rstrip("\n"), name="sample.md", filetype="markdown")
    RemoteOpsApp(workspace, config_path=args.config).run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
