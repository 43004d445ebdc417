from __future__ import annotations

from typing import List, Optional

from remote_ops.adapters.textual import (
    BufferView,
    PanelView,
    TextualRemoteAdapter,
    TextualUIHooks,
    create_default_manager,
)
from remote_ops.config import load_config
from remote_ops.host import Workspace


def make_adapter(
    *lines: str,
    buffers: Optional[List[BufferView]] = None,
    panels: Optional[List[Optional[PanelView]]] = None,
    statuses: Optional[List[str]] = None,
    locate: Optional[List[str]] = None,
    events: Optional[List[tuple[str, object | None]]] = None,
    **overrides,
) -> TextualRemoteAdapter:
    workspace = Workspace()
    workspace.open_buffer(list(lines or ('foo "bar" baz',)), name="demo.txt")
    manager = create_default_manager(workspace, load_config(overrides))
    hooks = TextualUIHooks(
        update_buffer=lambda view: buffers.append(view) if buffers is not None else None,
        update_panel=lambda panel: panels.append(panel) if panels is not None else None,
        update_status=lambda status: statuses.append(status) if statuses is not None else None,
        show_locate=lambda text: locate.append(text) if locate is not None else None,
        handle_event=lambda name, payload: events.append((name, payload))
        if events is not None
        else None,
    )
    return TextualRemoteAdapter(manager, hooks)


def type_keys(adapter: TextualRemoteAdapter, keys: str) -> None:
    for char in keys:
        adapter.handle_textual_key(char, text=char)


def test_adapter_renders_initial_buffer() -> None:
    buffers: List[BufferView] = []

    make_adapter(buffers=buffers)

    assert buffers[-1].name == "demo.txt"
    assert buffers[-1].text == 'foo "bar" baz'
    assert buffers[-1].mode == "normal"
    assert buffers[-1].cursor == (1, 0)


def test_adapter_relays_locate_input_and_status() -> None:
    statuses: List[str] = []
    locate: List[str] = []
    events: List[tuple[str, object | None]] = []
    adapter = make_adapter(statuses=statuses, locate=locate, events=events)

    type_keys(adapter, ',yi"ba')

    assert ("locate.changed", "ba") in events
    assert locate[-1] == "ba"

    adapter.handle_textual_key("ENTER")

    assert adapter.workspace.registers.get('"').text == "bar"
    assert statuses[-1] == "locate_confirm"
    assert locate[-1] == ""


def test_adapter_shows_pending_operation_until_confirmed() -> None:
    statuses: List[str] = []
    adapter = make_adapter(statuses=statuses)

    type_keys(adapter, ',yi"ba')
    assert statuses[-1] == 'yank[i"]'

    adapter.handle_textual_key("ENTER")
    assert statuses[-1] == "locate_confirm"
    assert 'yank[i"]' not in statuses[statuses.index("locate_confirm") :]


def test_adapter_clears_pending_operation_on_escape() -> None:
    statuses: List[str] = []
    adapter = make_adapter(statuses=statuses)

    type_keys(adapter, ",D")
    assert statuses[-1] == "deleteline"

    adapter.handle_textual_key("ESC")
    assert statuses[-1] == "locate_cancel"


def test_adapter_clears_pending_operation_cancelled_elsewhere() -> None:
    statuses: List[str] = []
    adapter = make_adapter(statuses=statuses)

    type_keys(adapter, ',di"')
    controller = adapter.manager.context.extras["remote_controller"]
    controller.cancel()
    adapter.refresh()

    assert statuses[-1] == ""


def test_adapter_shows_feedback_until_tick() -> None:
    buffers: List[BufferView] = []
    adapter = make_adapter(buffers=buffers, visual_feedback_duration=100)

    type_keys(adapter, ',yi"bar')
    adapter.handle_textual_key("ENTER")
    assert len(buffers[-1].highlights) == 1

    fired = adapter.tick(100)

    assert fired == 1
    assert buffers[-1].highlights == ()


def test_adapter_reports_notifications() -> None:
    statuses: List[str] = []
    adapter = make_adapter(statuses=statuses)

    type_keys(adapter, ',yi"zzz')
    adapter.handle_textual_key("ENTER")

    assert "Pattern not found: zzz" in statuses


def test_adapter_panel_lifecycle() -> None:
    panels: List[Optional[PanelView]] = []
    adapter = make_adapter('a = "one"', 'b = "two"', panels=panels, scope={"enabled": True})

    type_keys(adapter, ',yi"')
    panel = panels[-1]
    assert panel is not None
    assert panel.lines == ('"one"', '"two"')
    assert panel.cursor_line == 1
    assert panel.title == 'yank i"'

    adapter.handle_textual_key("TAB")
    assert panels[-1] is not None and panels[-1].cursor_line == 2

    adapter.handle_textual_key("ESC")
    assert panels[-1] is None


def test_adapter_relays_visual_events() -> None:
    events: List[tuple[str, object | None]] = []
    adapter = make_adapter(events=events)

    type_keys(adapter, ',vi"bar')
    adapter.handle_textual_key("ENTER")
    adapter.handle_textual_key("y", text="y")

    assert ("visual.yank", "bar") in events
    assert adapter.manager.active_mode is not None
    assert adapter.manager.active_mode.name == "normal"
