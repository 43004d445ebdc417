from __future__ import annotations

from remote_ops.buffer.registers import UNNAMED
from remote_ops.config import load_config
from remote_ops.host import Workspace
from remote_ops.operations import (
    SCOPE_NAMESPACE,
    EntryStatus,
    PendingState,
    RemoteOperationController,
)

LINES = ('x = "one"', 'y = "two"', 'z = "three"')


def make_workspace(*lines: str) -> Workspace:
    workspace = Workspace()
    workspace.open_buffer(list(lines or LINES), name="scoped")
    return workspace


def make_controller(workspace: Workspace, **scope) -> RemoteOperationController:
    return RemoteOperationController(
        workspace, config=load_config({"scope": {"enabled": True, **scope}})
    )


def test_open_renders_every_instance() -> None:
    workspace = make_workspace()
    controller = make_controller(workspace)

    entry = controller.yank('i"')

    session = controller.session
    assert entry.status is EntryStatus.HANDLED
    assert session is not None
    assert session.lines == ['"one"', '"two"', '"three"']
    assert session.line_index == {1: 0, 2: 1, 3: 2}
    assert [instance.display_range for instance in session.instances] == [(1, 1), (2, 2), (3, 3)]
    assert controller.machine.state is PendingState.IDLE


def test_panel_width_is_clamped() -> None:
    workspace = make_workspace()

    assert make_controller(workspace).scope.panel_width(['"three"']) == 40
    narrow = make_controller(workspace, min_width=5)
    assert narrow.scope.panel_width(['"three"']) == 12
    capped = make_controller(workspace, min_width=5, window_width=10)
    assert capped.scope.panel_width(['"three"']) == 10


def test_initial_line_is_nearest_instance_at_or_below_cursor() -> None:
    workspace = make_workspace()
    workspace.set_cursor((2, 0))
    controller = make_controller(workspace)

    controller.yank('i"')

    assert controller.session is not None
    assert controller.session.cursor_line == 2
    assert workspace.cursor == (2, 5)
    [region] = workspace.highlights(SCOPE_NAMESPACE)
    assert region.linewise and region.start == (2, 0)


def test_preview_context_pads_the_highlight() -> None:
    workspace = make_workspace()
    workspace.set_cursor((2, 0))
    controller = make_controller(workspace, preview_context=1)

    controller.yank('i"')
    [region] = workspace.highlights(SCOPE_NAMESPACE)
    assert (region.start, region.end) == ((1, 0), (3, 11))

    controller.scope.next_instance()
    [region] = workspace.highlights(SCOPE_NAMESPACE)
    assert (region.start, region.end) == ((2, 0), (3, 11))


def test_initial_line_falls_back_to_instance_above() -> None:
    workspace = make_workspace('a "1"', "", "", "end")
    workspace.set_cursor((4, 0))
    controller = make_controller(workspace)

    controller.yank('i"')

    assert controller.session is not None
    assert controller.session.cursor_line == 1


def test_instance_navigation_wraps() -> None:
    workspace = make_workspace()
    controller = make_controller(workspace)
    controller.yank('i"')
    scope = controller.scope

    scope.next_instance()
    scope.next_instance()
    assert scope.session is not None and scope.session.cursor_line == 3
    scope.next_instance()
    assert scope.session.cursor_line == 1
    scope.previous_instance()
    assert scope.session.cursor_line == 3
    assert workspace.cursor == (3, 5)


def test_multiline_instances_span_several_panel_lines() -> None:
    workspace = make_workspace("call(", "  a,", "  b", ")", "(c)")
    controller = make_controller(workspace)

    controller.yank("i(")

    session = controller.session
    assert session is not None
    assert session.lines == ["(  a,", "  b)", "(c)"]
    assert controller.scope.instance_at(2) is session.instances[0]
    controller.scope.move_line(1)
    controller.scope.next_instance()
    assert session.cursor_line == 3


def test_select_yank_returns_to_source() -> None:
    workspace = make_workspace()
    controller = make_controller(workspace)
    controller.yank('i"')

    result = controller.scope.select(3)

    assert result is not None and result.ok
    assert workspace.registers.get(UNNAMED).text == "three"
    assert workspace.cursor == (1, 0)
    assert controller.session is None
    assert workspace.highlights(SCOPE_NAMESPACE) == []


def test_select_change_stays_at_instance() -> None:
    workspace = make_workspace()
    controller = make_controller(workspace)
    controller.change('i"')
    controller.scope.next_instance()

    controller.scope.select()

    assert workspace.current_buffer.lines == ('x = "one"', 'y = ""', 'z = "three"')
    assert workspace.cursor == (2, 5)
    assert workspace.mode == "insert"


def test_cancel_keeps_previewed_cursor() -> None:
    workspace = make_workspace()
    controller = make_controller(workspace)
    controller.delete('i"')
    controller.scope.next_instance()

    controller.cancel()

    assert controller.session is None
    assert workspace.cursor == (2, 5)
    assert workspace.current_buffer.lines == LINES
    assert workspace.highlights(SCOPE_NAMESPACE) == []


def test_search_in_panel_selects_match() -> None:
    workspace = make_workspace()
    controller = make_controller(workspace)
    controller.delete('i"')

    result = controller.scope.search_in_panel("thr")

    assert result is not None and result.ok
    assert workspace.current_buffer.lines == ('x = "one"', 'y = "two"', 'z = ""')


def test_search_in_panel_miss_keeps_session() -> None:
    workspace = make_workspace()
    controller = make_controller(workspace)
    controller.yank('i"')

    assert controller.scope.search_in_panel("zzz") is None
    assert controller.session is not None
    assert workspace.notifications[-1].level == "warn"


def test_stale_lookups_are_ignored() -> None:
    workspace = make_workspace()
    controller = make_controller(workspace)
    controller.yank('i"')

    assert controller.scope.instance_at(42) is None
    assert controller.scope.select(42) is None
    assert controller.session is not None


def test_no_instances_reports_and_stays_closed() -> None:
    workspace = make_workspace("plain text")
    controller = make_controller(workspace)

    entry = controller.yank('i"')

    assert entry.status is EntryStatus.FAILED
    assert controller.session is None
    assert workspace.notifications[-1].message == 'No instances of text object "i"" found'
    assert workspace.notifications[-1].level == "info"


def test_unscoped_kind_uses_locate() -> None:
    workspace = make_workspace()
    controller = make_controller(workspace)

    assert controller.yank("iw").status is EntryStatus.LOCATE
    assert controller.session is None


def test_scope_is_disabled_with_cross_buffer() -> None:
    workspace = make_workspace()
    controller = RemoteOperationController(
        workspace, config=load_config({"scope": {"enabled": True}, "cross_buffer": True})
    )

    assert controller.yank('i"').status is EntryStatus.LOCATE
    assert controller.session is None


def test_opening_scope_cancels_pending_operation() -> None:
    workspace = make_workspace()
    controller = make_controller(workspace)
    controller.yank("iw")

    controller.yank('i"')

    assert controller.pending is None
    assert controller.machine.outcome is PendingState.ABANDONED
    assert controller.session is not None
