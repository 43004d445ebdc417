from __future__ import annotations

from remote_ops.buffer.registers import UNNAMED
from remote_ops.config import load_config
from remote_ops.host import Workspace
from remote_ops.operations import (
    LOCATE_CANCEL,
    LOCATE_CHANGED,
    LOCATE_CONFIRM,
    CrossBufferSweep,
    EntryStatus,
    Operation,
    PendingState,
    RemoteOperationController,
    constraint_for,
)
from remote_ops.runtime.events import ModeBus
from remote_ops.textobjects import TextObjectRef


def make_workspace(*lines: str) -> Workspace:
    workspace = Workspace()
    workspace.open_buffer(list(lines), name="origin")
    return workspace


def make_controller(
    workspace: Workspace, *, bus: ModeBus | None = None, **overrides
) -> RemoteOperationController:
    return RemoteOperationController(workspace, config=load_config(overrides), bus=bus)


def test_begin_records_origin_and_asks_for_locate() -> None:
    workspace = make_workspace('foo "bar" baz')
    workspace.set_cursor((1, 2))
    controller = make_controller(workspace)

    entry = controller.yank('i"')

    assert entry.status is EntryStatus.LOCATE
    assert entry.seed == ""
    assert controller.machine.state is PendingState.PENDING
    assert controller.pending is not None
    assert controller.pending.origin.position == (1, 2)


def test_abandon_restores_register_and_search_history() -> None:
    workspace = make_workspace('foo "bar" baz')
    workspace.registers.yank_to(UNNAMED, "original")
    workspace.registers.set_last_search("mine")
    controller = make_controller(workspace)

    controller.yank('i"')
    result = controller.resume("missing")

    assert result is None
    assert workspace.registers.get(UNNAMED).text == "original"
    assert workspace.registers.last_search == "mine"
    assert not workspace.search_highlight
    assert controller.machine.outcome is PendingState.ABANDONED
    assert controller.pending is None
    assert workspace.notifications[-1].message == "Pattern not found: missing"


def test_empty_pattern_abandons_silently() -> None:
    workspace = make_workspace('foo "bar" baz')
    controller = make_controller(workspace)

    controller.delete('i"')
    controller.resume("")

    assert controller.machine.outcome is PendingState.ABANDONED
    assert workspace.notifications == []
    assert workspace.current_buffer.lines == ('foo "bar" baz',)


def test_indicator_tracks_the_pending_operation() -> None:
    workspace = make_workspace('foo "bar" baz')
    controller = make_controller(workspace)
    assert controller.indicator == ""

    controller.yank('i"')
    assert controller.indicator == 'yank[i"]'

    controller.resume("bar")
    assert controller.machine.outcome is PendingState.EXECUTED
    assert controller.indicator == ""


def test_indicator_clears_on_abandon() -> None:
    workspace = make_workspace('foo "bar" baz')
    controller = make_controller(workspace)

    controller.delete_line()
    assert controller.indicator == "deleteline"

    controller.resume("missing")
    assert controller.machine.outcome is PendingState.ABANDONED
    assert controller.indicator == ""

    controller.change("a(")
    controller.cancel()
    assert controller.indicator == ""


def test_resume_without_pending_does_nothing() -> None:
    workspace = make_workspace("text")
    controller = make_controller(workspace)

    assert controller.resume("text") is None
    assert controller.machine.state is PendingState.IDLE


def test_local_search_wraps_to_earlier_lines() -> None:
    workspace = make_workspace('"top"', "middle", "bottom")
    workspace.set_cursor((3, 0))
    controller = make_controller(workspace)

    controller.yank('i"')
    controller.resume("top")

    assert workspace.registers.get(UNNAMED).text == "top"
    assert workspace.cursor == (3, 0)


def test_clear_highlight_restores_previous_search_after_delay() -> None:
    workspace = make_workspace('foo "bar" baz')
    workspace.registers.set_last_search("previous")
    controller = make_controller(workspace, clear_highlight_delay=300)

    controller.yank('i"')
    controller.resume("bar")

    assert workspace.search_highlight
    assert workspace.registers.last_search == "bar"
    workspace.advance(299)
    assert workspace.search_highlight
    workspace.advance(1)
    assert not workspace.search_highlight
    assert workspace.registers.last_search == "previous"


def test_change_keeps_search_highlight() -> None:
    workspace = make_workspace('foo "bar" baz')
    controller = make_controller(workspace)

    controller.change('i"')
    controller.resume("bar")
    workspace.run_timers()

    assert workspace.search_highlight


def test_new_operation_flushes_pending_highlight_clear() -> None:
    workspace = make_workspace('foo "bar" baz')
    workspace.registers.set_last_search("previous")
    controller = make_controller(workspace)

    controller.yank('i"')
    controller.resume("bar")
    controller.yank('i"')

    assert workspace.registers.last_search == "previous"
    assert not workspace.search_highlight


def test_second_begin_replaces_first() -> None:
    workspace = make_workspace('foo "bar" baz')
    bus = ModeBus()
    controller = make_controller(workspace, bus=bus)

    controller.yank('i"')
    controller.delete('i"')

    assert bus.subscriber_count(LOCATE_CONFIRM) == 1
    assert controller.pending is not None
    assert controller.pending.operation is Operation.DELETE


def test_bus_events_resolve_exactly_once() -> None:
    workspace = make_workspace('foo "bar" baz')
    bus = ModeBus()
    controller = make_controller(workspace, bus=bus)

    controller.yank('i"')
    bus.emit(LOCATE_CHANGED, "b")
    bus.emit(LOCATE_CHANGED, "ba")
    bus.emit(LOCATE_CONFIRM, None)

    assert workspace.registers.get(UNNAMED).text == "bar"
    assert controller.machine.outcome is PendingState.EXECUTED
    for event in (LOCATE_CHANGED, LOCATE_CONFIRM, LOCATE_CANCEL):
        assert bus.subscriber_count(event) == 0

    workspace.registers.yank_to(UNNAMED, "after")
    bus.emit(LOCATE_CONFIRM, "bar")
    assert workspace.registers.get(UNNAMED).text == "after"


def test_bus_cancel_abandons() -> None:
    workspace = make_workspace('foo "bar" baz')
    bus = ModeBus()
    controller = make_controller(workspace, bus=bus)

    controller.delete('i"')
    bus.emit(LOCATE_CANCEL)

    assert controller.machine.outcome is PendingState.ABANDONED
    assert bus.subscriber_count(LOCATE_CONFIRM) == 0


def test_smart_highlighting_seeds_and_balances_pattern() -> None:
    workspace = make_workspace('say "bar" and "baz"')
    controller = make_controller(workspace, smart_highlighting=True)

    entry = controller.yank('i"')
    assert entry.seed == '"[^"]*'
    controller.resume(entry.seed + "z")

    assert workspace.registers.get(UNNAMED).text == "baz"


def test_bracket_constraint_escapes_delimiters() -> None:
    constraint = constraint_for(TextObjectRef.parse("i("))

    assert constraint is not None
    assert constraint.prefix == r"\([^\(\)]*"
    assert constraint.wrap("x") == r"x[^\(\)]*\)"
    assert constraint_for(TextObjectRef.parse("L")) is None
    assert constraint_for(TextObjectRef.parse("im")) is None


def make_workspace_with_buffers() -> Workspace:
    workspace = make_workspace("nothing here")
    workspace.open_buffer(["miss"], name="second")
    workspace.open_buffer(['x "far" y'], name="third")
    return workspace


def test_local_match_wins_over_other_buffers() -> None:
    workspace = make_workspace('local "bar"')
    workspace.open_buffer(['remote "bar"'], name="other")
    controller = make_controller(workspace, cross_buffer={"enabled": True, "include_hidden": True})

    controller.yank('i"')
    result = controller.resume("bar")

    assert result is not None and result.buffer_id == 1
    assert workspace.current_buffer.id == 1


def test_remote_yank_returns_home() -> None:
    workspace = make_workspace_with_buffers()
    workspace.set_cursor((1, 3))
    controller = make_controller(workspace, cross_buffer={"enabled": True, "include_hidden": True})

    controller.yank('i"')
    result = controller.resume("far")

    assert result is not None and result.ok and result.buffer_id == 3
    assert workspace.registers.get(UNNAMED).text == "far"
    assert workspace.current_buffer.id == 1
    assert workspace.cursor == (1, 3)
    assert len(workspace.windows) == 1


def test_remote_change_opens_a_view_and_stays() -> None:
    workspace = make_workspace_with_buffers()
    controller = make_controller(workspace, cross_buffer={"enabled": True, "include_hidden": True})

    controller.change('i"')
    controller.resume("far")

    assert workspace.current_buffer.id == 3
    assert workspace.current_buffer.lines == ('x "" y',)
    assert workspace.mode == "insert"
    # The failed search of the second buffer closed its split again.
    assert len(workspace.windows) == 2


def test_hidden_buffers_are_skipped_by_default() -> None:
    workspace = make_workspace_with_buffers()
    workspace.registers.yank_to(UNNAMED, "original")
    controller = make_controller(workspace, cross_buffer=True)

    controller.yank('i"')
    result = controller.resume("far")

    assert result is None
    assert workspace.registers.get(UNNAMED).text == "original"
    assert workspace.current_buffer.id == 1


def test_sweep_skips_unloaded_buffers_and_restores_failed_searches() -> None:
    workspace = make_workspace_with_buffers()
    workspace.wipe_buffer(3)
    config = load_config({"cross_buffer": {"enabled": True, "include_hidden": True}})
    sweep = CrossBufferSweep(workspace, config)
    before = workspace.checkpoint()

    hit = sweep.sweep("far", Operation.CHANGE, skip=1)

    assert hit is None
    assert workspace.checkpoint() == before


def test_cross_buffer_off_keeps_search_local() -> None:
    workspace = make_workspace_with_buffers()
    controller = make_controller(workspace)

    controller.yank('i"')

    assert controller.resume("far") is None
    assert workspace.current_buffer.id == 1
