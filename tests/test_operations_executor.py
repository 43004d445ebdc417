from __future__ import annotations

from remote_ops.buffer.registers import UNNAMED
from remote_ops.config import load_config
from remote_ops.host import Workspace
from remote_ops.operations import (
    FEEDBACK_NAMESPACE,
    EntryStatus,
    Operation,
    OperationExecutor,
    RemoteOperationController,
)
from remote_ops.textobjects import KindRegistry, TextObjectRef


def make_workspace(*lines: str, readonly: bool = False) -> Workspace:
    workspace = Workspace()
    workspace.open_buffer(list(lines), name="main", readonly=readonly)
    return workspace


def make_controller(workspace: Workspace, **overrides) -> RemoteOperationController:
    return RemoteOperationController(workspace, config=load_config(overrides))


def run(controller: RemoteOperationController, entry, pattern: str):
    assert entry.status is EntryStatus.LOCATE
    return controller.resume(pattern)


def test_yank_inner_quotes_returns_to_origin() -> None:
    workspace = make_workspace('foo "bar" baz')
    controller = make_controller(workspace)

    result = run(controller, controller.yank('i"'), "bar")

    assert result is not None and result.ok
    assert workspace.registers.get(UNNAMED).text == "bar"
    assert workspace.cursor == (1, 0)
    assert workspace.current_buffer.lines == ('foo "bar" baz',)


def test_delete_inner_quotes_leaves_delimiters() -> None:
    workspace = make_workspace('foo "bar" baz')
    controller = make_controller(workspace)

    run(controller, controller.delete('i"'), "bar")

    assert workspace.current_buffer.lines == ('foo "" baz',)
    assert workspace.registers.get(UNNAMED).text == "bar"
    assert workspace.cursor == (1, 0)


def test_change_inner_quotes_relocates_into_quotes() -> None:
    workspace = make_workspace('foo "bar" baz')
    controller = make_controller(workspace)

    run(controller, controller.change('i"'), "bar")

    assert workspace.current_buffer.lines == ('foo "" baz',)
    assert workspace.cursor == (1, 5)
    assert workspace.mode == "insert"


def test_visual_selects_inclusive_range() -> None:
    workspace = make_workspace('foo "bar" baz')
    controller = make_controller(workspace)

    run(controller, controller.visual('a"'), "bar")

    assert workspace.mode == "visual"
    assert workspace.visual is not None
    assert (workspace.visual.start, workspace.visual.end) == ((1, 4), (1, 8))
    assert workspace.current_buffer.lines == ('foo "bar" baz',)


def test_line_operations() -> None:
    workspace = make_workspace("one", "two", "three")
    controller = make_controller(workspace)

    run(controller, controller.yank_line(), "thr")
    assert workspace.registers.get(UNNAMED).text == "three\n"
    assert workspace.registers.get(UNNAMED).type == "linewise"
    assert workspace.cursor == (1, 0)

    run(controller, controller.delete_line(), "two")
    assert workspace.current_buffer.lines == ("one", "three")
    assert workspace.cursor == (1, 0)

    run(controller, controller.change_line(), "thr")
    assert workspace.current_buffer.lines == ("one", "")
    assert workspace.cursor == (2, 0)
    assert workspace.mode == "insert"


def test_visual_line_selects_whole_line() -> None:
    workspace = make_workspace("one", "two")
    controller = make_controller(workspace)

    run(controller, controller.visual_line(), "tw")

    assert workspace.mode == "visual_line"
    assert workspace.visual is not None
    assert workspace.visual.linewise
    assert (workspace.visual.start, workspace.visual.end) == ((2, 0), (2, 2))


def test_fence_block_inner_is_linewise() -> None:
    workspace = make_workspace("text", "```js", "code", "```")
    controller = make_controller(workspace)

    run(controller, controller.yank("im"), "code")

    value = workspace.registers.get(UNNAMED)
    assert (value.text, value.type) == ("code\n", "linewise")


def test_fence_block_without_content_fails() -> None:
    workspace = make_workspace("text", "```", "```")
    controller = make_controller(workspace)

    result = run(controller, controller.delete("im"), "```")

    assert result is not None and not result.ok
    assert workspace.current_buffer.lines == ("text", "```", "```")
    assert workspace.notifications[-1].level == "warn"


def test_url_motion_includes_last_character() -> None:
    workspace = make_workspace("go https://x.io/y now")
    controller = make_controller(workspace)

    run(controller, controller.yank("L"), "go")

    assert workspace.registers.get(UNNAMED).text == "https://x.io/y"


def test_readonly_buffer_failure_rolls_back() -> None:
    workspace = make_workspace('foo "bar" baz', readonly=True)
    workspace.registers.yank_to(UNNAMED, "original")
    controller = make_controller(workspace)

    result = run(controller, controller.delete('i"'), "bar")

    assert result is not None and not result.ok
    assert workspace.current_buffer.lines == ('foo "bar" baz',)
    assert workspace.registers.get(UNNAMED).text == "original"
    assert workspace.cursor == (1, 0)
    assert workspace.notifications[-1].level == "warn"


def test_yank_feedback_highlight_expires() -> None:
    workspace = make_workspace('foo "bar" baz')
    controller = make_controller(workspace, visual_feedback_duration=150)

    run(controller, controller.yank('i"'), "bar")

    [region] = workspace.highlights(FEEDBACK_NAMESPACE)
    assert (region.start, region.end) == ((1, 5), (1, 8))
    workspace.advance(150)
    assert workspace.highlights(FEEDBACK_NAMESPACE) == []


def test_delete_feedback_highlight_expires() -> None:
    workspace = make_workspace('foo "bar" baz')
    controller = make_controller(workspace, visual_feedback_duration=150)

    run(controller, controller.delete('i"'), "bar")

    assert workspace.current_buffer.lines == ('foo "" baz',)
    [region] = workspace.highlights(FEEDBACK_NAMESPACE)
    assert (region.start, region.end) == ((1, 5), (1, 8))
    workspace.advance(150)
    assert workspace.highlights(FEEDBACK_NAMESPACE) == []


def test_delete_line_feedback_stays_inside_the_buffer() -> None:
    workspace = make_workspace("a", "b", "c")
    controller = make_controller(workspace, visual_feedback_duration=150)

    run(controller, controller.delete_line(), "b")

    assert workspace.current_buffer.lines == ("a", "c")
    [region] = workspace.highlights(FEEDBACK_NAMESPACE)
    assert region.linewise
    assert (region.start, region.end) == ((2, 0), (2, 0))
    workspace.advance(150)
    assert workspace.highlights(FEEDBACK_NAMESPACE) == []


def test_deleting_the_last_line_keeps_feedback_in_range() -> None:
    workspace = make_workspace("only")
    controller = make_controller(workspace, visual_feedback_duration=150)

    run(controller, controller.delete_line(), "only")

    [region] = workspace.highlights(FEEDBACK_NAMESPACE)
    assert region.start == (1, 0)


def test_execute_without_span_is_a_failed_noop() -> None:
    workspace = make_workspace("no quotes here")
    executor = OperationExecutor(workspace, KindRegistry())

    result = executor.execute(Operation.DELETE, TextObjectRef.parse('i"'), position=(1, 3))

    assert not result.ok
    assert workspace.current_buffer.lines == ("no quotes here",)


def test_execute_at_instance_uses_its_anchor() -> None:
    workspace = make_workspace('"a" "b"')
    registry = KindRegistry()
    executor = OperationExecutor(workspace, registry)
    instances = registry.find_text_objects('"', workspace.current_buffer)

    result = executor.execute(Operation.YANK, TextObjectRef.parse('a"'), instance=instances[-1])

    assert result.ok
    assert result.text == '"b"'


def test_invalid_references_are_rejected() -> None:
    workspace = make_workspace("text")
    controller = make_controller(workspace)

    assert controller.yank("iz").status is EntryStatus.FAILED
    assert controller.yank('"').status is EntryStatus.FAILED
    assert controller.yank("iL").status is EntryStatus.FAILED
    assert controller.yank("xyz").status is EntryStatus.FAILED
    assert controller.pending is None
    assert [note.level for note in workspace.notifications] == ["error"] * 4
