"""Built-in keymaps: generated operator bindings plus fixed per-mode keys."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, List, Sequence

from remote_ops.actions import core as core_actions
from remote_ops.actions import locate as locate_actions
from remote_ops.actions import panel as panel_actions
from remote_ops.actions import remote as remote_actions
from remote_ops.actions import visual as visual_actions
from remote_ops.config import EngineConfig

from .models import ActionRef, Binding, KeySequence, KeyStroke
from .registry import KeymapRegistry

if TYPE_CHECKING:  # pragma: no cover
    from remote_ops.textobjects import KindRegistry

OPERATOR_KEYS = (("y", "yank"), ("d", "delete"), ("c", "change"), ("v", "visual"))
LINE_OPERATOR_KEYS = (("Y", "yankline"), ("D", "deleteline"), ("C", "changeline"), ("V", "visualline"))

DEFAULT_ACTIONS: tuple[ActionRef, ...] = (
    ActionRef("remote.start", remote_actions.start_operation, "Start a remote operation"),
    ActionRef("core.exit_to_normal", core_actions.exit_to_normal_mode, "Return to normal mode"),
    ActionRef("core.move_left", core_actions.move_left, "Cursor left"),
    ActionRef("core.move_right", core_actions.move_right, "Cursor right"),
    ActionRef("core.move_up", core_actions.move_up, "Cursor up"),
    ActionRef("core.move_down", core_actions.move_down, "Cursor down"),
    ActionRef("insert.backspace", core_actions.insert_backspace, "Delete before cursor"),
    ActionRef("locate.confirm", locate_actions.confirm_locate, "Confirm the locate pattern"),
    ActionRef("locate.cancel", locate_actions.cancel_locate, "Abandon the locate input"),
    ActionRef("locate.backspace", locate_actions.delete_locate_char, "Delete last pattern char"),
    ActionRef("panel.next_line", panel_actions.next_line, "Next panel line"),
    ActionRef("panel.previous_line", panel_actions.previous_line, "Previous panel line"),
    ActionRef("panel.next_instance", panel_actions.next_instance, "Next instance"),
    ActionRef("panel.previous_instance", panel_actions.previous_instance, "Previous instance"),
    ActionRef("panel.select", panel_actions.select_instance, "Operate on the instance"),
    ActionRef("panel.cancel", panel_actions.cancel_panel, "Close the panel"),
    ActionRef("panel.search", panel_actions.search_panel, "Search the panel"),
    ActionRef("visual.yank_selection", visual_actions.yank_selection, "Yank the selection"),
    ActionRef("visual.delete_selection", visual_actions.delete_selection, "Delete the selection"),
    ActionRef("visual.change_selection", visual_actions.change_selection, "Change the selection"),
)


def _bind(binding_id: str, mode: str, notation: str, action_id: str, description: str = "") -> Binding:
    return Binding(
        id=binding_id,
        mode=mode,
        sequence=KeySequence.parse(notation),
        action_id=action_id,
        description=description,
    )


DEFAULT_BINDINGS: tuple[Binding, ...] = (
    _bind("normal.left", "normal", "h", "core.move_left"),
    _bind("normal.right", "normal", "l", "core.move_right"),
    _bind("normal.up", "normal", "k", "core.move_up"),
    _bind("normal.down", "normal", "j", "core.move_down"),
    _bind("insert.exit", "insert", "<Esc>", "core.exit_to_normal", "Leave insert mode"),
    _bind("insert.backspace", "insert", "<BS>", "insert.backspace"),
    _bind("visual.exit", "visual", "<Esc>", "core.exit_to_normal", "Leave visual mode"),
    _bind("visual.yank", "visual", "y", "visual.yank_selection"),
    _bind("visual.delete", "visual", "d", "visual.delete_selection"),
    _bind("visual.change", "visual", "c", "visual.change_selection"),
    _bind("locate.confirm", "locate", "<CR>", "locate.confirm"),
    _bind("locate.cancel", "locate", "<Esc>", "locate.cancel"),
    _bind("locate.backspace", "locate", "<BS>", "locate.backspace"),
    _bind("scope.down", "scope", "j", "panel.next_line"),
    _bind("scope.up", "scope", "k", "panel.previous_line"),
    _bind("scope.next", "scope", "J", "panel.next_instance"),
    _bind("scope.previous", "scope", "K", "panel.previous_instance"),
    _bind("scope.next_ctrl", "scope", "<C-n>", "panel.next_instance"),
    _bind("scope.previous_ctrl", "scope", "<C-p>", "panel.previous_instance"),
    _bind("scope.next_tab", "scope", "<Tab>", "panel.next_instance"),
    _bind("scope.previous_tab", "scope", "<S-Tab>", "panel.previous_instance"),
    _bind("scope.select", "scope", "<CR>", "panel.select"),
    _bind("scope.cancel", "scope", "<Esc>", "panel.cancel"),
    _bind("scope.quit", "scope", "q", "panel.cancel"),
    _bind("scope.search", "scope", "/", "panel.search"),
)


def remote_bindings(kinds: "KindRegistry", config: EngineConfig) -> List[Binding]:
    """``<prefix><op><i|a><key>``, ``<prefix><op><motion>`` and ``<prefix><OP>``."""

    prefix = KeyStroke(config.prefix)
    bindings: List[Binding] = []
    for letter, operation in OPERATOR_KEYS:
        for kind in kinds:
            if kind.key in config.excluded_text_objects:
                continue
            if kind.is_motion:
                variants: Sequence[str] = ("",)
            else:
                variants = ("i", "a") if kind.supports_around else ("i",)
            for variant in variants:
                textobj = f"{variant}{kind.key}"
                keys = (letter, *variant, kind.key)
                bindings.append(
                    Binding(
                        id=f"normal.{operation}.{textobj}",
                        mode="normal",
                        sequence=KeySequence((prefix, *(KeyStroke(key) for key in keys))),
                        action_id="remote.start",
                        description=f"{operation} {textobj} ({kind.description})",
                        arguments={"operation": operation, "textobj": textobj},
                    )
                )
    for letter, operation in LINE_OPERATOR_KEYS:
        bindings.append(
            Binding(
                id=f"normal.{operation}",
                mode="normal",
                sequence=KeySequence((prefix, KeyStroke(letter))),
                action_id="remote.start",
                description=f"{operation} at the located line",
                arguments={"operation": operation},
            )
        )
    return bindings


def load_default_keymaps(
    registry: KeymapRegistry,
    *,
    kinds: "KindRegistry | None" = None,
    config: EngineConfig | None = None,
    replace: bool = False,
    extra_bindings: Iterable[Binding] | None = None,
    exclude_bindings: Sequence[str] | None = None,
) -> None:
    """Register built-in actions and bindings for every mode.

    Operator bindings are generated only when ``kinds`` is given.
    """

    excluded = set(exclude_bindings or ())
    for action in DEFAULT_ACTIONS:
        registry.register_action(action, replace=replace)

    generated: List[Binding] = []
    if kinds is not None:
        generated = remote_bindings(kinds, config or kinds.config)
    for binding in (*DEFAULT_BINDINGS, *generated, *(extra_bindings or ())):
        if binding.id in excluded:
            continue
        registry.register_binding(binding, replace=replace)


__all__ = [
    "load_default_keymaps",
    "remote_bindings",
    "DEFAULT_ACTIONS",
    "DEFAULT_BINDINGS",
    "OPERATOR_KEYS",
    "LINE_OPERATOR_KEYS",
]
