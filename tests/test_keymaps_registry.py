import pytest

from remote_ops.config import load_config
from remote_ops.keymaps import (
    ActionRef,
    Binding,
    KeySequence,
    KeymapConflictError,
    KeymapRegistry,
    load_default_keymaps,
    remote_bindings,
)
from remote_ops.textobjects import KindRegistry


def make_action(action_id: str = "core.test") -> ActionRef:
    return ActionRef(id=action_id, handler=lambda *args, **kwargs: None)


def make_binding(
    *,
    binding_id: str,
    mode: str = "normal",
    notation: str = ",yi\"",
    action_id: str = "core.test",
) -> Binding:
    return Binding(
        id=binding_id,
        mode=mode,
        sequence=KeySequence.parse(notation),
        action_id=action_id,
    )


def test_parse_plain_and_special_notation() -> None:
    assert KeySequence.parse(',yi"').tokens == (",", "y", "i", '"')
    assert KeySequence.parse("<CR>").tokens == ("ENTER",)
    assert KeySequence.parse("<Esc>").tokens == ("ESC",)
    assert KeySequence.parse("<C-n>").tokens == ("ctrl+n",)
    assert KeySequence.parse("<S-Tab>").tokens == ("shift+TAB",)
    assert KeySequence.parse("a<lt>b").tokens == ("a", "<", "b")


def test_parse_rejects_unknown_modifier() -> None:
    with pytest.raises(ValueError):
        KeySequence.parse("<X-a>")


def test_register_binding_success() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    binding = make_binding(binding_id="normal.test")

    registry.register_binding(binding)

    assert list(registry.iter_bindings(mode="normal")) == [binding]
    assert registry.binding_for("normal", ', y i "') == binding


def test_register_binding_conflict_detection() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_binding(make_binding(binding_id="normal.first"))

    with pytest.raises(KeymapConflictError):
        registry.register_binding(make_binding(binding_id="normal.second"))


def test_same_keys_in_other_mode_do_not_conflict() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    registry.register_binding(make_binding(binding_id="normal.a"))
    registry.register_binding(make_binding(binding_id="scope.a", mode="scope"))

    assert registry.modes() == ("normal", "scope")


def test_register_binding_with_replace() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    first = make_binding(binding_id="first")
    second = make_binding(binding_id="second")

    registry.register_binding(first)
    registry.register_binding(second, replace=True)

    assert list(registry.iter_bindings()) == [second]


def test_binding_requires_registered_action() -> None:
    registry = KeymapRegistry()

    with pytest.raises(KeyError):
        registry.register_binding(make_binding(binding_id="orphan", action_id="missing"))


def test_unregister_binding() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    binding = make_binding(binding_id="binding")
    registry.register_binding(binding)
    revision = registry.revision()

    removed = registry.unregister_binding("binding")

    assert removed == binding
    assert list(registry.iter_bindings()) == []
    assert registry.revision() == revision + 1


def test_remote_bindings_cover_operators_and_variants() -> None:
    kinds = KindRegistry()
    bindings = {binding.id: binding for binding in remote_bindings(kinds, kinds.config)}

    yank_quotes = bindings['normal.yank.i"']
    assert yank_quotes.sequence.tokens == (",", "y", "i", '"')
    assert dict(yank_quotes.arguments) == {"operation": "yank", "textobj": 'i"'}
    assert "normal.change.am" in bindings
    assert "normal.visual.L" in bindings
    assert "normal.yank.iL" not in bindings
    assert "normal.delete.ab" not in bindings
    assert bindings["normal.deleteline"].sequence.tokens == (",", "D")
    assert dict(bindings["normal.deleteline"].arguments) == {"operation": "deleteline"}


def test_remote_bindings_use_configured_prefix_and_exclusions() -> None:
    config = load_config({"prefix": ";", "excluded_text_objects": ["<", ">"]})
    kinds = KindRegistry(config)

    bindings = remote_bindings(kinds, config)

    assert all(binding.sequence.tokens[0] == ";" for binding in bindings)
    assert not any(binding.id.endswith("<") for binding in bindings)


def test_load_default_keymaps_registers_every_mode() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(registry, kinds=KindRegistry())

    assert registry.modes() == ("insert", "locate", "normal", "scope", "visual")
    assert registry.get_binding("scope.next_tab").sequence.tokens == ("TAB",)
    assert registry.get_binding('normal.yank.a"').action_id == "remote.start"


def test_load_default_keymaps_without_kinds_skips_operators() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(registry, exclude_bindings=("scope.quit",))

    assert all(binding.action_id != "remote.start" for binding in registry.iter_bindings())
    with pytest.raises(KeyError):
        registry.get_binding("scope.quit")


def test_load_default_keymaps_extra_binding_replaces() -> None:
    registry = KeymapRegistry()
    custom = Binding(
        id="scope.quit",
        mode="scope",
        sequence=KeySequence.parse("x"),
        action_id="panel.cancel",
    )

    load_default_keymaps(registry, extra_bindings=(custom,), replace=True)

    assert registry.get_binding("scope.quit").sequence.tokens == ("x",)
    assert registry.binding_for("scope", "q") is None
