from __future__ import annotations

from typing import List, Optional

import pytest

from remote_ops.buffer import Buffer, BufferDocument
from remote_ops.config import load_config
from remote_ops.errors import KindConflictError, UnknownTextObjectError
from remote_ops.textobjects import (
    CallableKind,
    Instance,
    KindBounds,
    KindRegistry,
    RenderingMode,
    Variant,
)


def make_buffer(*lines: str) -> Buffer:
    return Buffer(1, document=BufferDocument.from_lines(lines))


def find_numbers(buffer: Buffer) -> List[Instance]:
    instances: List[Instance] = []
    for number, line in enumerate(buffer.lines, start=1):
        for col, char in enumerate(line):
            if char.isdigit():
                instances.append(Instance(start=(number, col), end=(number, col), preview=char))
    return instances


def select_number(instance: Instance, variant: Optional[Variant]) -> KindBounds:
    line, col = instance.start
    return KindBounds(start=(line, col), end=(line, col + 1))


def make_kind(key: str = "n") -> CallableKind:
    return CallableKind(
        key,
        find=find_numbers,
        select=select_number,
        format=lambda instance: [f"#{instance.preview}"],
        description="digit",
    )


def test_register_custom_kind_and_find() -> None:
    registry = KindRegistry()
    kind = registry.register(make_kind())

    found = registry.find_text_objects("n", make_buffer("a1 b2"))

    assert [instance.preview for instance in found] == ["1", "2"]
    assert registry.is_custom("n")
    assert registry.get_custom_formatter("n") is not None
    assert kind.format(found[0]) == ["#1"]


def test_register_duplicate_custom_kind_conflicts() -> None:
    registry = KindRegistry()
    registry.register(make_kind())

    with pytest.raises(KindConflictError):
        registry.register(make_kind())

    replacement = make_kind()
    assert registry.register(replacement, replace=True) is replacement
    assert registry.get("n") is replacement


def test_custom_kind_shadows_builtin() -> None:
    registry = KindRegistry()
    custom = registry.register(make_kind('"'))

    assert registry.get('"') is custom
    assert registry.find_text_objects('"', make_buffer('"x" 7'))[0].preview == "7"

    registry.unregister('"')
    assert registry.find_text_objects('"', make_buffer('"x" 7'))[0].preview == "x"


def test_builtin_lookups() -> None:
    registry = KindRegistry()

    assert registry.rendering_mode("m") is RenderingMode.LINEWISE
    assert registry.rendering_mode('"') is RenderingMode.CHARACTERWISE
    assert registry.is_custom("h")
    assert not registry.is_custom("(")
    assert registry.get_custom_finder("(") is None
    assert registry.get_custom_selector("m") is not None
    assert registry.find_text_objects("z", make_buffer("text")) == []
    with pytest.raises(UnknownTextObjectError):
        registry.get("z")


def test_excluded_text_objects_are_not_registered() -> None:
    registry = KindRegistry(load_config({"excluded_text_objects": ["<", ">"]}))

    assert "<" not in registry
    assert ">" not in registry
    assert "(" in registry


def test_callable_kind_requires_single_character_key() -> None:
    with pytest.raises(ValueError):
        make_kind("nn")


def test_scoped_kinds_follow_config() -> None:
    registry = KindRegistry(load_config({"scope": {"enabled": True}}))

    assert registry.is_scoped('"')
    assert registry.is_scoped("m")
    assert not registry.is_scoped("w")
    assert not KindRegistry().is_scoped('"')


def test_cross_buffer_disables_every_scoped_kind() -> None:
    config = load_config(
        {
            "cross_buffer": True,
            "scope": {"enabled": True, "custom_scoped_text_objects": ["m", "h", "L", "w"]},
        }
    )
    registry = KindRegistry(config)

    assert not config.scope_active
    assert registry.scoped_keys() == []
    assert not any(registry.is_scoped(key) for key in registry.keys())
