from __future__ import annotations

from typing import List, Optional

from remote_ops.buffer import Buffer, BufferDocument, RegisterBank
from remote_ops.buffer.registers import UNNAMED
from remote_ops.host.textobjects import TextSpan
from remote_ops.textobjects import (
    MAX_SCAN_ITERATIONS,
    DelimiterKind,
    KindRegistry,
    find_delimiter_instances,
)


def make_buffer(*lines: str) -> Buffer:
    return Buffer(1, document=BufferDocument.from_lines(lines))


def previews(key: str, *lines: str) -> List[str]:
    registry = KindRegistry()
    return [instance.preview for instance in registry.find_text_objects(key, make_buffer(*lines))]


def test_double_quotes_scan_every_literal_pair() -> None:
    # Text between two quoted strings is itself a quoted span for the scanner.
    assert previews('"', 'a "x" b "y" c') == ["x", " b ", "y"]


def test_parentheses_include_nested_pairs() -> None:
    assert previews("(", "f(a, g(b), (c))") == ["a, g(b), (c)", "b", "c"]


def test_closing_key_finds_the_same_instances_as_opening_key() -> None:
    assert previews(")", "f(a, g(b), (c))") == previews("(", "f(a, g(b), (c))")


def test_square_brackets_skip_pair_under_the_yank_cursor() -> None:
    assert previews("[", "[[1, 2], [3, 4]]") == ["[1, 2], [3, 4]", "3, 4"]


def test_curly_braces_keep_empty_inner_span() -> None:
    assert previews("{", "{a: {b: 1}, c: {}}") == ["a: {b: 1}, c: {}", "b: 1", ""]


def test_tags_select_innermost_element() -> None:
    assert previews("t", "<div><p>hi</p><span>yo</span></div>") == [
        "<p>hi</p><span>yo</span>",
        "hi",
        "yo",
    ]


def test_multiline_bracket_preview_keeps_newlines() -> None:
    registry = KindRegistry()
    buffer = make_buffer("call(", "  arg,", ")")

    [instance] = registry.find_text_objects("(", buffer)

    assert instance.preview == "  arg,"
    assert instance.start == (2, 0)
    assert instance.anchor == (1, 4)


def test_unterminated_delimiter_is_skipped() -> None:
    assert previews("(", "open( only", "(closed)") == ["closed"]


def test_discovery_is_idempotent() -> None:
    registry = KindRegistry()
    buffer = make_buffer('say "a" and "b"', "(x) [y]", "'z'")

    first = registry.find_text_objects('"', buffer)
    second = registry.find_text_objects('"', buffer)

    assert [(i.start, i.end, i.preview) for i in first] == [
        (i.start, i.end, i.preview) for i in second
    ]


def test_start_positions_are_unique() -> None:
    registry = KindRegistry()
    buffer = make_buffer('"a" "b" "c"', '""""', "<<x>>")

    for key in ('"', "<", "t"):
        starts = [instance.start for instance in registry.find_text_objects(key, buffer)]
        assert len(starts) == len(set(starts))


def test_empty_document_returns_nothing() -> None:
    registry = KindRegistry()
    for key in registry.keys():
        assert registry.find_text_objects(key, make_buffer()) == []
        assert registry.find_text_objects(key, make_buffer("")) == []


def test_scan_preserves_registers() -> None:
    bank = RegisterBank()
    bank.yank_to(UNNAMED, "keep me")
    bank.yank_to("a", "scratch")
    bank.yank_to(UNNAMED, "keep me")
    registry = KindRegistry()

    registry.find_text_objects('"', make_buffer('"one" "two"'), registers=bank)

    assert bank.get(UNNAMED).text == "keep me"
    assert bank.get("a").text == "scratch"


def test_iteration_ceiling_bounds_the_scan() -> None:
    kind = DelimiterKind('"', search_pattern='"')
    buffer = make_buffer('"' * 3000)

    instances = find_delimiter_instances(kind, buffer)

    assert len(instances) == MAX_SCAN_ITERATIONS


def test_failing_selector_stops_at_the_ceiling() -> None:
    kind = DelimiterKind('"', search_pattern='"')
    calls: List[int] = []

    def never(lines, cursor, key, *, inner) -> Optional[TextSpan]:
        calls.append(cursor[1])
        return None

    instances = find_delimiter_instances(
        kind, make_buffer('"' * 50), selector=never, max_iterations=10
    )

    assert instances == []
    assert len(calls) == 10
