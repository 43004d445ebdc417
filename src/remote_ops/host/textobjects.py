"""Native text-object selection primitives of the in-memory host.

These stand in for the editor's own ``i"``/``a(``/``it``/``iw``/``ip``
selections. Each selector receives the document lines and a cursor and
returns a :class:`TextSpan` or ``None`` when nothing well-formed surrounds
the cursor (unterminated delimiters, missing tags, ...).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from remote_ops.buffer import Position, offset_for_position, position_from_offset
from remote_ops.errors import UnknownTextObjectError

QUOTES = ('"', "'", "`")
BRACKETS: Dict[str, Tuple[str, str]] = {
    "(": ("(", ")"),
    ")": ("(", ")"),
    "b": ("(", ")"),
    "[": ("[", "]"),
    "]": ("[", "]"),
    "{": ("{", "}"),
    "}": ("{", "}"),
    "B": ("{", "}"),
    "<": ("<", ">"),
    ">": ("<", ">"),
}

_TAG_RE = re.compile(r"<(/?)([A-Za-z][\w:.-]*)[^<>]*?(/?)>")
_WORD_RE = re.compile(r"\w")


@dataclass(frozen=True, slots=True)
class TextSpan:
    """Selected region; ``end`` is exclusive."""

    start: Position
    end: Position
    linewise: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.linewise and self.start == self.end


Selector = Callable[[Sequence[str], Position, bool], Optional[TextSpan]]


def select_text_object(
    lines: Sequence[str], cursor: Position, key: str, *, inner: bool
) -> Optional[TextSpan]:
    """Resolve text object ``key`` around ``cursor``.

    Raises :class:`UnknownTextObjectError` for keys the host cannot select.
    """

    if not lines or cursor[0] < 1 or cursor[0] > len(lines):
        return None
    if key in QUOTES:
        return _quote_span(lines, cursor, key, inner)
    if key in BRACKETS:
        open_ch, close_ch = BRACKETS[key]
        return _bracket_span(lines, cursor, open_ch, close_ch, inner)
    selector = _SELECTORS.get(key)
    if selector is None:
        raise UnknownTextObjectError(key)
    return selector(lines, cursor, inner)


def _quote_span(
    lines: Sequence[str], cursor: Position, quote: str, inner: bool
) -> Optional[TextSpan]:
    # A quote under the cursor opens a pair with the next quote on the line and
    # only closes the previous one when nothing follows. Escapes are ignored.
    number, col = cursor
    text = lines[number - 1]
    if col < len(text) and text[col] == quote:
        close_col = text.find(quote, col + 1)
        if close_col != -1:
            open_col = col
        else:
            open_col, close_col = text.rfind(quote, 0, col), col
    else:
        open_col = text.rfind(quote, 0, col)
        if open_col == -1:
            open_col = text.find(quote, col)
        close_col = text.find(quote, open_col + 1) if open_col != -1 else -1

    if open_col == -1 or close_col == -1:
        return None
    if inner:
        return TextSpan(start=(number, open_col + 1), end=(number, close_col))
    return TextSpan(start=(number, open_col), end=(number, close_col + 1))


def _bracket_span(
    lines: Sequence[str], cursor: Position, open_ch: str, close_ch: str, inner: bool
) -> Optional[TextSpan]:
    text = "\n".join(lines)
    offset = offset_for_position(lines, cursor)
    current = text[offset] if offset < len(text) else ""

    if current == open_ch:
        open_at: Optional[int] = offset
    else:
        open_at = _unmatched_open(text, offset - 1, open_ch, close_ch)
    if open_at is None:
        return None
    close_at = _matching_close(text, open_at + 1, open_ch, close_ch)
    if close_at is None:
        return None

    if not inner:
        start, end = open_at, close_at + 1
    else:
        start, end = open_at + 1, close_at
        if start < end and text[start] == "\n":
            start += 1
        line_break = text.rfind("\n", start, end)
        if line_break != -1 and not text[line_break + 1 : end].strip():
            end = line_break
        end = max(start, end)
    return TextSpan(
        start=position_from_offset(lines, start),
        end=position_from_offset(lines, end),
    )


def _unmatched_open(text: str, index: int, open_ch: str, close_ch: str) -> Optional[int]:
    depth = 0
    while index >= 0:
        char = text[index]
        if char == close_ch:
            depth += 1
        elif char == open_ch:
            if depth == 0:
                return index
            depth -= 1
        index -= 1
    return None


def _matching_close(text: str, index: int, open_ch: str, close_ch: str) -> Optional[int]:
    depth = 0
    while index < len(text):
        char = text[index]
        if char == open_ch:
            depth += 1
        elif char == close_ch:
            if depth == 0:
                return index
            depth -= 1
        index += 1
    return None


def _tag_span(lines: Sequence[str], cursor: Position, inner: bool) -> Optional[TextSpan]:
    text = "\n".join(lines)
    offset = offset_for_position(lines, cursor)
    best: Optional[Tuple[int, int, int, int]] = None
    for pair in _tag_pairs(text):
        open_start, _, _, close_end = pair
        if open_start <= offset < close_end and (best is None or open_start > best[0]):
            best = pair
    if best is None:
        return None
    open_start, open_end, close_start, close_end = best
    start, end = (open_end, close_start) if inner else (open_start, close_end)
    return TextSpan(
        start=position_from_offset(lines, start),
        end=position_from_offset(lines, end),
    )


def _tag_pairs(text: str) -> List[Tuple[int, int, int, int]]:
    pairs: List[Tuple[int, int, int, int]] = []
    stack: List[Tuple[str, int, int]] = []
    for match in _TAG_RE.finditer(text):
        closing, name, self_closing = match.group(1), match.group(2), match.group(3)
        if self_closing:
            continue
        if not closing:
            stack.append((name, match.start(), match.end()))
            continue
        for depth in range(len(stack) - 1, -1, -1):
            if stack[depth][0] == name:
                _, open_start, open_end = stack[depth]
                del stack[depth:]
                pairs.append((open_start, open_end, match.start(), match.end()))
                break
    return pairs


def _char_class(char: str, big: bool) -> int:
    if char.isspace():
        return 0
    if big or _WORD_RE.match(char):
        return 1
    return 2


def _word_span(
    lines: Sequence[str], cursor: Position, inner: bool, *, big: bool = False
) -> Optional[TextSpan]:
    number, col = cursor
    text = lines[number - 1]
    if not text:
        return None
    col = min(col, len(text) - 1)
    cls = _char_class(text[col], big)
    start = col
    while start > 0 and _char_class(text[start - 1], big) == cls:
        start -= 1
    end = col + 1
    while end < len(text) and _char_class(text[end], big) == cls:
        end += 1
    if not inner and cls != 0:
        trailing = end
        while trailing < len(text) and text[trailing].isspace():
            trailing += 1
        if trailing > end:
            end = trailing
        else:
            while start > 0 and text[start - 1].isspace():
                start -= 1
    return TextSpan(start=(number, start), end=(number, end))


def _paragraph_span(
    lines: Sequence[str], cursor: Position, inner: bool
) -> Optional[TextSpan]:
    number = cursor[0]
    blank = not lines[number - 1].strip()
    first = number
    while first > 1 and (not lines[first - 2].strip()) == blank:
        first -= 1
    last = number
    while last < len(lines) and (not lines[last].strip()) == blank:
        last += 1
    if not inner:
        extended = last
        while extended < len(lines) and (not lines[extended].strip()) != blank:
            extended += 1
        last = extended
    return TextSpan(
        start=(first, 0), end=(last, len(lines[last - 1])), linewise=True
    )


_SELECTORS: Dict[str, Selector] = {
    "t": _tag_span,
    "w": _word_span,
    "W": lambda lines, cursor, inner: _word_span(lines, cursor, inner, big=True),
    "p": _paragraph_span,
}


__all__ = ["TextSpan", "QUOTES", "BRACKETS", "select_text_object"]
