"""Forward search primitive used by the locate feature and internal probes.

Patterns are Python regular expressions; the locating-pattern language belongs
to the host and this in-memory host simply uses ``re``.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Optional, Pattern, Sequence

from remote_ops.buffer import Position
from remote_ops.runtime import telemetry


@lru_cache(maxsize=128)
def _compile(pattern: str) -> Optional[Pattern[str]]:
    try:
        return re.compile(pattern)
    except re.error as exc:
        telemetry.record_event(
            "search.invalid_pattern",
            level="warning",
            data={"pattern": pattern, "error": str(exc)},
            logger_name="remote_ops.host.search",
        )
        return None


def search_forward(
    lines: Sequence[str],
    pattern: str,
    cursor: Position,
    *,
    accept_at_cursor: bool = False,
    wrap: bool = False,
) -> Optional[Position]:
    """Return the first match start after ``cursor`` (or at it when accepted).

    Matches never span lines. An invalid pattern behaves like a miss.
    """

    compiled = _compile(pattern)
    if compiled is None or not lines:
        return None

    line, col = cursor
    first_col = col if accept_at_cursor else col + 1
    hit = _search_line(compiled, lines[line - 1], first_col)
    if hit is not None:
        return (line, hit)

    for number in range(line + 1, len(lines) + 1):
        hit = _search_line(compiled, lines[number - 1], 0)
        if hit is not None:
            return (number, hit)

    if not wrap:
        return None

    for number in range(1, line + 1):
        limit = first_col if number == line else None
        hit = _search_line(compiled, lines[number - 1], 0, limit=limit)
        if hit is not None:
            return (number, hit)
    return None


def _search_line(
    compiled: Pattern[str], text: str, start: int, *, limit: Optional[int] = None
) -> Optional[int]:
    if start > len(text):
        return None
    for match in compiled.finditer(text, start):
        if limit is not None and match.start() >= limit:
            return None
        # Zero-width matches past the last character only count on empty lines.
        if match.start() < len(text) or not text:
            return match.start()
    return None


__all__ = ["search_forward"]
