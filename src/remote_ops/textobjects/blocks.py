"""Line-oriented finders for fenced blocks, headings and URLs.

All finders are pure functions over a list of lines and never depend on the
cursor position.
"""

from __future__ import annotations

import re
from typing import List, Optional, Sequence, Tuple

from .models import Instance

FENCE_OPEN = re.compile(r"^```(.*)$")
FENCE_LINE = re.compile(r"^\s*```")
HEADING = re.compile(r"^(#+)\s")
URL = re.compile(r"[a-z]{3,}://[^\s)\]}\"'`>]+")


def find_fence_blocks(lines: Sequence[str]) -> List[Instance]:
    """Fenced code blocks; an opening fence that never closes is dropped."""

    instances: List[Instance] = []
    open_line: Optional[int] = None
    language = ""
    for number, text in enumerate(lines, start=1):
        match = FENCE_OPEN.match(text)
        if match is None:
            continue
        if open_line is None:
            open_line = number
            language = match.group(1).strip()
            continue
        content = list(lines[open_line : number - 1])
        instances.append(
            Instance(
                start=(open_line, 0),
                end=(number, max(0, len(text) - 1)),
                preview="\n".join(content),
                metadata={"language": language, "content_lines": len(content)},
            )
        )
        open_line = None
        language = ""
    return instances


def find_heading_instances(lines: Sequence[str]) -> List[Instance]:
    """Headings; each range runs to the line before the next heading of any level."""

    headings: List[Tuple[int, int]] = []
    for number, text in enumerate(lines, start=1):
        match = HEADING.match(text)
        if match:
            headings.append((number, len(match.group(1))))

    instances: List[Instance] = []
    for index, (number, level) in enumerate(headings):
        if index + 1 < len(headings):
            content_end = headings[index + 1][0] - 1
        else:
            content_end = len(lines)
        has_content = any(
            lines[line - 1].strip() for line in range(number + 1, content_end + 1)
        )
        instances.append(
            Instance(
                start=(number, 0),
                end=(content_end, max(0, len(lines[content_end - 1]) - 1)),
                preview=lines[number - 1],
                metadata={
                    "level": level,
                    "has_content": has_content,
                    "content_start": number + 1,
                },
            )
        )
    return instances


def find_urls(lines: Sequence[str]) -> List[Instance]:
    instances: List[Instance] = []
    for number, text in enumerate(lines, start=1):
        for match in URL.finditer(text):
            instances.append(
                Instance(
                    start=(number, match.start()),
                    end=(number, match.end() - 1),
                    preview=match.group(0),
                    metadata={"url": match.group(0)},
                )
            )
    return instances


def fence_bounds_around(lines: Sequence[str], line: int) -> Optional[Tuple[int, int]]:
    """Nearest fence line at or above ``line`` and the next fence line below it."""

    start: Optional[int] = None
    for number in range(min(line, len(lines)), 0, -1):
        if FENCE_LINE.match(lines[number - 1]):
            start = number
            break
    if start is None:
        return None
    for number in range(start + 1, len(lines) + 1):
        if FENCE_LINE.match(lines[number - 1]):
            return start, number
    return None


__all__ = [
    "find_fence_blocks",
    "find_heading_instances",
    "find_urls",
    "fence_bounds_around",
]
