"""Text-object kinds: one interface for delimiter, block, motion and custom kinds."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from remote_ops.buffer import Buffer, Position, RegisterBank
from remote_ops.host.textobjects import select_text_object

from .blocks import fence_bounds_around, find_fence_blocks, find_heading_instances, find_urls
from .models import Instance, KindBounds, RenderingMode, Variant
from .scanner import find_delimiter_instances


class TextObjectKind(ABC):
    """Finder, selector and formatter for one text-object key."""

    key: str = ""
    description: str = ""
    rendering_mode: RenderingMode = RenderingMode.CHARACTERWISE
    is_motion: bool = False
    supports_around: bool = True
    custom: bool = False

    @property
    def linewise(self) -> bool:
        return self.rendering_mode is RenderingMode.LINEWISE

    @abstractmethod
    def find(
        self, buffer: Buffer, *, registers: Optional[RegisterBank] = None
    ) -> List[Instance]:
        """Every instance of this kind in ``buffer``, in document order."""

    @abstractmethod
    def select(
        self,
        buffer: Buffer,
        position: Position,
        variant: Optional[Variant],
        instance: Optional[Instance] = None,
    ) -> Optional[KindBounds]:
        """Bounds to operate on, either for ``instance`` or around ``position``."""

    def format(self, instance: Instance) -> List[str]:
        return instance.preview.split("\n")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(key={self.key!r})"


class DelimiterKind(TextObjectKind):
    """Quote and bracket pairs discovered with the delimiter scanner."""

    def __init__(
        self,
        key: str,
        *,
        search_pattern: str,
        delimiters: Tuple[str, str] = ("", ""),
        opening: Optional[str] = None,
        description: str = "",
        supports_around: bool = True,
    ) -> None:
        self.key = key
        self.search_pattern = search_pattern
        self.delimiters = delimiters
        self.opening = opening
        self.description = description
        self.supports_around = supports_around

    @property
    def trial_key(self) -> str:
        return self.key

    def find(
        self, buffer: Buffer, *, registers: Optional[RegisterBank] = None
    ) -> List[Instance]:
        return find_delimiter_instances(self, buffer, registers=registers)

    def select(
        self,
        buffer: Buffer,
        position: Position,
        variant: Optional[Variant],
        instance: Optional[Instance] = None,
    ) -> Optional[KindBounds]:
        at = instance.anchor if instance is not None and instance.anchor else position
        span = select_text_object(
            buffer.lines, at, self.trial_key, inner=variant is not Variant.AROUND
        )
        if span is None:
            return None
        return KindBounds(start=span.start, end=span.end, linewise=span.linewise)

    def format(self, instance: Instance) -> List[str]:
        left, right = self.delimiters
        lines = instance.preview.split("\n")
        lines[0] = left + lines[0]
        lines[-1] = lines[-1] + right
        return lines


class TagKind(DelimiterKind):
    """Markup element pairs; hits on ``<`` trial the innermost element."""

    def __init__(self) -> None:
        super().__init__("t", search_pattern="<", description="tag block")


class FenceBlockKind(TextObjectKind):
    key = "m"
    description = "markdown code block"
    rendering_mode = RenderingMode.LINEWISE
    custom = True

    def find(
        self, buffer: Buffer, *, registers: Optional[RegisterBank] = None
    ) -> List[Instance]:
        return find_fence_blocks(buffer.lines)

    def select(
        self,
        buffer: Buffer,
        position: Position,
        variant: Optional[Variant],
        instance: Optional[Instance] = None,
    ) -> Optional[KindBounds]:
        if instance is not None:
            first, last = instance.start_line, instance.end_line
        else:
            bounds = fence_bounds_around(buffer.lines, position[0])
            if bounds is None:
                return None
            first, last = bounds
        if variant is not Variant.AROUND:
            first, last = first + 1, last - 1
        if first > last:
            return None
        return KindBounds.lines(first, last)

    def format(self, instance: Instance) -> List[str]:
        body = instance.preview.split("\n") if instance.metadata.get("content_lines") else []
        return [f"```{instance.metadata.get('language', '')}", *body, "```"]


class HeadingKind(TextObjectKind):
    key = "h"
    description = "markdown heading"
    rendering_mode = RenderingMode.LINEWISE
    custom = True

    def find(
        self, buffer: Buffer, *, registers: Optional[RegisterBank] = None
    ) -> List[Instance]:
        return find_heading_instances(buffer.lines)

    def select(
        self,
        buffer: Buffer,
        position: Position,
        variant: Optional[Variant],
        instance: Optional[Instance] = None,
    ) -> Optional[KindBounds]:
        if instance is None:
            enclosing = [
                found
                for found in find_heading_instances(buffer.lines)
                if found.start_line <= position[0]
            ]
            if not enclosing:
                return None
            instance = enclosing[-1]
        if variant is Variant.AROUND:
            return KindBounds.lines(instance.start_line, instance.end_line)
        if instance.metadata.get("has_content"):
            return KindBounds.lines(instance.metadata["content_start"], instance.end_line)
        return KindBounds.lines(instance.start_line, instance.start_line)

    def format(self, instance: Instance) -> List[str]:
        return [instance.preview]


class UrlMotionKind(TextObjectKind):
    """Forward-seeking URL motion; bounds carry an inclusive end column."""

    key = "L"
    description = "URL"
    is_motion = True
    supports_around = False
    custom = True

    def find(
        self, buffer: Buffer, *, registers: Optional[RegisterBank] = None
    ) -> List[Instance]:
        return find_urls(buffer.lines)

    def select(
        self,
        buffer: Buffer,
        position: Position,
        variant: Optional[Variant],
        instance: Optional[Instance] = None,
    ) -> Optional[KindBounds]:
        if instance is None:
            instance = next(
                (found for found in find_urls(buffer.lines) if found.end >= position),
                None,
            )
            if instance is None:
                return None
        return KindBounds(start=instance.start, end=instance.end)

    def format(self, instance: Instance) -> List[str]:
        return [instance.preview]


class HostTextObjectKind(TextObjectKind):
    """Kinds the host selects natively but that are never enumerated."""

    def __init__(
        self,
        key: str,
        *,
        description: str = "",
        rendering_mode: RenderingMode = RenderingMode.CHARACTERWISE,
    ) -> None:
        self.key = key
        self.description = description
        self.rendering_mode = rendering_mode

    def find(
        self, buffer: Buffer, *, registers: Optional[RegisterBank] = None
    ) -> List[Instance]:
        return []

    def select(
        self,
        buffer: Buffer,
        position: Position,
        variant: Optional[Variant],
        instance: Optional[Instance] = None,
    ) -> Optional[KindBounds]:
        span = select_text_object(
            buffer.lines,
            instance.start if instance is not None else position,
            self.key,
            inner=variant is not Variant.AROUND,
        )
        if span is None:
            return None
        if span.linewise:
            return KindBounds.lines(span.start[0], span.end[0])
        return KindBounds(start=span.start, end=span.end)


Finder = Callable[[Buffer], Iterable[Instance]]
Selector = Callable[[Instance, Optional[Variant]], Optional[KindBounds]]
Formatter = Callable[[Instance], Sequence[str]]


class CallableKind(TextObjectKind):
    """Adapts loose ``find``/``select``/``format`` callables to the kind interface.

    ``select`` receives the chosen instance; when an operation resolves a bare
    position, the instance covering it (or the next one after it) is used.
    """

    custom = True

    def __init__(
        self,
        key: str,
        *,
        find: Finder,
        select: Selector,
        format: Optional[Formatter] = None,
        rendering_mode: RenderingMode = RenderingMode.CHARACTERWISE,
        is_motion: bool = False,
        description: str = "",
    ) -> None:
        if len(key) != 1:
            raise ValueError("Text object keys are single characters")
        self.key = key
        self.rendering_mode = rendering_mode
        self.is_motion = is_motion
        self.supports_around = not is_motion
        self.description = description
        self._find = find
        self._select = select
        self._format = format

    def find(
        self, buffer: Buffer, *, registers: Optional[RegisterBank] = None
    ) -> List[Instance]:
        return list(self._find(buffer))

    def select(
        self,
        buffer: Buffer,
        position: Position,
        variant: Optional[Variant],
        instance: Optional[Instance] = None,
    ) -> Optional[KindBounds]:
        if instance is None:
            instance = _instance_at(self.find(buffer), position)
            if instance is None:
                return None
        return self._select(instance, variant)

    def format(self, instance: Instance) -> List[str]:
        if self._format is None:
            return super().format(instance)
        return list(self._format(instance))


def _instance_at(instances: Sequence[Instance], position: Position) -> Optional[Instance]:
    for instance in instances:
        if instance.start <= position <= instance.end:
            return instance
    return next((found for found in instances if found.start > position), None)


def builtin_kinds() -> List[TextObjectKind]:
    kinds: List[TextObjectKind] = [
        DelimiterKind('"', search_pattern='"', delimiters=('"', '"'), description="double quotes"),
        DelimiterKind("'", search_pattern="'", delimiters=("'", "'"), description="single quotes"),
        DelimiterKind("`", search_pattern="`", delimiters=("`", "`"), description="backticks"),
    ]
    brackets = (
        ("(", ")", r"[()]", "parentheses"),
        ("[", "]", r"[\[\]]", "square brackets"),
        ("{", "}", r"[{}]", "curly braces"),
        ("<", ">", r"[<>]", "angle brackets"),
    )
    for open_ch, close_ch, pattern, description in brackets:
        for key in (open_ch, close_ch):
            kinds.append(
                DelimiterKind(
                    key,
                    search_pattern=pattern,
                    delimiters=(open_ch, close_ch),
                    opening=open_ch,
                    description=description,
                )
            )
    kinds.append(
        DelimiterKind(
            "b",
            search_pattern=r"[()]",
            delimiters=("(", ")"),
            opening="(",
            description="parentheses",
            supports_around=False,
        )
    )
    kinds.append(
        DelimiterKind(
            "B",
            search_pattern=r"[{}]",
            delimiters=("{", "}"),
            opening="{",
            description="curly braces",
            supports_around=False,
        )
    )
    kinds.extend(
        [
            TagKind(),
            FenceBlockKind(),
            HeadingKind(),
            UrlMotionKind(),
            HostTextObjectKind("w", description="word"),
            HostTextObjectKind("W", description="WORD"),
            HostTextObjectKind(
                "p", description="paragraph", rendering_mode=RenderingMode.LINEWISE
            ),
        ]
    )
    return kinds


__all__ = [
    "TextObjectKind",
    "DelimiterKind",
    "TagKind",
    "FenceBlockKind",
    "HeadingKind",
    "UrlMotionKind",
    "HostTextObjectKind",
    "CallableKind",
    "builtin_kinds",
]
