"""Text-object instances, kinds, finders and the kind registry."""

from .blocks import fence_bounds_around, find_fence_blocks, find_heading_instances, find_urls
from .kinds import (
    CallableKind,
    DelimiterKind,
    FenceBlockKind,
    HeadingKind,
    HostTextObjectKind,
    TagKind,
    TextObjectKind,
    UrlMotionKind,
    builtin_kinds,
)
from .models import Instance, KindBounds, RenderingMode, TextObjectRef, Variant
from .registry import KindRegistry
from .scanner import MAX_SCAN_ITERATIONS, find_delimiter_instances

__all__ = [
    "fence_bounds_around",
    "find_fence_blocks",
    "find_heading_instances",
    "find_urls",
    "CallableKind",
    "DelimiterKind",
    "FenceBlockKind",
    "HeadingKind",
    "HostTextObjectKind",
    "TagKind",
    "TextObjectKind",
    "UrlMotionKind",
    "builtin_kinds",
    "Instance",
    "KindBounds",
    "RenderingMode",
    "TextObjectRef",
    "Variant",
    "KindRegistry",
    "MAX_SCAN_ITERATIONS",
    "find_delimiter_instances",
]
