"""Balanced locate patterns for quote and bracket text objects."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from remote_ops.config import EngineConfig
from remote_ops.host.textobjects import BRACKETS, QUOTES
from remote_ops.textobjects import TextObjectRef


@dataclass(frozen=True, slots=True)
class SearchConstraint:
    """Prefix seeded into the locate input and suffix appended on confirm."""

    prefix: str
    suffix: str

    def wrap(self, pattern: str) -> str:
        return f"{pattern}{self.suffix}"


def constraint_for(textobj: Optional[TextObjectRef]) -> Optional[SearchConstraint]:
    if textobj is None or textobj.is_motion:
        return None
    key = textobj.key
    if key in QUOTES:
        quote = re.escape(key)
        return SearchConstraint(prefix=f"{quote}[^{quote}]*", suffix=f"[^{quote}]*{quote}")
    if key in BRACKETS:
        open_ch, close_ch = BRACKETS[key]
        excluded = f"[^{re.escape(open_ch)}{re.escape(close_ch)}]*"
        return SearchConstraint(
            prefix=f"{re.escape(open_ch)}{excluded}",
            suffix=f"{excluded}{re.escape(close_ch)}",
        )
    return None


def seed_for(textobj: Optional[TextObjectRef], config: EngineConfig) -> Optional[SearchConstraint]:
    """The constraint to apply for ``textobj``, or ``None`` when disabled."""

    if not config.smart_highlighting:
        return None
    return constraint_for(textobj)


__all__ = ["SearchConstraint", "constraint_for", "seed_for"]
