"""Base classes and shared utilities for editor modes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from remote_ops.buffer import RegisterBank
from remote_ops.host import EditorHost
from remote_ops.runtime.events import ModeBus


@dataclass(slots=True)
class KeyInput:
    """Normalized key event passed to modes."""

    key: str
    modifiers: Tuple[str, ...] = ()
    text: Optional[str] = None

    @property
    def printable(self) -> Optional[str]:
        """The character this key types, if any."""

        if self.modifiers and self.modifiers != ("shift",):
            return None
        if self.text is not None and len(self.text) == 1:
            return self.text
        return self.key if len(self.key) == 1 else None


@dataclass(slots=True)
class ModeResult:
    """Result returned from ``Mode.handle_key``."""

    consumed: bool
    switch_to: Optional[str] = None
    status: str = "ok"
    message: Optional[str] = None
    timeout_ms: Optional[int] = None


@dataclass(slots=True)
class ModeContext:
    """Shared services every mode can access."""

    host: EditorHost
    bus: ModeBus
    extras: Dict[str, object] = field(default_factory=dict)

    @property
    def registers(self) -> RegisterBank:
        return self.host.registers


class Mode:
    """Base class all concrete modes inherit from."""

    name: str = "mode"

    def __init__(self, context: ModeContext) -> None:
        self.context = context

    def on_enter(self, previous: Optional[str]) -> None:  # pragma: no cover - default no-op
        del previous

    def on_exit(self, next_mode: Optional[str]) -> None:  # pragma: no cover - default no-op
        del next_mode

    def handle_key(self, key: KeyInput) -> ModeResult:  # pragma: no cover - abstract override
        raise NotImplementedError

    def handle_timeout(self) -> ModeResult:
        """Invoked by the manager when a pending key sequence expires."""

        return ModeResult(consumed=False, status="timeout")


__all__ = ["KeyInput", "Mode", "ModeBus", "ModeContext", "ModeResult"]
