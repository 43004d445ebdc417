"""Mode manager coordinating normal, locate, scope, visual and insert modes."""

from __future__ import annotations

from dataclasses import dataclass
import time
from typing import Dict, Optional, Type

from remote_ops.keymaps import KeymapRegistry, KeymapResolver, load_default_keymaps
from remote_ops.runtime import telemetry

from .base_mode import KeyInput, Mode, ModeContext, ModeResult
from .insert_mode import InsertMode
from .keymap_helpers import host_mode
from .locate_mode import LocateMode
from .normal_mode import NormalMode
from .scope_mode import ScopeMode
from .visual_mode import VisualMode


@dataclass
class PendingTimeout:
    deadline: float
    timeout_ms: int


class ModeManager:
    """Owns the active mode, handles transitions and dispatches key events.

    Default keymaps need the kind registry of the controller stored under
    ``context.extras["remote_controller"]`` to generate operator bindings.
    """

    def __init__(
        self,
        context: ModeContext,
        *,
        keymap_registry: KeymapRegistry | None = None,
        keymap_resolver: KeymapResolver | None = None,
        load_defaults: bool = True,
    ) -> None:
        self.context = context
        self._modes: Dict[str, Mode] = {}
        self._active: Optional[str] = None
        self.keymap_registry = keymap_registry or KeymapRegistry(
            logger_name="remote_ops.keymaps"
        )
        if load_defaults and keymap_registry is None:
            controller = context.extras.get("remote_controller")
            load_default_keymaps(
                self.keymap_registry, kinds=getattr(controller, "registry", None)
            )
        self.keymap_resolver = keymap_resolver or KeymapResolver(
            self.keymap_registry, logger_name="remote_ops.keymaps"
        )
        self.context.extras.setdefault("keymap_registry", self.keymap_registry)
        self.context.extras.setdefault("keymap_resolver", self.keymap_resolver)
        self.context.extras.setdefault("mode_manager", self)
        self._pending_timeouts: Dict[str, PendingTimeout] = {}

    @property
    def active_mode(self) -> Optional[Mode]:
        if self._active is None:
            return None
        return self._modes.get(self._active)

    def register_mode(
        self,
        mode_cls: Type[Mode],
        /,
        *mode_args: object,
        **mode_kwargs: object,
    ) -> Mode:
        mode = mode_cls(self.context, *mode_args, **mode_kwargs)
        if mode.name in self._modes:
            raise ValueError(f"Mode '{mode.name}' already registered")
        self._modes[mode.name] = mode
        if self._active is None:
            self._active = mode.name
            mode.on_enter(None)
        return mode

    def switch_mode(self, name: str) -> None:
        if name not in self._modes:
            raise KeyError(f"Unknown mode '{name}'")
        previous = self.active_mode
        if previous and previous.name == name:
            return
        if previous:
            self.cancel_timeout(previous.name)
            previous.on_exit(name)
        self._active = name
        self._modes[name].on_enter(previous.name if previous else None)
        telemetry.record_event(
            "mode.switch", data={"mode": name}, logger_name="remote_ops.modes"
        )

    def follow_host(self) -> None:
        """Align the active mode with the host after an operation changed it."""

        if self._active in ("locate", "scope"):
            return
        target = host_mode(self.context)
        if target in self._modes and target != self._active:
            self.switch_mode(target)

    def handle_key(self, key: KeyInput) -> ModeResult:
        mode = self.active_mode
        if mode is None:
            raise RuntimeError("No active mode registered")
        with telemetry.span(
            name=f"mode::{mode.name}",
            logger_name="remote_ops.modes",
            component=True,
            metadata={"key": key.key, "mode": mode.name},
        ):
            result = mode.handle_key(key)
        return self._after_mode_result(mode, result)

    def _after_mode_result(self, mode: Mode, result: ModeResult) -> ModeResult:
        if result.timeout_ms:
            self.arm_timeout(mode.name, result.timeout_ms)
        else:
            self.cancel_timeout(mode.name)
        if result.switch_to:
            self.switch_mode(result.switch_to)
        else:
            self.follow_host()
        return result

    def arm_timeout(self, mode_name: str, timeout_ms: int) -> None:
        deadline = time.monotonic() + (timeout_ms / 1000.0)
        self._pending_timeouts[mode_name] = PendingTimeout(deadline, timeout_ms)

    def cancel_timeout(self, mode_name: str) -> None:
        self._pending_timeouts.pop(mode_name, None)

    def process_timeouts(self) -> Dict[str, ModeResult]:
        now = time.monotonic()
        expired = [
            name for name, timer in self._pending_timeouts.items() if timer.deadline <= now
        ]
        return {name: self._trigger_timeout(name) for name in expired}

    def force_timeout(self, mode_name: Optional[str] = None) -> Dict[str, ModeResult]:
        names = [mode_name] if mode_name is not None else list(self._pending_timeouts)
        return {
            name: self._trigger_timeout(name)
            for name in names
            if name in self._pending_timeouts
        }

    def _trigger_timeout(self, mode_name: str) -> ModeResult:
        self._pending_timeouts.pop(mode_name, None)
        mode = self._modes.get(mode_name)
        if mode is None:
            return ModeResult(consumed=False, status="timeout")
        with telemetry.span(
            name=f"mode_timeout::{mode_name}",
            logger_name="remote_ops.modes",
            component=True,
            metadata={"mode": mode_name},
        ):
            result = mode.handle_timeout()
        return self._after_mode_result(mode, result)


def create_manager(context: ModeContext) -> ModeManager:
    """Manager with every mode registered and default keymaps loaded."""

    manager = ModeManager(context)
    for mode_cls in (NormalMode, InsertMode, VisualMode, LocateMode, ScopeMode):
        manager.register_mode(mode_cls)
    return manager


__all__ = ["ModeManager", "PendingTimeout", "create_manager"]
