"""Helper utilities for keymap-driven modes."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, MutableMapping, Optional, cast

from remote_ops.runtime import telemetry

from .base_mode import KeyInput, Mode, ModeContext, ModeResult

if TYPE_CHECKING:  # pragma: no cover
    from remote_ops.keymaps.resolver import KeymapResolver, ResolutionMatch
    from remote_ops.operations import RemoteOperationController

HOST_MODES = {"normal": "normal", "insert": "insert", "visual": "visual", "visual_line": "visual"}


def key_to_token(key: KeyInput) -> str:
    modifiers = sorted({m.strip().lower() for m in key.modifiers if m.strip()})
    if modifiers:
        return "+".join((*modifiers, key.key))
    return key.key


def require_keymap_resolver(context: ModeContext) -> "KeymapResolver":
    resolver = context.extras.get("keymap_resolver")
    if resolver is None:
        raise RuntimeError("ModeContext.extras missing 'keymap_resolver'")
    return cast("KeymapResolver", resolver)


def require_controller(context: ModeContext) -> "RemoteOperationController":
    controller = context.extras.get("remote_controller")
    if controller is None:
        raise RuntimeError("ModeContext.extras missing 'remote_controller'")
    return cast("RemoteOperationController", controller)


def host_mode(context: ModeContext) -> str:
    """The engine mode matching the host's current editing mode."""

    return HOST_MODES.get(context.host.mode, "normal")


def locate_state(context: ModeContext) -> MutableMapping[str, object]:
    return cast(
        MutableMapping[str, object], context.extras.setdefault("locate_state", {})
    )


class KeymapMode(Mode):
    """Mode that accumulates key tokens and resolves them against its keymap.

    Unresolved keys are offered to :meth:`handle_unmapped`.
    """

    def __init__(self, context: ModeContext, *, default_pending_timeout_ms: int = 1000) -> None:
        super().__init__(context)
        self.logger = telemetry.get_logger(f"remote_ops.modes.{self.name}")
        self._resolver = require_keymap_resolver(context)
        self._pending: List[str] = []
        self._default_timeout_ms = default_pending_timeout_ms

    def on_exit(self, next_mode: Optional[str]) -> None:
        del next_mode
        self._pending.clear()

    def handle_key(self, key: KeyInput) -> ModeResult:
        self._pending.append(key_to_token(key))
        result = self._resolver.resolve(self.name, tuple(self._pending))

        if result.status == "match" and result.match:
            self._pending.clear()
            return self._execute_match(result.match)

        if result.status == "pending":
            return ModeResult(
                consumed=True,
                status="pending",
                message="awaiting_sequence",
                timeout_ms=result.timeout_ms or self._default_timeout_ms,
            )

        partial = len(self._pending) > 1
        self._pending.clear()
        if partial:
            return ModeResult(consumed=True, status="miss", message="unmapped_sequence")
        return self.handle_unmapped(key)

    def handle_unmapped(self, key: KeyInput) -> ModeResult:
        del key
        return ModeResult(consumed=False)

    def handle_timeout(self) -> ModeResult:
        if not self._pending:
            return ModeResult(consumed=False, status="timeout")
        self._pending.clear()
        return ModeResult(consumed=False, status="timeout", message="pending_timeout")

    @property
    def pending_tokens(self) -> tuple[str, ...]:
        return tuple(self._pending)

    def _execute_match(self, match: ResolutionMatch) -> ModeResult:
        with telemetry.span(
            "keymaps::execute",
            logger_name="remote_ops.keymaps",
            component="keymaps",
            metadata={"binding_id": match.binding.id, "action": match.action.id},
        ):
            outcome = match.action(self.context, match)

        if isinstance(outcome, ModeResult):
            return outcome
        return ModeResult(consumed=True)


__all__ = [
    "HOST_MODES",
    "KeymapMode",
    "key_to_token",
    "require_keymap_resolver",
    "require_controller",
    "host_mode",
    "locate_state",
]
