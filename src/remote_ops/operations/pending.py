"""Deferred-operation state machine driven by the locate input.

``begin`` records the pending intent and asks the caller to open the
locate input. The typed pattern arrives either through ``resume`` or
through the ``locate.*`` events on the mode bus; both resolve the intent
exactly once, after which every subscription is cancelled.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from remote_ops.buffer import RegisterSnapshot
from remote_ops.buffer.registers import SEARCH, UNNAMED
from remote_ops.config import EngineConfig
from remote_ops.errors import HostOperationFailure
from remote_ops.host import EditorHost
from remote_ops.runtime import telemetry
from remote_ops.runtime.events import ModeBus, Subscription
from remote_ops.textobjects import TextObjectRef

from .executor import OperationExecutor
from .models import (
    EntryResult,
    EntryStatus,
    ExecutionResult,
    Operation,
    PendingOperation,
    ReturnTarget,
)
from .smart_search import seed_for
from .sweep import CrossBufferSweep, SearchHit

LOCATE_CHANGED = "locate.changed"
LOCATE_CONFIRM = "locate.confirm"
LOCATE_CANCEL = "locate.cancel"


class PendingState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    RESOLVING = "resolving"
    EXECUTED = "executed"
    ABANDONED = "abandoned"


class DeferredOperationMachine:
    def __init__(
        self,
        host: EditorHost,
        executor: OperationExecutor,
        config: EngineConfig,
        *,
        bus: Optional[ModeBus] = None,
        sweep: Optional[CrossBufferSweep] = None,
    ) -> None:
        self.host = host
        self.executor = executor
        self.config = config
        self.bus = bus
        self.sweep = sweep or CrossBufferSweep(host, config)
        self.state = PendingState.IDLE
        self.outcome: Optional[PendingState] = None
        self.pending: Optional[PendingOperation] = None
        self.captured = ""
        self.indicator = ""
        self._registers: Optional[RegisterSnapshot] = None
        self._checkpoint: Optional[object] = None
        self._subscriptions: List[Subscription] = []
        self._clear_timer: Optional[int] = None
        self._clear_restore = ""

    @property
    def active(self) -> bool:
        return self.state in (PendingState.PENDING, PendingState.RESOLVING)

    def begin(self, operation: Operation, textobj: Optional[TextObjectRef]) -> EntryResult:
        """Queue ``operation`` and return the seed for the locate input."""

        if self.active:
            self.abandon()
        self._flush_clear_highlight()

        host = self.host
        constraint = seed_for(textobj, self.config)
        origin = ReturnTarget(
            buffer_id=host.current_buffer.id,
            position=host.cursor,
            window_id=host.current_window.id,
        )
        self.pending = PendingOperation(
            operation=operation,
            textobj=textobj,
            origin=origin,
            search_suffix=constraint.suffix if constraint else "",
        )
        self.indicator = self.pending.label
        self._registers = host.registers.snapshot(UNNAMED, SEARCH)
        self._checkpoint = host.checkpoint()
        self.captured = constraint.prefix if constraint else ""
        self.state = PendingState.PENDING
        self._subscribe()
        telemetry.record_event(
            "pending.begin",
            data={"operation": self.pending.label, "buffer": origin.buffer_id},
            logger_name="remote_ops.operations",
        )
        return EntryResult(EntryStatus.LOCATE, seed=self.captured)

    def capture(self, text: str) -> None:
        """Track the locate input as it is typed."""

        if self.state is PendingState.PENDING:
            self.captured = text

    def resume(self, pattern: Optional[str] = None) -> Optional[ExecutionResult]:
        """Resolve the pending intent with ``pattern`` (or the captured text)."""

        if self.state is not PendingState.PENDING or self.pending is None:
            return None
        typed = pattern if pattern is not None else self.captured
        if not typed:
            self.abandon()
            return None

        pending = self.pending
        self.state = PendingState.RESOLVING
        search = f"{typed}{pending.search_suffix}"
        with telemetry.span(
            "operations::resume",
            logger_name="remote_ops.operations",
            component="operations",
            metadata={"operation": pending.label, "pattern": search},
        ) as handle:
            try:
                hit = self.sweep.resolve(search, pending.operation, wrap=True)
                if hit is None:
                    handle.add_metadata("found", False)
                    self.abandon(f"Pattern not found: {typed}")
                    return None
                result = self._execute(pending, hit)
            except HostOperationFailure as exc:
                handle.fail(str(exc))
                self.abandon(str(exc))
                return None
            if not result.ok:
                handle.add_metadata("executed", False)
                self.abandon(result.error)
                return result
            self._finalize(pending, result)
            return result

    def abandon(self, message: Optional[str] = None) -> None:
        """Roll back cursor, buffer, registers and highlight; notify on ``message``."""

        if not self.active or self.pending is None:
            return
        host = self.host
        if self._checkpoint is not None:
            host.restore(self._checkpoint)
        if self._registers is not None:
            host.registers.restore(self._registers)
        host.nohlsearch()
        if message:
            host.notify(message, "warn")
        telemetry.record_event(
            "pending.abandoned",
            level="warning" if message else "info",
            data={"operation": self.pending.label, "reason": message or "cancelled"},
            logger_name="remote_ops.operations",
        )
        self._teardown(PendingState.ABANDONED)

    def cancel(self) -> None:
        self.abandon()

    def _execute(self, pending: PendingOperation, hit: SearchHit) -> ExecutionResult:
        if pending.operation.returns_to_origin:
            pending.return_target = pending.origin
        if pending.textobj is None:
            return self.executor.execute_line(pending.operation)
        return self.executor.execute(
            pending.operation, pending.textobj, position=hit.position
        )

    def _finalize(self, pending: PendingOperation, result: ExecutionResult) -> None:
        host = self.host
        if pending.return_target is not None:
            self.executor.return_to(pending.return_target)
        if self.config.clear_highlight and pending.operation.clears_highlight:
            saved = self._registers.values.get(SEARCH) if self._registers else None
            previous = saved.text if saved is not None else ""
            self._schedule_clear_highlight(previous)
        telemetry.record_event(
            "pending.executed",
            data={
                "operation": pending.label,
                "buffer": result.buffer_id,
                "remote": result.buffer_id != pending.origin.buffer_id,
            },
            logger_name="remote_ops.operations",
        )
        self._teardown(PendingState.EXECUTED)

    def _schedule_clear_highlight(self, previous: str) -> None:
        self._clear_restore = previous
        self._clear_timer = self.host.defer(
            self.config.clear_highlight_delay, self._clear_highlight
        )

    def _clear_highlight(self) -> None:
        self._clear_timer = None
        self.host.registers.set_last_search(self._clear_restore)
        self.host.nohlsearch()

    def _flush_clear_highlight(self) -> None:
        if self._clear_timer is None:
            return
        self.host.cancel_timer(self._clear_timer)
        self._clear_highlight()

    def _subscribe(self) -> None:
        self._unsubscribe()
        if self.bus is None:
            return
        self._subscriptions = [
            self.bus.subscribe(LOCATE_CHANGED, self._on_changed),
            self.bus.subscribe(LOCATE_CONFIRM, self._on_confirm),
            self.bus.subscribe(LOCATE_CANCEL, self._on_cancel),
        ]

    def _unsubscribe(self) -> None:
        for subscription in self._subscriptions:
            subscription.cancel()
        self._subscriptions = []

    def _on_changed(self, payload: object) -> None:
        if isinstance(payload, str):
            self.capture(payload)

    def _on_confirm(self, payload: object) -> None:
        self.resume(payload if isinstance(payload, str) else None)

    def _on_cancel(self, payload: object) -> None:
        self.cancel()

    def _teardown(self, outcome: Optional[PendingState] = None) -> None:
        self._unsubscribe()
        self.pending = None
        self.captured = ""
        self.indicator = ""
        self._registers = None
        self._checkpoint = None
        self.outcome = outcome
        self.state = PendingState.IDLE


__all__ = [
    "DeferredOperationMachine",
    "PendingState",
    "LOCATE_CHANGED",
    "LOCATE_CANCEL",
    "LOCATE_CONFIRM",
]
