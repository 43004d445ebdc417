"""Entry points that route an operator request to scope selection or locate."""

from __future__ import annotations

from typing import Optional

from remote_ops.config import EngineConfig
from remote_ops.host import EditorHost
from remote_ops.runtime import telemetry
from remote_ops.runtime.events import ModeBus
from remote_ops.textobjects import KindRegistry, TextObjectRef

from .executor import OperationExecutor
from .models import EntryResult, EntryStatus, ExecutionResult, Operation
from .pending import DeferredOperationMachine
from .scope import ScopeSelector
from .sweep import CrossBufferSweep


class RemoteOperationController:
    """Owns the single pending-operation slot and the single scope panel.

    Each operator entry point answers with an :class:`EntryResult`: either
    the caller should open the locate input (seeded with ``seed``) and later
    call :meth:`resume`, or a scope panel took over.
    """

    def __init__(
        self,
        host: EditorHost,
        *,
        config: Optional[EngineConfig] = None,
        registry: Optional[KindRegistry] = None,
        bus: Optional[ModeBus] = None,
    ) -> None:
        self.host = host
        self.config = config or (registry.config if registry else EngineConfig())
        self.registry = registry or KindRegistry(self.config)
        self.bus = bus
        if self.config.scope.enabled and self.config.cross_buffer.enabled:
            telemetry.record_event(
                "controller.scope_disabled",
                level="warning",
                data={"reason": "cross-buffer search is enabled"},
                logger_name="remote_ops.operations",
            )
        self.executor = OperationExecutor(host, self.registry, self.config)
        self.machine = DeferredOperationMachine(
            host,
            self.executor,
            self.config,
            bus=bus,
            sweep=CrossBufferSweep(host, self.config),
        )
        self.scope = ScopeSelector(host, self.registry, self.executor, self.config)

    def yank(self, textobj: str) -> EntryResult:
        return self.start(Operation.YANK, textobj)

    def delete(self, textobj: str) -> EntryResult:
        return self.start(Operation.DELETE, textobj)

    def change(self, textobj: str) -> EntryResult:
        return self.start(Operation.CHANGE, textobj)

    def visual(self, textobj: str) -> EntryResult:
        return self.start(Operation.VISUAL, textobj)

    def yank_line(self) -> EntryResult:
        return self.start(Operation.YANKLINE)

    def delete_line(self) -> EntryResult:
        return self.start(Operation.DELETELINE)

    def change_line(self) -> EntryResult:
        return self.start(Operation.CHANGELINE)

    def visual_line(self) -> EntryResult:
        return self.start(Operation.VISUALLINE)

    def start(self, operation: Operation, textobj: Optional[str] = None) -> EntryResult:
        if operation.linewise_only:
            self.scope.cancel()
            return self.machine.begin(operation, None)

        try:
            ref = TextObjectRef.parse(textobj or "")
        except ValueError as exc:
            return self._reject(str(exc))
        if ref.key not in self.registry:
            return self._reject(f"Unknown text object '{ref}'")
        kind = self.registry.get(ref.key)
        if ref.variant is None and not kind.is_motion:
            return self._reject(f"Text object '{ref}' needs an i or a variant")
        if ref.variant is not None and kind.is_motion:
            return self._reject(f"'{ref.key}' is a motion")

        if self.registry.is_scoped(ref.key):
            self.machine.cancel()
            return self.scope.open(operation, ref)
        self.scope.cancel()
        return self.machine.begin(operation, ref)

    def resume(self, pattern: Optional[str] = None) -> Optional[ExecutionResult]:
        """Resolve the pending operation once the locate pattern is confirmed."""

        return self.machine.resume(pattern)

    def cancel(self) -> None:
        self.machine.cancel()
        self.scope.cancel()

    @property
    def pending(self):
        return self.machine.pending

    @property
    def session(self):
        return self.scope.session

    @property
    def indicator(self) -> str:
        """``operation[textobj]`` while an operation waits for its pattern, else empty."""

        return self.machine.indicator

    def _reject(self, message: str) -> EntryResult:
        self.host.notify(message, "error")
        return EntryResult(EntryStatus.FAILED, message=message)


__all__ = ["RemoteOperationController"]
