"""Applies yank/delete/change/visual to resolved spans and restores position."""

from __future__ import annotations

from typing import Optional

from remote_ops.buffer import (
    Buffer,
    Position,
    clamp_position,
    offset_for_position,
    position_from_offset,
)
from remote_ops.buffer.registers import UNNAMED
from remote_ops.config import EngineConfig
from remote_ops.errors import BufferValidationError, HostOperationFailure
from remote_ops.host import EditorHost
from remote_ops.runtime import telemetry
from remote_ops.textobjects import Instance, KindBounds, KindRegistry, TextObjectRef

from .models import ExecutionResult, Operation, ReturnTarget

FEEDBACK_NAMESPACE = "feedback"


class OperationExecutor:
    def __init__(
        self, host: EditorHost, registry: KindRegistry, config: Optional[EngineConfig] = None
    ) -> None:
        self.host = host
        self.registry = registry
        self.config = config or registry.config

    def execute(
        self,
        operation: Operation,
        textobj: TextObjectRef,
        *,
        instance: Optional[Instance] = None,
        position: Optional[Position] = None,
    ) -> ExecutionResult:
        """Resolve ``textobj`` (at ``instance`` or ``position``) and operate on it.

        Host failures come back as ``ExecutionResult(ok=False)``; an
        unresolvable span is a no-op failure that leaves the buffer untouched.
        """

        with telemetry.span(
            "operations::execute",
            logger_name="remote_ops.operations",
            component="operations",
            metadata={"operation": operation.value, "textobj": str(textobj)},
        ) as handle:
            try:
                kind = self.registry.get(textobj.key)
                buffer = self.host.current_buffer
                at = position or (instance.start if instance else self.host.cursor)
                bounds = kind.select(buffer, at, textobj.variant, instance)
                if bounds is None:
                    handle.add_metadata("resolved", False)
                    return ExecutionResult.failure(
                        operation, f"Could not resolve {textobj} at line {at[0]}"
                    )
                if kind.is_motion and not bounds.linewise:
                    bounds = KindBounds(
                        start=bounds.start, end=(bounds.end[0], bounds.end[1] + 1)
                    )
                elif kind.linewise and not bounds.linewise:
                    bounds = KindBounds.lines(bounds.start[0], bounds.end[0])
                return self.apply(operation, buffer, bounds)
            except (HostOperationFailure, BufferValidationError) as exc:
                handle.fail(str(exc))
                return ExecutionResult.failure(operation, str(exc))

    def execute_line(self, operation: Operation) -> ExecutionResult:
        """Operate on the whole line under the cursor; no span lookup."""

        line = self.host.cursor[0]
        with telemetry.span(
            "operations::execute_line",
            logger_name="remote_ops.operations",
            component="operations",
            metadata={"operation": operation.value, "line": line},
        ) as handle:
            try:
                return self.apply(
                    operation, self.host.current_buffer, KindBounds.lines(line, line)
                )
            except (HostOperationFailure, BufferValidationError) as exc:
                handle.fail(str(exc))
                return ExecutionResult.failure(operation, str(exc))

    def apply(self, operation: Operation, buffer: Buffer, bounds: KindBounds) -> ExecutionResult:
        verb = operation.base
        if operation.linewise_only and not bounds.linewise:
            bounds = KindBounds.lines(bounds.start[0], bounds.end[0])
        if bounds.linewise:
            text = self._apply_lines(verb, buffer, bounds.start[0], bounds.end[0])
        else:
            text = self._apply_chars(verb, buffer, bounds.start, bounds.end)
        telemetry.record_event(
            "operations.applied",
            level="debug",
            data={"operation": operation.value, "buffer": buffer.id, "chars": len(text)},
            logger_name="remote_ops.operations",
        )
        return ExecutionResult(
            ok=True, operation=operation, bounds=bounds, text=text, buffer_id=buffer.id
        )

    def _apply_lines(self, verb: Operation, buffer: Buffer, first: int, last: int) -> str:
        lines = buffer.get_lines(first - 1, last)
        text = "\n".join(lines) + "\n"
        region = ((first, 0), (last, len(lines[-1])))
        if verb is Operation.VISUAL:
            self.host.set_cursor((first, 0))
            self.host.start_visual(
                (first, 0), (last, max(0, len(lines[-1]) - 1)), linewise=True
            )
            return text

        # The register is written only after the buffer accepted the edit.
        if verb is Operation.DELETE:
            buffer.set_lines(first - 1, last, [])
        elif verb is Operation.CHANGE:
            buffer.set_lines(first - 1, last, [""])
        self.host.registers.yank_to(UNNAMED, text, register_type="linewise")

        if verb is Operation.YANK:
            self._feedback(buffer, *region, linewise=True)
            self.host.set_cursor((first, 0))
        elif verb is Operation.DELETE:
            self._feedback(buffer, *_clamped(buffer, *region), linewise=True)
            self.host.set_cursor((min(first, buffer.line_count), 0))
        else:
            self.host.set_cursor((first, 0))
            self.host.set_mode("insert")
        return text

    def _apply_chars(
        self, verb: Operation, buffer: Buffer, start: Position, end: Position
    ) -> str:
        text = buffer.get_text(start, end)
        if verb is Operation.VISUAL:
            self.host.set_cursor(start)
            self.host.start_visual(start, _last_position(buffer, start, end))
            return text

        if verb in (Operation.DELETE, Operation.CHANGE):
            buffer.delete_range(start, end)
        self.host.registers.yank_to(UNNAMED, text)
        self.host.set_cursor(start)
        if verb is Operation.YANK:
            self._feedback(buffer, start, end)
        elif verb is Operation.DELETE:
            self._feedback(buffer, *_clamped(buffer, start, end))
        elif verb is Operation.CHANGE:
            self.host.set_mode("insert")
        return text

    def _feedback(
        self, buffer: Buffer, start: Position, end: Position, *, linewise: bool = False
    ) -> None:
        duration = self.config.visual_feedback_duration
        if duration <= 0:
            return
        self.host.clear_highlights(FEEDBACK_NAMESPACE, buffer.id)
        self.host.add_highlight(FEEDBACK_NAMESPACE, buffer.id, start, end, linewise=linewise)
        self.host.defer(
            duration, lambda: self.host.clear_highlights(FEEDBACK_NAMESPACE, buffer.id)
        )

    def return_to(self, target: ReturnTarget) -> None:
        """Bring the cursor back to ``target``'s buffer and position."""

        host = self.host
        if target.window_id is not None:
            try:
                host.focus_window(target.window_id)
            except HostOperationFailure:
                window = host.find_window_for_buffer(target.buffer_id)
                if window is not None:
                    host.focus_window(window.id)
        if host.current_buffer.id != target.buffer_id:
            host.set_current_buffer(target.buffer_id)
        host.set_cursor(target.position)


def _clamped(buffer: Buffer, start: Position, end: Position) -> tuple[Position, Position]:
    # A deleted span is marked where it used to be, inside what is left.
    lines = buffer.lines
    return clamp_position(lines, start), clamp_position(lines, end)


def _last_position(buffer: Buffer, start: Position, end: Position) -> Position:
    if end <= start:
        return start
    lines = buffer.lines
    return position_from_offset(lines, offset_for_position(lines, end) - 1)


__all__ = ["OperationExecutor", "FEEDBACK_NAMESPACE"]
