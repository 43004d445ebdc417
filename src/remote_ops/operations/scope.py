"""Scoped selection: enumerate every instance of a kind and pick one from a panel."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from remote_ops.config import EngineConfig
from remote_ops.buffer import Position
from remote_ops.errors import HostOperationFailure, NoInstancesFound
from remote_ops.host import EditorHost, search_forward
from remote_ops.runtime import telemetry
from remote_ops.textobjects import Instance, KindRegistry, TextObjectRef

from .executor import OperationExecutor
from .models import EntryResult, EntryStatus, ExecutionResult, Operation, ReturnTarget

SCOPE_NAMESPACE = "scope"


@dataclass(slots=True)
class ScopeSession:
    """State of one open panel; panel lines are 1-based."""

    operation: Operation
    textobj: TextObjectRef
    source_buffer_id: int
    source_window_id: int
    source_cursor: Position
    source_topline: int
    instances: List[Instance]
    lines: List[str] = field(default_factory=list)
    line_index: Dict[int, int] = field(default_factory=dict)
    width: int = 0
    cursor_line: int = 1

    @property
    def source(self) -> ReturnTarget:
        return ReturnTarget(self.source_buffer_id, self.source_cursor, self.source_window_id)


class ScopeSelector:
    """Owns the single scope panel slot and runs the operation on selection."""

    def __init__(
        self,
        host: EditorHost,
        registry: KindRegistry,
        executor: OperationExecutor,
        config: EngineConfig,
    ) -> None:
        self.host = host
        self.registry = registry
        self.executor = executor
        self.config = config
        self.session: Optional[ScopeSession] = None

    @property
    def active(self) -> bool:
        return self.session is not None

    def open(self, operation: Operation, textobj: TextObjectRef) -> EntryResult:
        if self.session is not None:
            self.cancel()

        host = self.host
        buffer = host.current_buffer
        with telemetry.span(
            "scope::open",
            logger_name="remote_ops.scope",
            component="scope",
            metadata={"operation": operation.value, "textobj": str(textobj)},
        ) as handle:
            instances = self.registry.find_text_objects(
                textobj.key, buffer, registers=host.registers
            )
            if not instances:
                message = str(NoInstancesFound(str(textobj)))
                handle.add_metadata("instances", 0)
                host.notify(message, "info")
                return EntryResult(EntryStatus.FAILED, message=message)

            session = ScopeSession(
                operation=operation,
                textobj=textobj,
                source_buffer_id=buffer.id,
                source_window_id=host.current_window.id,
                source_cursor=host.cursor,
                source_topline=host.current_window.topline,
                instances=instances,
            )
            self._render(session)
            session.cursor_line = self._initial_line(session)
            self.session = session
            handle.add_metadata("instances", len(instances))
            telemetry.record_event(
                "scope.open",
                data={"textobj": str(textobj), "instances": len(instances), "width": session.width},
                logger_name="remote_ops.scope",
            )
            self.update_preview()
            return EntryResult(EntryStatus.HANDLED)

    def _render(self, session: ScopeSession) -> None:
        kind = self.registry.get(session.textobj.key)
        lines: List[str] = []
        index: Dict[int, int] = {}
        for position, instance in enumerate(session.instances):
            rendered = kind.format(instance) or [""]
            first = len(lines) + 1
            lines.extend(rendered)
            instance.display_range = (first, len(lines))
            for line in range(first, len(lines) + 1):
                index[line] = position
        session.lines = lines
        session.line_index = index
        session.width = self.panel_width(lines)

    def panel_width(self, lines: List[str]) -> int:
        scope = self.config.scope
        longest = max((len(line) for line in lines), default=0)
        return min(scope.window_width, max(scope.min_width, longest + scope.padding))

    def _initial_line(self, session: ScopeSession) -> int:
        line = session.source_cursor[0]
        below = [item for item in session.instances if item.start_line >= line]
        if below:
            target = min(below, key=lambda item: item.start_line - line)
        else:
            target = min(session.instances, key=lambda item: line - item.start_line)
        return target.display_range[0] if target.display_range else 1

    def current_instance(self) -> Optional[Instance]:
        if self.session is None:
            return None
        return self.instance_at(self.session.cursor_line)

    def instance_at(self, line: int) -> Optional[Instance]:
        """Instance rendered on panel ``line``; misses are ``None``."""

        session = self.session
        if session is None:
            return None
        position = session.line_index.get(line)
        if position is None or position >= len(session.instances):
            return None
        return session.instances[position]

    def move_line(self, delta: int) -> None:
        session = self.session
        if session is None:
            return
        session.cursor_line = max(1, min(len(session.lines), session.cursor_line + delta))
        self.update_preview()

    def next_instance(self) -> None:
        self._step(1)

    def previous_instance(self) -> None:
        self._step(-1)

    def _step(self, direction: int) -> None:
        session = self.session
        if session is None:
            return
        position = session.line_index.get(session.cursor_line, 0)
        target = session.instances[(position + direction) % len(session.instances)]
        if target.display_range:
            session.cursor_line = target.display_range[0]
        self.update_preview()

    def update_preview(self) -> None:
        """Highlight the current instance (padded by ``preview_context`` lines) and reveal it."""

        session = self.session
        instance = self.current_instance()
        if session is None or instance is None:
            return
        host = self.host
        buffer = host.buffer(session.source_buffer_id)
        host.clear_highlights(SCOPE_NAMESPACE, buffer.id)
        context = self.config.scope.preview_context
        first = max(1, instance.start_line - context)
        last = min(instance.end_line + context, buffer.line_count)
        host.add_highlight(
            SCOPE_NAMESPACE,
            buffer.id,
            (first, 0),
            (last, len(buffer.get_line(last))),
            linewise=True,
        )
        host.set_cursor(instance.start)
        host.center_cursor()

    def search_in_panel(self, pattern: str) -> Optional[ExecutionResult]:
        """Jump to the next panel line matching ``pattern`` and select it."""

        session = self.session
        if session is None or not pattern:
            return None
        hit = search_forward(session.lines, pattern, (session.cursor_line, 0), wrap=True)
        if hit is None:
            self.host.notify(f"Pattern not found: {pattern}", "warn")
            return None
        session.cursor_line = hit[0]
        return self.select()

    def select(self, line: Optional[int] = None) -> Optional[ExecutionResult]:
        session = self.session
        if session is None:
            return None
        target_line = line if line is not None else session.cursor_line
        instance = self.instance_at(target_line)
        if instance is None:
            return None

        self._teardown()
        with telemetry.span(
            "scope::select",
            logger_name="remote_ops.scope",
            component="scope",
            metadata={"operation": session.operation.value, "line": instance.start_line},
        ) as handle:
            result = self.executor.execute(
                session.operation, session.textobj, instance=instance
            )
            if not result.ok:
                handle.add_metadata("executed", False)
                self.executor.return_to(session.source)
                self.host.notify(result.error or "Operation failed", "warn")
            elif session.operation.returns_to_origin:
                self.executor.return_to(session.source)
            telemetry.record_event(
                "scope.select",
                data={
                    "textobj": str(session.textobj),
                    "line": instance.start_line,
                    "ok": result.ok,
                },
                logger_name="remote_ops.scope",
            )
            return result

    def cancel(self) -> None:
        """Close the panel and give focus back to the source window."""

        session = self.session
        if session is None:
            return
        self._teardown()
        try:
            self.host.focus_window(session.source_window_id)
        except HostOperationFailure as exc:
            telemetry.record_event(
                "scope.focus_failed",
                level="warning",
                data={"window": session.source_window_id, "error": str(exc)},
                logger_name="remote_ops.scope",
            )
        telemetry.record_event(
            "scope.cancel",
            data={"textobj": str(session.textobj)},
            logger_name="remote_ops.scope",
        )

    def _teardown(self) -> None:
        session = self.session
        if session is None:
            return
        self.host.clear_highlights(SCOPE_NAMESPACE, session.source_buffer_id)
        self.session = None


__all__ = ["ScopeSelector", "ScopeSession", "SCOPE_NAMESPACE"]
