"""Forward search that falls back to the other listed buffers on a local miss."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from remote_ops.buffer import Buffer, Position
from remote_ops.config import EngineConfig
from remote_ops.host import EditorHost
from remote_ops.runtime import telemetry

from .models import Operation


@dataclass(frozen=True, slots=True)
class SearchHit:
    buffer_id: int
    position: Position
    remote: bool = False
    window_id: Optional[int] = None


class CrossBufferSweep:
    """Resolves a locate pattern locally first, then buffer by buffer.

    Each failed probe restores the host checkpoint taken before it, so the
    window layout is left exactly as found.
    """

    def __init__(self, host: EditorHost, config: EngineConfig) -> None:
        self.host = host
        self.config = config

    def resolve(
        self, pattern: str, operation: Operation, *, wrap: bool = True
    ) -> Optional[SearchHit]:
        with telemetry.span(
            "operations::resolve",
            logger_name="remote_ops.operations",
            component="operations",
            metadata={"pattern": pattern, "operation": operation.value},
        ) as handle:
            origin = self.host.current_buffer.id
            hit = self.host.search(pattern, accept_at_cursor=True, wrap=wrap)
            if hit is not None:
                handle.add_metadata("scope", "local")
                return SearchHit(origin, hit, window_id=self.host.current_window.id)
            if not self.config.cross_buffer.enabled:
                handle.add_metadata("scope", "miss")
                return None
            remote = self.sweep(pattern, operation, skip=origin)
            handle.add_metadata("scope", "remote" if remote else "miss")
            return remote

    def sweep(self, pattern: str, operation: Operation, *, skip: int) -> Optional[SearchHit]:
        """Probe each eligible buffer in list order; first hit wins."""

        for buffer in self.host.list_buffers():
            if not self._eligible(buffer, skip):
                continue
            checkpoint = self.host.checkpoint()
            window_id = self._enter(buffer, operation)
            self.host.set_cursor((1, 0))
            hit = self.host.search(pattern, accept_at_cursor=True, wrap=False, record=False)
            if hit is not None:
                telemetry.record_event(
                    "sweep.hit",
                    data={"buffer": buffer.id, "line": hit[0], "col": hit[1]},
                    logger_name="remote_ops.operations",
                )
                return SearchHit(buffer.id, hit, remote=True, window_id=window_id)
            self.host.restore(checkpoint)
            telemetry.record_event(
                "sweep.miss",
                level="debug",
                data={"buffer": buffer.id},
                logger_name="remote_ops.operations",
            )
        return None

    def _eligible(self, buffer: Buffer, skip: int) -> bool:
        if buffer.id == skip or not buffer.valid or not buffer.loaded:
            return False
        if self.config.cross_buffer.include_hidden:
            return True
        return buffer.id in self.host.visible_buffer_ids()

    def _enter(self, buffer: Buffer, operation: Operation) -> int:
        if operation.opens_view:
            window = self.host.find_window_for_buffer(buffer.id)
            if window is None:
                window = self.host.split(buffer.id)
            else:
                self.host.focus_window(window.id)
            return window.id
        self.host.set_current_buffer(buffer.id)
        return self.host.current_window.id


__all__ = ["CrossBufferSweep", "SearchHit"]
