"""UI-agnostic adapter that wires the mode manager and workspace into UI callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional, Tuple

from remote_ops.buffer import Position
from remote_ops.config import EngineConfig
from remote_ops.host import HighlightRegion, Workspace
from remote_ops.modes import KeyInput, ModeBus, ModeContext, ModeResult
from remote_ops.modes.mode_manager import ModeManager, create_manager
from remote_ops.operations import RemoteOperationController
from remote_ops.runtime import telemetry

RELAYED_EVENTS = ("locate.changed", "visual.yank", "visual.delete", "visual.change")


def create_default_manager(
    workspace: Workspace, config: Optional[EngineConfig] = None
) -> ModeManager:
    """Controller, every mode and the default keymaps over ``workspace``."""

    bus = ModeBus()
    controller = RemoteOperationController(workspace, config=config, bus=bus)
    context = ModeContext(host=workspace, bus=bus, extras={"remote_controller": controller})
    return create_manager(context)


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(frozen=True, slots=True)
class BufferView:
    """What the UI needs to draw the current buffer."""

    name: str
    text: str
    cursor: Position
    mode: str
    highlights: Tuple[HighlightRegion, ...] = ()


@dataclass(frozen=True, slots=True)
class PanelView:
    lines: Tuple[str, ...]
    cursor_line: int
    width: int
    title: str = ""


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_buffer: Callable[[BufferView], None]
    update_panel: Callable[[Optional[PanelView]], None] = _noop
    update_status: Callable[[str], None] = _noop
    show_locate: Callable[[str], None] = _noop
    handle_event: Callable[[str, object | None], None] = _noop
    log: Callable[[str], None] = _noop


class TextualRemoteAdapter:
    """Bridges key events, bus events and workspace state to a UI surface."""

    def __init__(self, manager: ModeManager, hooks: TextualUIHooks) -> None:
        self.manager = manager
        self.hooks = hooks
        self._notifications_seen = 0
        self._indicator_shown = ""
        self._subscribe_events()
        self.refresh()

    @property
    def workspace(self) -> Workspace:
        return self.manager.context.host  # type: ignore[return-value]

    def handle_textual_key(
        self,
        key: str,
        *,
        text: Optional[str] = None,
        modifiers: Iterable[str] = (),
    ) -> ModeResult:
        """Translate a Textual key event into a KeyInput and dispatch it."""

        normalized = tuple(str(mod).lower() for mod in modifiers)
        self._log("key ->", key=key, text=text, mods=normalized)
        result = self.manager.handle_key(KeyInput(key=key, text=text, modifiers=normalized))
        indicator = self._pending_indicator()
        status = indicator or result.message or result.status
        if status:
            self.hooks.update_status(status)
        self._indicator_shown = indicator
        self.refresh()
        self._log("result <-", status=result.status, message=result.message)
        return result

    def tick(self, elapsed_ms: int) -> int:
        """Advance host timers and key-sequence timeouts; returns fired timers."""

        fired = self.workspace.advance(elapsed_ms)
        timeouts = self.manager.process_timeouts()
        for mode_name, outcome in timeouts.items():
            self.hooks.update_status(f"{mode_name}:{outcome.status}")
        if fired or timeouts:
            self.refresh()
        return fired

    def refresh(self) -> None:
        workspace = self.workspace
        buffer = workspace.current_buffer
        active = self.manager.active_mode
        highlights = tuple(
            region
            for namespace in ("feedback", "scope")
            for region in workspace.highlights(namespace)
            if region.buffer_id == buffer.id
        )
        self.hooks.update_buffer(
            BufferView(
                name=buffer.name or f"[buffer {buffer.id}]",
                text="\n".join(buffer.lines),
                cursor=workspace.cursor,
                mode=active.name if active else workspace.mode,
                highlights=highlights,
            )
        )
        self.hooks.update_panel(self._panel_view())
        state = self.manager.context.extras.get("locate_state")
        self.hooks.show_locate(str(state.get("text", "")) if isinstance(state, dict) else "")
        self._sync_indicator()
        self._flush_notifications()

    def _pending_indicator(self) -> str:
        controller = self.manager.context.extras.get("remote_controller")
        return str(getattr(controller, "indicator", "") or "")

    def _sync_indicator(self) -> None:
        # Pushed on change only; an empty string clears the status line.
        indicator = self._pending_indicator()
        if indicator != self._indicator_shown:
            self._indicator_shown = indicator
            self.hooks.update_status(indicator)

    def _panel_view(self) -> Optional[PanelView]:
        controller = self.manager.context.extras.get("remote_controller")
        session = getattr(controller, "session", None)
        if session is None:
            return None
        return PanelView(
            lines=tuple(session.lines),
            cursor_line=session.cursor_line,
            width=session.width,
            title=f"{session.operation.value} {session.textobj}",
        )

    def _flush_notifications(self) -> None:
        notifications = self.workspace.notifications
        for notification in notifications[self._notifications_seen :]:
            self.hooks.update_status(notification.message)
            self._log("notify ->", level=notification.level, message=notification.message)
        self._notifications_seen = len(notifications)

    def _subscribe_events(self) -> None:
        bus = self.manager.context.bus
        for event in RELAYED_EVENTS:
            bus.subscribe(event, lambda payload, name=event: self._handle_event(name, payload))

    def _handle_event(self, name: str, payload: object | None) -> None:
        self._log("event ->", event=name, payload=payload)
        self.hooks.handle_event(name, payload)
        if name == "locate.changed" and isinstance(payload, str):
            self.hooks.show_locate(payload)

    def _log(self, prefix: str, **fields: object) -> None:
        snapshot: Dict[str, object] = {
            "mode": self.manager.active_mode.name if self.manager.active_mode else "?",
            "cursor": self.workspace.cursor,
        }
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        line = " ".join([prefix, *(f"{key}={value!r}" for key, value in snapshot.items())])
        self.hooks.log(line)
        telemetry.record_event(
            "adapter.trace", level="debug", data={"line": line}, logger_name="remote_ops.adapters"
        )


__all__ = [
    "BufferView",
    "PanelView",
    "TextualRemoteAdapter",
    "TextualUIHooks",
    "create_default_manager",
]
