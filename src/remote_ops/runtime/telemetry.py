"""Structured logging for the engine on top of telelog.

Every layer logs through this module instead of holding its own telelog
objects. ``configure`` swaps the active configuration (explicitly, through a
named preset, or from ``REMOTE_OPS_*`` environment variables); ``span`` wraps
scans, executions and session transitions so they show up as profiled
components; ``record_event`` emits one-off ``event::<name>`` records.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, MutableMapping, Optional, Tuple, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "REMOTE_OPS_"
_TRUTHY = {"1", "true", "yes", "on"}

_LOGGERS: MutableMapping[str, Any] = {}
_CONFIG: Optional[Any] = None


@dataclass(frozen=True, slots=True)
class TelemetrySettings:
    """Knobs read from ``REMOTE_OPS_*``; unset variables keep the defaults."""

    level: str = "INFO"
    console: bool = True
    color: bool = True
    json: bool = False
    log_file: Optional[str] = None
    logger_name: str = "remote_ops"

    @classmethod
    def from_env(cls, environ: Optional[MutableMapping[str, str]] = None) -> "TelemetrySettings":
        env = os.environ if environ is None else environ

        def flag(name: str) -> Optional[bool]:
            raw = env.get(ENV_PREFIX + name)
            return None if raw is None else raw.strip().lower() in _TRUTHY

        return cls(
            level=env.get(ENV_PREFIX + "LOG_LEVEL", "INFO").upper(),
            console=not flag("DISABLE_CONSOLE"),
            color=not flag("NO_COLOR"),
            json=bool(flag("LOG_JSON")),
            log_file=env.get(ENV_PREFIX + "LOG_FILE") or None,
            logger_name=env.get(ENV_PREFIX + "LOGGER", "remote_ops"),
        )

    def build(self) -> Any:
        config = tl.Config()
        config.with_min_level(self.level)
        config.with_console_output(self.console)
        if self.console:
            config.with_colored_output(self.color)
        if self.json:
            config.with_json_format(True)
        if self.log_file:
            config.with_file_output(self.log_file)
        return config


SETTINGS = TelemetrySettings.from_env()


def _development() -> Any:
    return TelemetrySettings(level="DEBUG", log_file=SETTINGS.log_file).build()


def _quiet() -> Any:
    # Front ends with their own status line only surface warnings.
    return TelemetrySettings(level="WARNING", console=False).build()


def _production() -> Any:
    config = TelemetrySettings(
        level="INFO", console=False, log_file=SETTINGS.log_file or "remote_ops.log"
    ).build()
    config.with_buffering(True)
    return config


PRESETS: Dict[str, Callable[[], Any]] = {
    "development": _development,
    "quiet": _quiet,
    "production": _production,
}


def configure(*, config: Optional[Any] = None, preset: Optional[str] = None) -> None:
    """Install a telelog configuration and drop cached loggers.

    Pass either a ready ``telelog.Config`` or a preset name; with neither the
    configuration comes from the environment.
    """

    global _CONFIG
    if config is not None and preset:
        raise ValueError("Provide either `config` or `preset`, not both.")
    if preset:
        builder = PRESETS.get(preset.lower())
        if builder is None:
            raise ValueError(f"Unknown preset '{preset}'.")
        config = builder()
    elif config is None:
        config = SETTINGS.build()
    config.with_profiling(True)
    _CONFIG = config
    _LOGGERS.clear()


def get_logger(name: Optional[str] = None) -> Any:
    """Cached ``telelog.Logger`` for ``name`` under the active configuration."""

    if _CONFIG is None:
        configure()
    key = name or SETTINGS.logger_name
    logger_ = _LOGGERS.get(key)
    if logger_ is None:
        logger_ = _LOGGERS[key] = tl.Logger.with_config(key, _CONFIG)
    return logger_


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list, tuple, set)):
        return repr(value)
    return str(value)


def _emit(logger_: Any, level: str, message: str, payload: Dict[str, Any]) -> None:
    name = level.lower()
    structured = getattr(logger_, f"{name}_with", None)
    if structured is not None:
        pairs: List[Tuple[str, str]] = [(str(k), _text(v)) for k, v in payload.items()]
        structured(message, pairs)
        return
    plain = getattr(logger_, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {payload}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Log ``event::<name>`` with ``data`` attached as key/value pairs."""

    _emit(get_logger(logger_name), level, f"event::{name}", {"event": name, **(data or {})})


@dataclass
class SpanHandle:
    """Yielded by :func:`span`; lets the block attach results to its record."""

    logger: Any
    name: str
    component: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _text(value)

    def fail(self, reason: str) -> None:
        payload: Dict[str, Any] = {"span": self.name, **self.metadata, "reason": reason}
        if self.component:
            payload["component"] = self.component
        _emit(self.logger, "error", "span::fail", payload)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile the block as ``name``.

    ``component=True`` tracks the block as a component called ``name``; a
    string picks another component name. ``metadata`` becomes logger context
    while the block runs. An exception escaping the block is logged as a
    ``span::fail`` record and re-raised.
    """

    log = get_logger(logger_name)
    component_name = name if component is True else (component or None)
    context = {key: _text(value) for key, value in (metadata or {}).items()}
    handle = SpanHandle(logger=log, name=name, component=component_name, metadata=dict(context))

    with ExitStack() as stack:
        for key, value in context.items():
            log.add_context(key, value)
            stack.callback(log.remove_context, key)
        if component_name:
            stack.enter_context(log.track_component(component_name))
        stack.enter_context(log.profile(name))
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise


configure()
logger = get_logger()

__all__ = [
    "PRESETS",
    "SpanHandle",
    "TelemetrySettings",
    "configure",
    "get_logger",
    "logger",
    "record_event",
    "span",
]
