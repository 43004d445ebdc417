"""Engine configuration: frozen dataclasses, deep-merge loading and validation."""

from __future__ import annotations

import tomllib
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from remote_ops.errors import ConfigError

DEFAULT_CONFIG_NAME = "remote_ops.toml"
DEFAULT_SCOPED_TEXT_OBJECTS: Tuple[str, ...] = (
    '"', "'", "`", "(", ")", "[", "]", "{", "}", "<", ">", "b", "B", "t",
)
DEFAULT_CUSTOM_SCOPED_TEXT_OBJECTS: Tuple[str, ...] = ("m", "h", "L")


@dataclass(frozen=True, slots=True)
class CrossBufferConfig:
    enabled: bool = False
    include_hidden: bool = False


@dataclass(frozen=True, slots=True)
class ScopeConfig:
    enabled: bool = False
    scoped_text_objects: Tuple[str, ...] = DEFAULT_SCOPED_TEXT_OBJECTS
    custom_scoped_text_objects: Tuple[str, ...] = DEFAULT_CUSTOM_SCOPED_TEXT_OBJECTS
    window_width: int = 60
    min_width: int = 40
    padding: int = 5
    preview_context: int = 0


@dataclass(frozen=True, slots=True)
class EngineConfig:
    prefix: str = ","
    visual_feedback_duration: int = 150
    clear_highlight: bool = True
    clear_highlight_delay: int = 500
    smart_highlighting: bool = False
    cross_buffer: CrossBufferConfig = field(default_factory=CrossBufferConfig)
    scope: ScopeConfig = field(default_factory=ScopeConfig)
    excluded_text_objects: Tuple[str, ...] = ()

    @property
    def scope_active(self) -> bool:
        """Scoped selection never runs alongside cross-buffer search."""

        return self.scope.enabled and not self.cross_buffer.enabled

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_config(overrides: Optional[Mapping[str, Any]] = None) -> EngineConfig:
    """Deep-merge ``overrides`` over the defaults and validate the result."""

    merged = _deep_merge(EngineConfig().to_dict(), _normalize(dict(overrides or {})))
    _check_keys(merged, EngineConfig, "")
    cross = merged["cross_buffer"]
    scope = merged["scope"]
    _check_keys(cross, CrossBufferConfig, "cross_buffer")
    _check_keys(scope, ScopeConfig, "scope")

    config = EngineConfig(
        prefix=_string(merged, "prefix", ""),
        visual_feedback_duration=_integer(merged, "visual_feedback_duration", "", 0, 1000),
        clear_highlight=_boolean(merged, "clear_highlight", ""),
        clear_highlight_delay=_integer(merged, "clear_highlight_delay", "", 0, 5000),
        smart_highlighting=_boolean(merged, "smart_highlighting", ""),
        cross_buffer=CrossBufferConfig(
            enabled=_boolean(cross, "enabled", "cross_buffer"),
            include_hidden=_boolean(cross, "include_hidden", "cross_buffer"),
        ),
        scope=ScopeConfig(
            enabled=_boolean(scope, "enabled", "scope"),
            scoped_text_objects=_keys(scope, "scoped_text_objects", "scope"),
            custom_scoped_text_objects=_keys(scope, "custom_scoped_text_objects", "scope"),
            window_width=_integer(scope, "window_width", "scope", 10, 200),
            min_width=_integer(scope, "min_width", "scope", 1, 200),
            padding=_integer(scope, "padding", "scope", 0, 50),
            preview_context=_integer(scope, "preview_context", "scope", 0, None),
        ),
        excluded_text_objects=_keys(merged, "excluded_text_objects", ""),
    )
    if len(config.prefix) != 1:
        raise ConfigError("prefix", "must be a single character")
    return config


def load_config_file(path: Path | str | None = None) -> EngineConfig:
    """Read a TOML file (``[remote_ops]`` table or top level) into a config.

    A missing file yields the defaults; malformed TOML is a ``ConfigError``.
    """

    config_path = Path(path) if path is not None else Path.cwd() / DEFAULT_CONFIG_NAME
    try:
        raw = config_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return load_config()
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(str(config_path), f"invalid TOML: {exc}") from exc
    section = data.get("remote_ops", data)
    if not isinstance(section, dict):
        raise ConfigError("remote_ops", "must be a table")
    return load_config(section)


def _normalize(overrides: Dict[str, Any]) -> Dict[str, Any]:
    cross = overrides.get("cross_buffer")
    if isinstance(cross, bool):
        overrides["cross_buffer"] = {"enabled": cross}
    return overrides


def _deep_merge(base: Dict[str, Any], overrides: Mapping[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in overrides.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _path(section: str, key: str) -> str:
    return f"{section}.{key}" if section else key


def _check_keys(data: Any, schema: type, section: str) -> None:
    if not isinstance(data, Mapping):
        raise ConfigError(section, "must be a table")
    allowed = set(schema.__dataclass_fields__)
    for key in data:
        if key not in allowed:
            raise ConfigError(_path(section, str(key)), "unknown option")


def _boolean(data: Mapping[str, Any], key: str, section: str) -> bool:
    value = data[key]
    if not isinstance(value, bool):
        raise ConfigError(_path(section, key), "must be a boolean")
    return value


def _string(data: Mapping[str, Any], key: str, section: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise ConfigError(_path(section, key), "must be a string")
    return value


def _integer(
    data: Mapping[str, Any],
    key: str,
    section: str,
    low: int,
    high: Optional[int],
) -> int:
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(_path(section, key), "must be an integer")
    if value < low:
        if high is None:
            raise ConfigError(_path(section, key), f"must be at least {low}")
        raise ConfigError(_path(section, key), f"must be between {low} and {high}")
    if high is not None and value > high:
        raise ConfigError(_path(section, key), f"must be between {low} and {high}")
    return value


def _keys(data: Mapping[str, Any], key: str, section: str) -> Tuple[str, ...]:
    value = data[key]
    if isinstance(value, str) or not isinstance(value, Sequence):
        raise ConfigError(_path(section, key), "must be a list of text object keys")
    for item in value:
        if not isinstance(item, str) or len(item) != 1:
            raise ConfigError(_path(section, key), f"invalid text object key {item!r}")
    return tuple(dict.fromkeys(value))


__all__ = [
    "EngineConfig",
    "CrossBufferConfig",
    "ScopeConfig",
    "load_config",
    "load_config_file",
    "DEFAULT_SCOPED_TEXT_OBJECTS",
    "DEFAULT_CUSTOM_SCOPED_TEXT_OBJECTS",
]
