"""Kind registry keyed by one-character text-object identifiers."""

from __future__ import annotations

from typing import Callable, Dict, Iterator, List, Optional

from remote_ops.buffer import Buffer, RegisterBank
from remote_ops.config import EngineConfig
from remote_ops.errors import KindConflictError, UnknownTextObjectError
from remote_ops.runtime import telemetry

from .kinds import TextObjectKind, builtin_kinds
from .models import Instance, RenderingMode


class KindRegistry:
    """Owns built-in and externally registered kinds.

    Registered kinds shadow built-ins with the same key, so discovery probes
    them first; block kinds and the delimiter scan come after.
    """

    def __init__(
        self, config: Optional[EngineConfig] = None, *, include_builtins: bool = True
    ) -> None:
        self.config = config or EngineConfig()
        self._builtin: Dict[str, TextObjectKind] = {}
        self._custom: Dict[str, TextObjectKind] = {}
        if include_builtins:
            for kind in builtin_kinds():
                if kind.key not in self.config.excluded_text_objects:
                    self._builtin[kind.key] = kind

    def register(self, kind: TextObjectKind, *, replace: bool = False) -> TextObjectKind:
        with telemetry.span(
            "textobjects::register",
            logger_name="remote_ops.textobjects",
            component="textobjects",
            metadata={"kind": kind.key},
        ) as handle:
            if kind.key in self._custom and not replace:
                handle.add_metadata("conflict", kind.key)
                raise KindConflictError(kind.key)
            self._custom[kind.key] = kind
            return kind

    def unregister(self, key: str) -> Optional[TextObjectKind]:
        return self._custom.pop(key, None)

    def get(self, key: str) -> TextObjectKind:
        kind = self._custom.get(key) or self._builtin.get(key)
        if kind is None:
            raise UnknownTextObjectError(key)
        return kind

    def __contains__(self, key: object) -> bool:
        return key in self._custom or key in self._builtin

    def __iter__(self) -> Iterator[TextObjectKind]:
        for key in self.keys():
            yield self.get(key)

    def keys(self) -> List[str]:
        ordered = list(self._builtin)
        ordered.extend(key for key in self._custom if key not in self._builtin)
        return ordered

    def is_custom(self, key: str) -> bool:
        if key in self._custom:
            return True
        kind = self._builtin.get(key)
        return bool(kind and kind.custom)

    def is_scoped(self, key: str) -> bool:
        if not self.config.scope_active or key not in self:
            return False
        scope = self.config.scope
        return key in scope.scoped_text_objects or key in scope.custom_scoped_text_objects

    def scoped_keys(self) -> List[str]:
        return [key for key in self.keys() if self.is_scoped(key)]

    def rendering_mode(self, key: str) -> RenderingMode:
        return self.get(key).rendering_mode

    def get_custom_finder(self, key: str) -> Optional[Callable[..., List[Instance]]]:
        return self.get(key).find if self.is_custom(key) else None

    def get_custom_selector(self, key: str) -> Optional[Callable[..., object]]:
        return self.get(key).select if self.is_custom(key) else None

    def get_custom_formatter(self, key: str) -> Optional[Callable[[Instance], List[str]]]:
        return self.get(key).format if self.is_custom(key) else None

    def find_text_objects(
        self, key: str, buffer: Buffer, *, registers: Optional[RegisterBank] = None
    ) -> List[Instance]:
        """Every instance of ``key`` in ``buffer``; unknown keys find nothing."""

        with telemetry.span(
            "textobjects::find",
            logger_name="remote_ops.textobjects",
            component="textobjects",
            metadata={"kind": key, "buffer": buffer.id},
        ) as handle:
            if key not in self:
                handle.add_metadata("unknown", True)
                return []
            instances = self.get(key).find(buffer, registers=registers)
            handle.add_metadata("count", len(instances))
            return instances


__all__ = ["KindRegistry"]
