"""Keymap registry responsible for storing actions and bindings."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, Optional

from remote_ops.runtime.telemetry import span

from .models import ActionRef, Binding


class KeymapConflictError(RuntimeError):
    """Raised when a new binding reuses a key signature already bound in its mode."""

    def __init__(self, binding: Binding, conflicts: Iterable[Binding]):
        conflicts_tuple = tuple(conflicts)
        super().__init__(
            f"Binding '{binding.id}' conflicts with {[b.id for b in conflicts_tuple]}"
        )
        self.binding = binding
        self.conflicts = conflicts_tuple


class KeymapRegistry:
    """Owns action references and bindings indexed by mode and key signature."""

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._actions: Dict[str, ActionRef] = {}
        self._bindings: Dict[str, Binding] = {}
        self._mode_index: Dict[str, Dict[str, str]] = {}
        self._logger_name = logger_name
        self._revision = 0

    def revision(self) -> int:
        return self._revision

    def get_action(self, action_id: str) -> ActionRef:
        try:
            return self._actions[action_id]
        except KeyError as exc:
            raise KeyError(f"Action '{action_id}' is not registered") from exc

    def get_binding(self, binding_id: str) -> Binding:
        try:
            return self._bindings[binding_id]
        except KeyError as exc:
            raise KeyError(f"Binding '{binding_id}' is not registered") from exc

    def register_action(self, action: ActionRef, *, replace: bool = False) -> ActionRef:
        if not replace and action.id in self._actions:
            raise ValueError(f"Action '{action.id}' already registered")
        self._actions[action.id] = action
        return action

    def register_binding(self, binding: Binding, *, replace: bool = False) -> Binding:
        with span(
            "keymaps::register_binding",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"binding_id": binding.id, "mode": binding.mode},
        ) as handle:
            if binding.action_id not in self._actions:
                handle.add_metadata("missing_action", binding.action_id)
                raise KeyError(
                    f"Binding '{binding.id}' references unknown action '{binding.action_id}'"
                )
            conflict = self.binding_for(binding.mode, binding.key_signature)
            if conflict is not None and conflict.id != binding.id:
                if not replace:
                    handle.add_metadata("conflicts", conflict.id)
                    raise KeymapConflictError(binding, [conflict])
                self.unregister_binding(conflict.id)
            existing = self._bindings.get(binding.id)
            if existing is not None:
                if not replace:
                    raise ValueError(f"Binding id '{binding.id}' already registered")
                self._unindex(existing)

            self._bindings[binding.id] = binding
            self._mode_index.setdefault(binding.mode, {})[binding.key_signature] = binding.id
            self._revision += 1
            return binding

    def unregister_binding(self, binding_id: str) -> Optional[Binding]:
        binding = self._bindings.pop(binding_id, None)
        if binding is None:
            return None
        self._unindex(binding)
        self._revision += 1
        return binding

    def binding_for(self, mode: str, signature: str) -> Optional[Binding]:
        binding_id = self._mode_index.get(mode, {}).get(signature)
        return self._bindings.get(binding_id) if binding_id else None

    def iter_bindings(self, mode: Optional[str] = None) -> Iterator[Binding]:
        if mode is None:
            yield from self._bindings.values()
            return
        for binding_id in self._mode_index.get(mode, {}).values():
            yield self._bindings[binding_id]

    def modes(self) -> tuple[str, ...]:
        return tuple(sorted(self._mode_index))

    def _unindex(self, binding: Binding) -> None:
        signatures = self._mode_index.get(binding.mode)
        if not signatures:
            return
        if signatures.get(binding.key_signature) == binding.id:
            del signatures[binding.key_signature]
        if not signatures:
            self._mode_index.pop(binding.mode, None)


__all__ = ["KeymapRegistry", "KeymapConflictError"]
