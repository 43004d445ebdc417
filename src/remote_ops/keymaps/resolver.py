"""Trie-based keymap resolution with telemetry instrumentation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Literal, Optional, Sequence

from remote_ops.runtime.telemetry import span

from .models import ActionRef, Binding
from .registry import KeymapRegistry


@dataclass(slots=True)
class TrieNode:
    binding_id: Optional[str] = None
    children: Dict[str, "TrieNode"] = field(default_factory=dict)

    def child(self, token: str) -> "TrieNode":
        return self.children.setdefault(token, TrieNode())


@dataclass(frozen=True, slots=True)
class ResolutionMatch:
    """Resolved binding paired with its action."""

    binding: Binding
    action: ActionRef


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    status: Literal["match", "pending", "miss"]
    match: Optional[ResolutionMatch] = None
    consumed: int = 0
    next_expected: tuple[str, ...] = ()
    timeout_ms: Optional[int] = None


class KeymapResolver:
    """Builds one trie per mode, rebuilt whenever the registry changes."""

    def __init__(
        self, registry: KeymapRegistry, *, logger_name: str | None = None
    ) -> None:
        self._registry = registry
        self._logger_name = logger_name
        self._cache: Dict[str, tuple[int, TrieNode]] = {}

    def resolve(self, mode: str, tokens: Sequence[str]) -> ResolutionResult:
        normalized = tuple(tokens)
        with span(
            "keymaps::resolve",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"mode": mode, "length": len(normalized)},
        ) as handle:
            node = self._trie(mode)
            consumed = 0
            for token in normalized:
                child = node.children.get(token)
                if child is None:
                    handle.add_metadata("status", "miss")
                    return ResolutionResult(status="miss", consumed=consumed)
                node = child
                consumed += 1

            if node.binding_id is not None:
                binding = self._registry.get_binding(node.binding_id)
                action = self._registry.get_action(binding.action_id)
                handle.add_metadata("status", "match")
                handle.add_metadata("binding_id", binding.id)
                return ResolutionResult(
                    status="match",
                    match=ResolutionMatch(binding=binding, action=action),
                    consumed=consumed,
                )

            if node.children:
                handle.add_metadata("status", "pending")
                return ResolutionResult(
                    status="pending",
                    consumed=consumed,
                    next_expected=tuple(sorted(node.children)),
                    timeout_ms=self._pending_timeout(node),
                )

            handle.add_metadata("status", "miss")
            return ResolutionResult(status="miss", consumed=consumed)

    def reset(self, mode: Optional[str] = None) -> None:
        if mode is None:
            self._cache.clear()
        else:
            self._cache.pop(mode, None)

    def _trie(self, mode: str) -> TrieNode:
        revision = self._registry.revision()
        cached = self._cache.get(mode)
        if cached and cached[0] == revision:
            return cached[1]
        root = TrieNode()
        for binding in self._registry.iter_bindings(mode):
            node = root
            for token in binding.sequence.tokens:
                node = node.child(token)
            node.binding_id = binding.id
        self._cache[mode] = (revision, root)
        return root

    def _pending_timeout(self, node: TrieNode) -> Optional[int]:
        timeouts: list[int] = []
        stack = list(node.children.values())
        while stack:
            current = stack.pop()
            if current.binding_id is not None:
                binding = self._registry.get_binding(current.binding_id)
                timeouts.append(binding.sequence.timeout_ms)
            stack.extend(current.children.values())
        return min(timeouts) if timeouts else None


__all__ = ["KeymapResolver", "ResolutionResult", "ResolutionMatch"]
