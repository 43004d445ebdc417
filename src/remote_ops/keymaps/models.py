"""Dataclasses describing key sequences, actions and bindings."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Iterable, Mapping

SPECIAL_KEYS = {
    "cr": "ENTER",
    "enter": "ENTER",
    "return": "ENTER",
    "esc": "ESC",
    "escape": "ESC",
    "tab": "TAB",
    "bs": "BACKSPACE",
    "backspace": "BACKSPACE",
    "space": " ",
    "lt": "<",
}
MODIFIER_NAMES = {"c": "ctrl", "s": "shift", "a": "alt", "m": "alt"}

_NOTATION_RE = re.compile(r"<([^<>]+)>|(.)", re.DOTALL)


def normalize_modifiers(modifiers: Iterable[str]) -> tuple[str, ...]:
    values = tuple(m.strip().lower() for m in modifiers if m.strip())
    return tuple(sorted(dict.fromkeys(values)))


@dataclass(frozen=True, slots=True)
class KeyStroke:
    """Single normalized key press."""

    key: str
    modifiers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("key cannot be empty")
        object.__setattr__(self, "modifiers", normalize_modifiers(self.modifiers))

    @property
    def token(self) -> str:
        if self.modifiers:
            return "+".join((*self.modifiers, self.key))
        return self.key

    @classmethod
    def from_notation(cls, body: str) -> "KeyStroke":
        """Parse the inside of ``<...>`` such as ``C-n``, ``S-Tab`` or ``Esc``."""

        parts = body.split("-")
        name = parts[-1] if parts[-1] else "-"
        modifiers = []
        for part in parts[:-1]:
            modifier = MODIFIER_NAMES.get(part.lower())
            if modifier is None:
                raise ValueError(f"Unknown modifier '{part}' in <{body}>")
            modifiers.append(modifier)
        key = SPECIAL_KEYS.get(name.lower(), name if len(name) == 1 else name.upper())
        if modifiers and len(key) == 1:
            key = key.lower()
        return cls(key, tuple(modifiers))


@dataclass(frozen=True, slots=True)
class KeySequence:
    """Immutable collection of keystrokes."""

    strokes: tuple[KeyStroke, ...]
    timeout_ms: int = 1000

    def __post_init__(self) -> None:
        if not self.strokes:
            raise ValueError("KeySequence requires at least one stroke")

    @property
    def tokens(self) -> tuple[str, ...]:
        return tuple(stroke.token for stroke in self.strokes)

    @classmethod
    def from_strings(cls, *keys: str, timeout_ms: int = 1000) -> "KeySequence":
        strokes = tuple(KeyStroke(key) for key in keys if key)
        return cls(strokes=strokes, timeout_ms=timeout_ms)

    @classmethod
    def parse(cls, notation: str, *, timeout_ms: int = 1000) -> "KeySequence":
        """Parse editor notation, e.g. ``,yi"``, ``<C-n>`` or ``<S-Tab>``."""

        strokes = []
        for match in _NOTATION_RE.finditer(notation):
            special, plain = match.groups()
            if special is not None:
                strokes.append(KeyStroke.from_notation(special))
            else:
                strokes.append(KeyStroke(plain))
        return cls(strokes=tuple(strokes), timeout_ms=timeout_ms)


@dataclass(frozen=True, slots=True)
class ActionRef:
    """Callable metadata used during binding execution."""

    id: str
    handler: Callable[..., object]
    description: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("ActionRef id cannot be empty")
        if not callable(self.handler):
            raise TypeError("handler must be callable")

    def __call__(self, *args: object, **kwargs: object) -> object:
        return self.handler(*args, **kwargs)


@dataclass(frozen=True, slots=True)
class Binding:
    """Associates a key sequence in one mode with an action.

    ``arguments`` travel with the binding to the action, which is how one
    ``remote.start`` action serves every operator/text-object pair.
    """

    id: str
    mode: str
    sequence: KeySequence
    action_id: str
    description: str = ""
    arguments: Mapping[str, object] = field(default_factory=dict)
    priority: int = 0

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("binding id cannot be empty")
        if not self.mode:
            raise ValueError("binding mode cannot be empty")
        if not self.action_id:
            raise ValueError("binding action_id cannot be empty")
        object.__setattr__(self, "arguments", MappingProxyType(dict(self.arguments)))

    @property
    def key_signature(self) -> str:
        return " ".join(self.sequence.tokens)


__all__ = [
    "KeyStroke",
    "KeySequence",
    "ActionRef",
    "Binding",
    "normalize_modifiers",
]
