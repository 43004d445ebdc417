"""Register storage with scoped snapshot/restore support."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterator, Mapping, Optional

UNNAMED = '"'
YANK = "0"
SEARCH = "/"


@dataclass(frozen=True, slots=True)
class RegisterValue:
    text: str
    type: str = "charwise"  # charwise or linewise


@dataclass(frozen=True, slots=True)
class RegisterSnapshot:
    """Point-in-time copy of selected registers; ``None`` marks an unset slot."""

    values: Mapping[str, Optional[RegisterValue]]


class RegisterBank:
    """Tracks the unnamed, yank, search and named registers."""

    def __init__(self) -> None:
        self._registers: Dict[str, RegisterValue] = {UNNAMED: RegisterValue(text="")}

    def get(self, name: str) -> RegisterValue:
        return self._registers.get(name, RegisterValue(text=""))

    def set(self, name: str, value: RegisterValue) -> None:
        self._registers[name] = value
        if name not in (UNNAMED, SEARCH):
            self._registers[UNNAMED] = value

    def yank_to(self, name: str, text: str, *, register_type: str = "charwise") -> None:
        value = RegisterValue(text=text, type=register_type)
        self.set(name, value)
        if name == UNNAMED:
            self._registers[YANK] = value

    @property
    def last_search(self) -> str:
        return self.get(SEARCH).text

    def set_last_search(self, pattern: str) -> None:
        self.set(SEARCH, RegisterValue(text=pattern))

    def snapshot(self, *names: str) -> RegisterSnapshot:
        return RegisterSnapshot(
            values={name: self._registers.get(name) for name in names}
        )

    def restore(self, snapshot: RegisterSnapshot) -> None:
        for name, value in snapshot.values.items():
            if value is None:
                self._registers.pop(name, None)
            else:
                self._registers[name] = value

    @contextmanager
    def preserved(self, *names: str) -> Iterator[RegisterSnapshot]:
        """Restore ``names`` on exit, whether the block returns or raises."""

        saved = self.snapshot(*names)
        try:
            yield saved
        finally:
            self.restore(saved)


__all__ = [
    "RegisterBank",
    "RegisterSnapshot",
    "RegisterValue",
    "UNNAMED",
    "YANK",
    "SEARCH",
]
