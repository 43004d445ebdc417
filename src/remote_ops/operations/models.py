"""Operation kinds, their strategies and the values exchanged with callers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from remote_ops.buffer import Position
from remote_ops.textobjects import KindBounds, TextObjectRef


@dataclass(frozen=True, slots=True)
class OperationStrategy:
    returns_to_origin: bool
    clears_highlight: bool
    enters_insert: bool
    linewise_only: bool = False


class Operation(str, Enum):
    YANK = "yank"
    DELETE = "delete"
    CHANGE = "change"
    VISUAL = "visual"
    YANKLINE = "yankline"
    DELETELINE = "deleteline"
    CHANGELINE = "changeline"
    VISUALLINE = "visualline"

    @property
    def strategy(self) -> OperationStrategy:
        return STRATEGIES[self]

    @property
    def returns_to_origin(self) -> bool:
        return self.strategy.returns_to_origin

    @property
    def clears_highlight(self) -> bool:
        return self.strategy.clears_highlight

    @property
    def enters_insert(self) -> bool:
        return self.strategy.enters_insert

    @property
    def linewise_only(self) -> bool:
        return self.strategy.linewise_only

    @property
    def base(self) -> "Operation":
        """The characterwise verb behind a line operation."""

        return Operation(self.value[: -len("line")]) if self.linewise_only else self

    @property
    def opens_view(self) -> bool:
        """Relocating verbs probe other buffers in a separate view."""

        return self.base in (Operation.CHANGE, Operation.VISUAL)

    def line_variant(self) -> "Operation":
        return self if self.linewise_only else Operation(f"{self.value}line")


STRATEGIES = {
    Operation.YANK: OperationStrategy(True, True, False),
    Operation.DELETE: OperationStrategy(True, True, False),
    Operation.CHANGE: OperationStrategy(False, False, True),
    Operation.VISUAL: OperationStrategy(False, False, False),
    Operation.YANKLINE: OperationStrategy(True, True, False, linewise_only=True),
    Operation.DELETELINE: OperationStrategy(True, True, False, linewise_only=True),
    Operation.CHANGELINE: OperationStrategy(False, False, True, linewise_only=True),
    Operation.VISUALLINE: OperationStrategy(False, False, False, linewise_only=True),
}


@dataclass(frozen=True, slots=True)
class ReturnTarget:
    buffer_id: int
    position: Position
    window_id: Optional[int] = None


@dataclass(slots=True)
class PendingOperation:
    """Queued intent waiting for a locating pattern."""

    operation: Operation
    textobj: Optional[TextObjectRef]
    origin: ReturnTarget
    return_target: Optional[ReturnTarget] = None
    search_suffix: str = ""

    @property
    def label(self) -> str:
        if self.textobj is None:
            return self.operation.value
        return f"{self.operation.value}[{self.textobj}]"


class EntryStatus(str, Enum):
    LOCATE = "locate"
    HANDLED = "handled"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class EntryResult:
    """Answer to an operator entry point: start locating, or already handled."""

    status: EntryStatus
    seed: str = ""
    message: Optional[str] = None

    @property
    def needs_locate(self) -> bool:
        return self.status is EntryStatus.LOCATE


@dataclass(frozen=True, slots=True)
class ExecutionResult:
    ok: bool
    operation: Operation
    bounds: Optional[KindBounds] = None
    text: str = ""
    buffer_id: Optional[int] = None
    error: Optional[str] = None

    @classmethod
    def failure(cls, operation: Operation, error: str) -> "ExecutionResult":
        return cls(ok=False, operation=operation, error=error)


__all__ = [
    "Operation",
    "OperationStrategy",
    "STRATEGIES",
    "ReturnTarget",
    "PendingOperation",
    "EntryStatus",
    "EntryResult",
    "ExecutionResult",
]
