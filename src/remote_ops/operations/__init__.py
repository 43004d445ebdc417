"""Operation execution, deferred locate, cross-buffer sweep and scope selection."""

from .controller import RemoteOperationController
from .executor import FEEDBACK_NAMESPACE, OperationExecutor
from .models import (
    STRATEGIES,
    EntryResult,
    EntryStatus,
    ExecutionResult,
    Operation,
    OperationStrategy,
    PendingOperation,
    ReturnTarget,
)
from .pending import (
    LOCATE_CANCEL,
    LOCATE_CHANGED,
    LOCATE_CONFIRM,
    DeferredOperationMachine,
    PendingState,
)
from .scope import SCOPE_NAMESPACE, ScopeSelector, ScopeSession
from .smart_search import SearchConstraint, constraint_for, seed_for
from .sweep import CrossBufferSweep, SearchHit

__all__ = [
    "RemoteOperationController",
    "OperationExecutor",
    "FEEDBACK_NAMESPACE",
    "STRATEGIES",
    "EntryResult",
    "EntryStatus",
    "ExecutionResult",
    "Operation",
    "OperationStrategy",
    "PendingOperation",
    "ReturnTarget",
    "DeferredOperationMachine",
    "PendingState",
    "LOCATE_CANCEL",
    "LOCATE_CHANGED",
    "LOCATE_CONFIRM",
    "ScopeSelector",
    "ScopeSession",
    "SCOPE_NAMESPACE",
    "SearchConstraint",
    "constraint_for",
    "seed_for",
    "CrossBufferSweep",
    "SearchHit",
]
