"""Error taxonomy shared by the remote-operation engine."""

from __future__ import annotations

from typing import Optional, Tuple

Position = Tuple[int, int]


class RemoteOpsError(RuntimeError):
    """Base class for every error raised by ``remote_ops``."""


class ConfigError(RemoteOpsError, ValueError):
    """Raised when a configuration mapping fails validation."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


class BufferValidationError(RemoteOpsError):
    """Raised when a position falls outside the buffer it targets."""

    def __init__(self, message: str, *, position: Optional[Position] = None) -> None:
        super().__init__(message)
        self.position = position


class HostOperationFailure(RemoteOpsError):
    """A host primitive (select, yank, delete, change) could not complete."""


class NoInstancesFound(RemoteOpsError):
    """A scoped session or deferred search found nothing to operate on."""

    def __init__(self, textobj: str) -> None:
        super().__init__(f'No instances of text object "{textobj}" found')
        self.textobj = textobj


class KindConflictError(RemoteOpsError):
    """Raised when a text-object kind key is registered twice."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Text object kind '{key}' already registered")
        self.key = key


class UnknownTextObjectError(HostOperationFailure):
    """The host has no selection primitive for the requested key."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Unknown text object '{key}'")
        self.key = key


__all__ = [
    "RemoteOpsError",
    "ConfigError",
    "BufferValidationError",
    "HostOperationFailure",
    "NoInstancesFound",
    "KindConflictError",
    "UnknownTextObjectError",
]
