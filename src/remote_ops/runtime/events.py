"""Event bus shared by modes and the operation engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

Callback = Callable[[object], None]


@dataclass(eq=False, slots=True)
class Subscription:
    """Cancellation token returned by ``ModeBus.subscribe``."""

    event: str
    callback: Callback
    _bus: Optional["ModeBus"] = field(default=None, repr=False)

    @property
    def active(self) -> bool:
        return self._bus is not None

    def cancel(self) -> None:
        bus, self._bus = self._bus, None
        if bus is not None:
            bus._discard(self)


class ModeBus:
    """Minimal event bus letting modes and services exchange structured signals."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, List[Subscription]] = {}

    def subscribe(self, event: str, callback: Callback) -> Subscription:
        subscription = Subscription(event, callback, self)
        self._subscribers.setdefault(event, []).append(subscription)
        return subscription

    def emit(self, event: str, payload: object | None = None) -> None:
        # Callbacks may cancel subscriptions while we iterate.
        for subscription in list(self._subscribers.get(event, [])):
            if subscription.active:
                subscription.callback(payload)

    def subscriber_count(self, event: str) -> int:
        return len(self._subscribers.get(event, []))

    def _discard(self, subscription: Subscription) -> None:
        bucket = self._subscribers.get(subscription.event)
        if bucket and subscription in bucket:
            bucket.remove(subscription)
            if not bucket:
                self._subscribers.pop(subscription.event, None)


__all__ = ["ModeBus", "Subscription"]
