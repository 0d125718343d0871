"""In-process change feed with explicit watch/unwatch lifecycles."""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass, field
from typing import Any

from rallypoint.domain.entities import ChangeEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangeFilter:
    """Select change events by table, action and exact ``data`` values."""

    table: str | None = None
    action: str | None = None
    match: dict[str, Any] = field(default_factory=dict)

    def matches(self, event: ChangeEvent) -> bool:
        if self.table is not None and event.table != self.table:
            return False
        if self.action is not None and event.action != self.action:
            return False
        return all(event.data.get(key) == value for key, value in self.match.items())


class Subscription:
    """Buffered stream of events accepted by one :class:`ChangeFilter`."""

    def __init__(self, change_filter: ChangeFilter, *, max_buffer: int = 1000) -> None:
        self.filter = change_filter
        self._queue: queue.Queue[ChangeEvent] = queue.Queue(maxsize=max_buffer)
        self.closed = False

    def offer(self, event: ChangeEvent) -> None:
        if self.closed or not self.filter.matches(event):
            return
        try:
            self._queue.put_nowait(event)
        except queue.Full:
            logger.warning("Dropping change event for a slow subscriber: %s", event)

    def get(self, timeout: float | None = None) -> ChangeEvent | None:
        """Return the next event, or ``None`` once ``timeout`` elapses."""

        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def drain(self) -> list[ChangeEvent]:
        events: list[ChangeEvent] = []
        while True:
            try:
                events.append(self._queue.get_nowait())
            except queue.Empty:
                return events


class ChangeFeed:
    """Fan change events out to every matching subscription."""

    def __init__(self) -> None:
        self._subscriptions: set[Subscription] = set()
        self._lock = threading.Lock()

    def watch(self, change_filter: ChangeFilter | None = None) -> Subscription:
        subscription = Subscription(change_filter or ChangeFilter())
        with self._lock:
            self._subscriptions.add(subscription)
        return subscription

    def unwatch(self, subscription: Subscription) -> None:
        subscription.closed = True
        with self._lock:
            self._subscriptions.discard(subscription)

    def publish(self, event: ChangeEvent) -> None:
        with self._lock:
            subscriptions = list(self._subscriptions)
        for subscription in subscriptions:
            subscription.offer(event)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)


change_feed = ChangeFeed()


__all__ = ["ChangeFeed", "ChangeFilter", "Subscription", "change_feed"]
