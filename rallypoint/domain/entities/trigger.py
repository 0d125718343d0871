"""Descriptors naming who a notification should reach."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class EventTrigger:
    """Everyone attending ``event_id``."""

    event_id: str


@dataclass(frozen=True)
class ThreadTrigger:
    """Every member of ``thread_id`` still receiving notifications.

    ``exclude_user_id`` is the message author or thread creator.
    """

    thread_id: str
    exclude_user_id: str | None = None


@dataclass(frozen=True)
class DirectTrigger:
    """An explicit recipient list."""

    user_ids: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def of(cls, user_ids) -> "DirectTrigger":
        return cls(frozenset(user_id for user_id in user_ids if user_id))


Trigger = EventTrigger | ThreadTrigger | DirectTrigger

__all__ = ["DirectTrigger", "EventTrigger", "ThreadTrigger", "Trigger"]
