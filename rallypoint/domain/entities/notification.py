"""Domain entity representing one logical event worth notifying about."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

NOTIFICATION_TYPE_EVENT_UPDATE = "event-update"
NOTIFICATION_TYPE_CHAT_MESSAGE = "chat-message"
NOTIFICATION_TYPE_NEW_THREAD = "new-thread"
NOTIFICATION_TYPE_SCHEDULED_REMINDER = "scheduled-reminder"
NOTIFICATION_TYPE_DIRECT = "direct"

NOTIFICATION_TYPES = frozenset(
    {
        NOTIFICATION_TYPE_EVENT_UPDATE,
        NOTIFICATION_TYPE_CHAT_MESSAGE,
        NOTIFICATION_TYPE_NEW_THREAD,
        NOTIFICATION_TYPE_SCHEDULED_REMINDER,
        NOTIFICATION_TYPE_DIRECT,
    }
)

NOTIFICATION_STATUS_PENDING = "pending"
NOTIFICATION_STATUS_SENT = "sent"
NOTIFICATION_STATUS_FAILED = "failed"


@dataclass
class Notification:
    """Persisted record shared by every recipient of one trigger."""

    id: str | None
    type: str
    title: str
    content: str
    created_by: str | None
    data: dict[str, Any] = field(default_factory=dict)
    status: str = NOTIFICATION_STATUS_PENDING
    trigger_type: str | None = None
    trigger_id: str | None = None
    created_at: datetime | None = None
    sent_at: datetime | None = None
    attempt_count: int = 0
    last_attempt_at: datetime | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in (NOTIFICATION_STATUS_SENT, NOTIFICATION_STATUS_FAILED)


__all__ = [
    "Notification",
    "NOTIFICATION_TYPES",
    "NOTIFICATION_TYPE_EVENT_UPDATE",
    "NOTIFICATION_TYPE_CHAT_MESSAGE",
    "NOTIFICATION_TYPE_NEW_THREAD",
    "NOTIFICATION_TYPE_SCHEDULED_REMINDER",
    "NOTIFICATION_TYPE_DIRECT",
    "NOTIFICATION_STATUS_PENDING",
    "NOTIFICATION_STATUS_SENT",
    "NOTIFICATION_STATUS_FAILED",
]
