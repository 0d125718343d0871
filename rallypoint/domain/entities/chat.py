"""Domain entities for chat threads and their memberships."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class ChatThread:
    """Conversation container (group, direct message, event or organization)."""

    id: str
    name: str | None
    type: str
    event_id: str | None = None
    created_by: str | None = None


@dataclass
class ChatMembership:
    """A user's participation in a thread."""

    id: str
    thread_id: str
    user_id: str
    notifications_enabled: bool = True
    mute_until: datetime | None = None
    is_active: bool = True
    left_at: datetime | None = None

    def is_muted(self, at: datetime) -> bool:
        return self.mute_until is not None and self.mute_until > at

    def receives_notifications(self, at: datetime) -> bool:
        """Active, not left, notifications on and no mute in effect at ``at``."""

        return (
            self.is_active
            and self.left_at is None
            and self.notifications_enabled
            and not self.is_muted(at)
        )


__all__ = ["ChatMembership", "ChatThread"]
