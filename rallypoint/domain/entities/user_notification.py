"""Per-recipient delivery and read tracking for a notification."""

from dataclasses import dataclass
from datetime import datetime

from .notification import Notification


@dataclass
class UserNotification:
    """Links one recipient to one :class:`Notification`."""

    id: str | None
    notification_id: str
    user_id: str
    is_read: bool = False
    created_at: datetime | None = None
    read_at: datetime | None = None


@dataclass
class InboxEntry:
    """A delivery row together with the notification it points to."""

    user_notification: UserNotification
    notification: Notification


__all__ = ["InboxEntry", "UserNotification"]
