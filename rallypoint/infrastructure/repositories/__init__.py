"""Repository implementations for infrastructure layer."""

from .chat_repository import ChatRepository
from .event_repository import EventRepository
from .notification_repository import NotificationRepository
from .push_token_repository import PushTokenRepository
from .scheduled_notification_repository import ScheduledNotificationRepository
from .user_repository import UserRepository

__all__ = [
    "ChatRepository",
    "EventRepository",
    "NotificationRepository",
    "PushTokenRepository",
    "ScheduledNotificationRepository",
    "UserRepository",
]
