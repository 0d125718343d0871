"""ORM models used by the application infrastructure."""

from .chat import ChatMembershipModel, ChatThreadModel
from .event import EventModel, EventRsvpModel
from .notification import NotificationModel, UserNotificationModel
from .push_token import PushTokenModel
from .scheduled_notification import ScheduledNotificationModel
from .user import UserModel

__all__ = [
    "ChatMembershipModel",
    "ChatThreadModel",
    "EventModel",
    "EventRsvpModel",
    "NotificationModel",
    "UserNotificationModel",
    "PushTokenModel",
    "ScheduledNotificationModel",
    "UserModel",
]
