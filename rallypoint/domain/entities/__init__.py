"""Domain entities exposed by the application."""

from .change_event import CHANGE_ACTION_INSERT, CHANGE_ACTION_UPDATE, ChangeEvent
from .chat import ChatMembership, ChatThread
from .delivery import (
    DeliveryStatus,
    DispatchOutcome,
    DispatchResult,
    PushMessage,
    PushTicket,
)
from .event import (
    RSVP_STATUS_ATTENDING,
    RSVP_STATUS_MAYBE,
    RSVP_STATUS_NOT_ATTENDING,
    RSVP_STATUS_WAITLIST,
    Event,
    EventLocation,
    EventRsvp,
)
from .notification import (
    NOTIFICATION_STATUS_FAILED,
    NOTIFICATION_STATUS_PENDING,
    NOTIFICATION_STATUS_SENT,
    NOTIFICATION_TYPE_CHAT_MESSAGE,
    NOTIFICATION_TYPE_DIRECT,
    NOTIFICATION_TYPE_EVENT_UPDATE,
    NOTIFICATION_TYPE_NEW_THREAD,
    NOTIFICATION_TYPE_SCHEDULED_REMINDER,
    NOTIFICATION_TYPES,
    Notification,
)
from .push_token import PUSH_PLATFORMS, PushToken
from .scheduled_notification import ScheduledNotification
from .trigger import DirectTrigger, EventTrigger, ThreadTrigger, Trigger
from .user import User
from .user_notification import InboxEntry, UserNotification

__all__ = [
    "ChangeEvent",
    "CHANGE_ACTION_INSERT",
    "CHANGE_ACTION_UPDATE",
    "ChatMembership",
    "ChatThread",
    "DeliveryStatus",
    "DispatchOutcome",
    "DispatchResult",
    "PushMessage",
    "PushTicket",
    "Event",
    "EventLocation",
    "EventRsvp",
    "RSVP_STATUS_ATTENDING",
    "RSVP_STATUS_MAYBE",
    "RSVP_STATUS_NOT_ATTENDING",
    "RSVP_STATUS_WAITLIST",
    "Notification",
    "NOTIFICATION_TYPES",
    "NOTIFICATION_TYPE_CHAT_MESSAGE",
    "NOTIFICATION_TYPE_DIRECT",
    "NOTIFICATION_TYPE_EVENT_UPDATE",
    "NOTIFICATION_TYPE_NEW_THREAD",
    "NOTIFICATION_TYPE_SCHEDULED_REMINDER",
    "NOTIFICATION_STATUS_FAILED",
    "NOTIFICATION_STATUS_PENDING",
    "NOTIFICATION_STATUS_SENT",
    "PushToken",
    "PUSH_PLATFORMS",
    "ScheduledNotification",
    "DirectTrigger",
    "EventTrigger",
    "ThreadTrigger",
    "Trigger",
    "User",
    "InboxEntry",
    "UserNotification",
]
