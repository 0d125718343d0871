from .notification import (
    DirectNotificationCreate,
    EventNotificationCreate,
    InboxEntryRead,
    NewThreadNotificationCreate,
    NotificationMarkReadRequest,
    NotificationMarkReadResponse,
    NotificationRead,
    ScheduledNotificationCreate,
    ScheduledNotificationRead,
    SweepSummaryRead,
    ThreadMessageNotificationCreate,
)
from .push_token import PushTokenRead, PushTokenRegister

__all__ = [
    "DirectNotificationCreate",
    "EventNotificationCreate",
    "InboxEntryRead",
    "NewThreadNotificationCreate",
    "NotificationMarkReadRequest",
    "NotificationMarkReadResponse",
    "NotificationRead",
    "ScheduledNotificationCreate",
    "ScheduledNotificationRead",
    "SweepSummaryRead",
    "ThreadMessageNotificationCreate",
    "PushTokenRead",
    "PushTokenRegister",
]
