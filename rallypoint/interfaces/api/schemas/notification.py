"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class EventNotificationCreate(BaseModel):
    """Announcement sent to everyone attending an event."""

    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., max_length=4000)
    created_by: str | None = None
    idempotency_key: str | None = Field(
        default=None,
        max_length=100,
        description="Repeating a request with the same key returns the first notification",
    )


class ThreadMessageNotificationCreate(BaseModel):
    """A chat message that other thread members should hear about."""

    message_id: str = Field(..., min_length=1, max_length=100)
    sender_id: str = Field(..., min_length=1)
    content_preview: str = Field(..., max_length=4000)
    sender_name: str | None = Field(default=None, max_length=100)


class NewThreadNotificationCreate(BaseModel):
    created_by: str | None = None


class DirectNotificationCreate(BaseModel):
    user_ids: list[str] = Field(..., min_length=1)
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., max_length=4000)
    created_by: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)
    idempotency_key: str | None = Field(default=None, max_length=100)


class ScheduledNotificationCreate(BaseModel):
    event_id: str
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., max_length=4000)
    scheduled_for: datetime
    created_by: str | None = None


class ScheduledNotificationRead(BaseModel):
    id: str
    event_id: str
    title: str
    content: str
    scheduled_for: datetime
    created_by: str | None = None
    processed_at: datetime | None = None
    notification_id: str | None = None


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: str
    type: str
    title: str
    content: str
    data: dict[str, Any] = Field(default_factory=dict)
    status: str
    created_by: str | None = None
    created_at: datetime | None = None
    sent_at: datetime | None = None
    attempt_count: int = 0


class InboxEntryRead(BaseModel):
    """A notification as seen by one recipient."""

    id: str
    notification_id: str
    user_id: str
    is_read: bool
    read_at: datetime | None = None
    notification: NotificationRead


class NotificationMarkReadRequest(BaseModel):
    """Payload used to mark a batch of inbox entries as read."""

    ids: list[str] = Field(..., min_length=1, description="Inbox entry identifiers")


class NotificationMarkReadResponse(BaseModel):
    updated: int


class SweepSummaryRead(BaseModel):
    reminders_created: int
    processed: int
    sent: int
    failed: int
    pending: int


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
]
