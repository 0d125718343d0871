"""Domain entity for reminders queued to go out at a later time."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class ScheduledNotification:
    """A reminder for an event's attendees, materialized by the sweep."""

    id: str | None
    event_id: str
    title: str
    content: str
    scheduled_for: datetime
    created_by: str | None
    created_at: datetime | None = None
    processed_at: datetime | None = None
    notification_id: str | None = None


__all__ = ["ScheduledNotification"]
