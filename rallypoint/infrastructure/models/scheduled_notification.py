"""SQLAlchemy model for reminders waiting for their send time."""

from sqlalchemy import Column, DateTime, ForeignKey, String, Text

from rallypoint.infrastructure.database import Base
from rallypoint.utils import storage_now

from ._ids import id_type, new_id


class ScheduledNotificationModel(Base):
    __tablename__ = "scheduled_notifications"

    id = Column(id_type(), primary_key=True, default=new_id)
    event_id = Column(
        id_type(), ForeignKey("events.id", ondelete="CASCADE"), nullable=False
    )
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    scheduled_for = Column(DateTime(), nullable=False, index=True)
    created_by = Column(id_type(), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=storage_now)
    processed_at = Column(DateTime(), nullable=True, index=True)
    notification_id = Column(
        id_type(), ForeignKey("notifications.id"), nullable=True
    )


__all__ = ["ScheduledNotificationModel"]
