"""SQLAlchemy models for notifications and their delivery rows."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    JSON,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from rallypoint.infrastructure.database import Base
from rallypoint.utils import storage_now

from ._ids import id_type, new_id


class NotificationModel(Base):
    """One row per logical event worth notifying about."""

    __tablename__ = "notifications"
    __table_args__ = (
        UniqueConstraint("trigger_type", "trigger_id", name="uq_notifications_trigger"),
    )

    id = Column(id_type(), primary_key=True, default=new_id)
    type = Column(String(40), nullable=False)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    data = Column(JSON, nullable=False, default=dict)
    status = Column(String(20), nullable=False, default="pending", index=True)
    trigger_type = Column(String(40), nullable=True)
    trigger_id = Column(String(100), nullable=True)
    created_by = Column(id_type(), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=storage_now)
    sent_at = Column(DateTime(), nullable=True)
    attempt_count = Column(Integer, nullable=False, default=0)
    last_attempt_at = Column(DateTime(), nullable=True)

    recipients = relationship(
        "UserNotificationModel",
        back_populates="notification",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class UserNotificationModel(Base):
    """Delivery and read state of a notification for one user."""

    __tablename__ = "user_notifications"
    __table_args__ = (
        UniqueConstraint(
            "notification_id", "user_id", name="uq_user_notifications_recipient"
        ),
    )

    id = Column(id_type(), primary_key=True, default=new_id)
    notification_id = Column(
        id_type(),
        ForeignKey("notifications.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(id_type(), nullable=False, index=True)
    is_read = Column(Boolean, nullable=False, default=False)
    read_at = Column(DateTime(), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=storage_now)

    notification = relationship("NotificationModel", back_populates="recipients")


__all__ = ["NotificationModel", "UserNotificationModel"]
