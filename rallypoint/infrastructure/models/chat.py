"""SQLAlchemy models for chat threads and memberships."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String

from rallypoint.infrastructure.database import Base

from ._ids import id_type, new_id


class ChatThreadModel(Base):
    __tablename__ = "chat_threads"

    id = Column(id_type(), primary_key=True, default=new_id)
    name = Column(String(200), nullable=True)
    type = Column(String(20), nullable=False, default="group")
    event_id = Column(id_type(), nullable=True)
    created_by = Column(id_type(), nullable=True)


class ChatMembershipModel(Base):
    __tablename__ = "chat_memberships"

    id = Column(id_type(), primary_key=True, default=new_id)
    thread_id = Column(
        id_type(),
        ForeignKey("chat_threads.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(id_type(), ForeignKey("users.id"), nullable=False, index=True)
    notifications_enabled = Column(Boolean, nullable=False, default=True)
    mute_until = Column(DateTime(), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    left_at = Column(DateTime(), nullable=True)


__all__ = ["ChatMembershipModel", "ChatThreadModel"]
