"""SQLAlchemy models for events and RSVPs."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, JSON, String

from rallypoint.infrastructure.database import Base

from ._ids import id_type, new_id


class EventModel(Base):
    __tablename__ = "events"

    id = Column(id_type(), primary_key=True, default=new_id)
    title = Column(String(200), nullable=False)
    status = Column(String(20), nullable=False, default="draft")
    organization_id = Column(id_type(), nullable=True)
    start_time = Column(DateTime(), nullable=True)
    location = Column(JSON, nullable=True)


class EventRsvpModel(Base):
    __tablename__ = "event_rsvps"

    id = Column(id_type(), primary_key=True, default=new_id)
    event_id = Column(
        id_type(), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(id_type(), ForeignKey("users.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="attending")
    is_approved = Column(Boolean, nullable=False, default=True)


__all__ = ["EventModel", "EventRsvpModel"]
