"""SQLAlchemy model for device push tokens."""

from sqlalchemy import Boolean, Column, DateTime, String

from rallypoint.infrastructure.database import Base
from rallypoint.utils import storage_now

from ._ids import id_type, new_id


class PushTokenModel(Base):
    """Database representation of a device registration."""

    __tablename__ = "user_push_tokens"

    id = Column(id_type(), primary_key=True, default=new_id)
    user_id = Column(id_type(), nullable=False, index=True)
    token = Column(String(255), nullable=False, unique=True)
    platform = Column(String(20), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime(), nullable=False, default=storage_now)
    updated_at = Column(DateTime(), nullable=True, onupdate=storage_now)


__all__ = ["PushTokenModel"]
