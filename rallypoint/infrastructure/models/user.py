"""SQLAlchemy model for the users table."""

from sqlalchemy import Boolean, Column, JSON, String

from rallypoint.infrastructure.database import Base

from ._ids import id_type, new_id


class UserModel(Base):
    """Platform user; only read by the notification pipeline."""

    __tablename__ = "users"

    id = Column(id_type(), primary_key=True, default=new_id)
    email = Column(String(255), nullable=False, unique=True)
    name = Column(String(100), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    preferences = Column(JSON, nullable=False, default=dict)


__all__ = ["UserModel"]
