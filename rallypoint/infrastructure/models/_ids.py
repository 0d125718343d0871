"""Primary key helpers shared by the ORM models."""

from uuid import uuid4

from sqlalchemy import String

UUID_LENGTH = 36


def new_id() -> str:
    return str(uuid4())


def id_type() -> String:
    return String(UUID_LENGTH)
