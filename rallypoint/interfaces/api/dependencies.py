"""FastAPI dependency utilities."""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session, sessionmaker

from rallypoint.application.use_cases.notifications import NotificationPipeline
from rallypoint.config import get_settings
from rallypoint.infrastructure.database import SessionLocal, get_db
from rallypoint.infrastructure.notifications import ChangeFeed, change_feed
from rallypoint.infrastructure.push import ExpoPushGateway, PushGateway


@lru_cache
def get_push_gateway() -> PushGateway:
    """Return the process-wide push gateway built from settings."""

    return ExpoPushGateway.from_settings(get_settings())


def get_change_feed() -> ChangeFeed:
    return change_feed


def get_session_factory() -> sessionmaker:
    """Session factory for long-lived connections that open short sessions."""

    return SessionLocal


def get_pipeline(
    db: Session = Depends(get_db),
    gateway: PushGateway = Depends(get_push_gateway),
    feed: ChangeFeed = Depends(get_change_feed),
) -> NotificationPipeline:
    """Build a pipeline bound to the request's session."""

    return NotificationPipeline(db, gateway, settings=get_settings(), change_feed=feed)


__all__ = [
    "get_change_feed",
    "get_pipeline",
    "get_push_gateway",
    "get_session_factory",
]
