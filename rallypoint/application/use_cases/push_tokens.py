"""Use cases for device push token registration."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from rallypoint.domain.entities import PUSH_PLATFORMS, PushToken
from rallypoint.domain.errors import NotFoundError, PersistenceError
from rallypoint.infrastructure.repositories import PushTokenRepository, UserRepository

logger = logging.getLogger(__name__)


def register_push_token(
    session: Session, *, user_id: str, token: str, platform: str
) -> PushToken:
    """Attach ``token`` to ``user_id``; a known token moves to the new owner."""

    token = (token or "").strip()
    if not token:
        raise ValueError("Push token must not be empty")
    platform = (platform or "").strip().lower()
    if platform not in PUSH_PLATFORMS:
        raise ValueError(f"Unsupported platform '{platform}'")
    if UserRepository(session).get(user_id) is None:
        raise NotFoundError("User", user_id)

    repository = PushTokenRepository(session)
    try:
        return repository.upsert(user_id=user_id, token=token, platform=platform)
    except IntegrityError:
        # lost an insert race on the unique token column
        session.rollback()
        logger.info("Push token registered concurrently; retrying as an update")
    except SQLAlchemyError as exc:
        session.rollback()
        raise PersistenceError(f"Could not register push token: {exc}") from exc
    try:
        return repository.upsert(user_id=user_id, token=token, platform=platform)
    except SQLAlchemyError as exc:
        session.rollback()
        raise PersistenceError(f"Could not register push token: {exc}") from exc


def deactivate_push_token(session: Session, *, token: str) -> None:
    """Stop delivering to ``token`` (device logout or uninstall)."""

    if not PushTokenRepository(session).deactivate_token(token):
        raise NotFoundError("Push token", token)


__all__ = ["deactivate_push_token", "register_push_token"]
