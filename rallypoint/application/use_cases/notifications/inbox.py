"""Read-side helpers for a user's notification inbox."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from sqlalchemy.orm import Session

from rallypoint.domain.entities import InboxEntry
from rallypoint.infrastructure.repositories import NotificationRepository


def list_inbox(
    session: Session,
    *,
    user_id: str,
    unread_only: bool = False,
    limit: int = 50,
) -> Sequence[InboxEntry]:
    """Return the newest notifications delivered to ``user_id``."""

    return NotificationRepository(session).list_for_user(
        user_id, unread_only=unread_only, limit=limit
    )


def mark_inbox_read(session: Session, *, user_id: str, ids: Iterable[str]) -> int:
    """Mark delivery rows as read; rows owned by other users are ignored."""

    unique_ids = list(dict.fromkeys(ids))
    return NotificationRepository(session).mark_as_read(unique_ids, user_id=user_id)


__all__ = ["list_inbox", "mark_inbox_read"]
