"""Write a notification and its delivery rows as one unit."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from rallypoint.domain.entities import (
    CHANGE_ACTION_INSERT,
    NOTIFICATION_STATUS_PENDING,
    NOTIFICATION_TYPES,
    ChangeEvent,
    Notification,
    UserNotification,
)
from rallypoint.domain.errors import PersistenceError
from rallypoint.infrastructure.notifications import ChangeFeed
from rallypoint.infrastructure.repositories import NotificationRepository
from rallypoint.utils import now_in_app_timezone

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 200


def clip_title(title: str, limit: int = TITLE_MAX_LENGTH) -> str:
    """Fit ``title`` into the notifications title column."""

    title = title.strip()
    return title if len(title) <= limit else f"{title[: limit - 3].rstrip()}..."


class NotificationRecordWriter:
    """Persist notifications idempotently per ``(trigger_type, trigger_id)``."""

    def __init__(self, session: Session, *, change_feed: ChangeFeed | None = None) -> None:
        self.session = session
        self._repository = NotificationRepository(session)
        self._change_feed = change_feed

    def create_notification(
        self,
        *,
        type: str,
        title: str,
        content: str,
        data: dict[str, Any] | None,
        created_by: str | None,
        audience: Iterable[str],
        trigger_type: str | None = None,
        trigger_id: str | None = None,
    ) -> tuple[Notification, bool]:
        """Return the stored notification and whether this call created it."""

        if type not in NOTIFICATION_TYPES:
            raise ValueError(f"Unknown notification type '{type}'")
        if not title or not title.strip():
            raise ValueError("Notification title must not be empty")
        if trigger_id is not None and trigger_type is None:
            trigger_type = type

        if trigger_id is not None:
            existing = self._repository.get_by_trigger(trigger_type, trigger_id)
            if existing is not None:
                logger.info(
                    "Notification for %s/%s already exists (%s); skipping fan-out",
                    trigger_type,
                    trigger_id,
                    existing.id,
                )
                return existing, False

        notification = Notification(
            id=None,
            type=type,
            title=clip_title(title),
            content=content or "",
            created_by=created_by,
            data=dict(data or {}),
            status=NOTIFICATION_STATUS_PENDING,
            trigger_type=trigger_type,
            trigger_id=trigger_id,
            created_at=now_in_app_timezone(),
        )

        try:
            saved, recipients = self._repository.create_with_recipients(
                notification, audience
            )
        except IntegrityError as exc:
            self.session.rollback()
            if trigger_id is not None:
                existing = self._repository.get_by_trigger(trigger_type, trigger_id)
                if existing is not None:
                    logger.info(
                        "Concurrent trigger %s/%s resolved to existing notification %s",
                        trigger_type,
                        trigger_id,
                        existing.id,
                    )
                    return existing, False
            raise PersistenceError(f"Could not store notification: {exc.orig}") from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceError(f"Could not store notification: {exc}") from exc

        logger.info(
            "Created %s notification %s with %d recipient(s)",
            saved.type,
            saved.id,
            len(recipients),
        )
        self._publish(saved, recipients)
        return saved, True

    def _publish(self, notification: Notification, recipients: list[UserNotification]) -> None:
        if self._change_feed is None:
            return
        self._change_feed.publish(
            ChangeEvent(
                table="notifications",
                action=CHANGE_ACTION_INSERT,
                record_id=notification.id,
                data={"type": notification.type, "status": notification.status},
            )
        )
        for recipient in recipients:
            self._change_feed.publish(
                ChangeEvent(
                    table="user_notifications",
                    action=CHANGE_ACTION_INSERT,
                    record_id=recipient.id,
                    data={
                        "user_id": recipient.user_id,
                        "notification_id": notification.id,
                        "type": notification.type,
                        "title": notification.title,
                        "content": notification.content,
                        "data": dict(notification.data),
                    },
                )
            )


__all__ = ["NotificationRecordWriter", "TITLE_MAX_LENGTH", "clip_title"]
