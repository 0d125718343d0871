"""Persistence helpers for notifications and their delivery rows."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime

from sqlalchemy import update
from sqlalchemy.orm import Session

from rallypoint.domain.entities import (
    NOTIFICATION_STATUS_PENDING,
    InboxEntry,
    Notification,
    UserNotification,
)
from rallypoint.infrastructure.models import NotificationModel, UserNotificationModel
from rallypoint.utils import from_storage, now_in_app_timezone, to_storage


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, notification_id: str) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def get_by_trigger(self, trigger_type: str, trigger_id: str) -> Notification | None:
        model = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.trigger_type == trigger_type)
            .filter(NotificationModel.trigger_id == trigger_id)
            .one_or_none()
        )
        return self._to_entity(model) if model else None

    def create_with_recipients(
        self, notification: Notification, user_ids: Iterable[str]
    ) -> tuple[Notification, list[UserNotification]]:
        """Insert ``notification`` and one delivery row per user in one commit.

        Raises whatever the driver raises; the caller owns the rollback.
        """

        model = NotificationModel()
        self._apply_entity_to_model(model, notification)
        created_at = model.created_at
        model.recipients = [
            UserNotificationModel(user_id=user_id, is_read=False, created_at=created_at)
            for user_id in sorted(set(user_ids))
        ]
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        recipients = [self._to_user_notification(row) for row in model.recipients]
        return self._to_entity(model), recipients

    def list_recipient_ids(self, notification_id: str) -> list[str]:
        rows = (
            self.session.query(UserNotificationModel.user_id)
            .filter(UserNotificationModel.notification_id == notification_id)
            .order_by(UserNotificationModel.user_id)
            .all()
        )
        return [user_id for (user_id,) in rows]

    def list_pending(self, *, limit: int | None = 200) -> Sequence[Notification]:
        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.status == NOTIFICATION_STATUS_PENDING)
            .order_by(NotificationModel.created_at.asc(), NotificationModel.id.asc())
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def finalize_attempt(
        self,
        notification_id: str,
        *,
        status: str,
        attempted_at: datetime,
        sent_at: datetime | None = None,
    ) -> bool:
        """Record one dispatch attempt and move the status out of ``pending``.

        The update only matches rows still pending, so a terminal status is
        never overwritten. Returns ``False`` when nothing matched.
        """

        values = {
            NotificationModel.status: status,
            NotificationModel.attempt_count: NotificationModel.attempt_count + 1,
            NotificationModel.last_attempt_at: to_storage(attempted_at),
        }
        if sent_at is not None:
            values[NotificationModel.sent_at] = to_storage(sent_at)
        result = self.session.execute(
            update(NotificationModel)
            .where(NotificationModel.id == notification_id)
            .where(NotificationModel.status == NOTIFICATION_STATUS_PENDING)
            .values(values)
            .execution_options(synchronize_session=False)
        )
        self.session.commit()
        return result.rowcount > 0

    def list_for_user(
        self,
        user_id: str,
        *,
        unread_only: bool = False,
        limit: int | None = 50,
    ) -> Sequence[InboxEntry]:
        query = (
            self.session.query(UserNotificationModel, NotificationModel)
            .join(
                NotificationModel,
                NotificationModel.id == UserNotificationModel.notification_id,
            )
            .filter(UserNotificationModel.user_id == user_id)
        )
        if unread_only:
            query = query.filter(UserNotificationModel.is_read.is_(False))
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if limit is not None:
            query = query.limit(limit)
        return [
            InboxEntry(
                user_notification=self._to_user_notification(row),
                notification=self._to_entity(notification),
            )
            for row, notification in query.all()
        ]

    def mark_as_read(self, user_notification_ids: Iterable[str], *, user_id: str) -> int:
        ids = [value for value in user_notification_ids if value]
        if not ids:
            return 0
        updated = (
            self.session.query(UserNotificationModel)
            .filter(
                UserNotificationModel.id.in_(ids),
                UserNotificationModel.user_id == user_id,
                UserNotificationModel.is_read.is_(False),
            )
            .update(
                {
                    UserNotificationModel.is_read: True,
                    UserNotificationModel.read_at: to_storage(now_in_app_timezone()),
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return updated

    @staticmethod
    def _apply_entity_to_model(model: NotificationModel, notification: Notification) -> None:
        model.type = notification.type
        model.title = notification.title
        model.content = notification.content
        model.data = dict(notification.data or {})
        model.status = notification.status
        model.trigger_type = notification.trigger_type
        model.trigger_id = notification.trigger_id
        model.created_by = notification.created_by
        model.created_at = to_storage(notification.created_at or now_in_app_timezone())
        model.sent_at = to_storage(notification.sent_at)
        model.attempt_count = notification.attempt_count
        model.last_attempt_at = to_storage(notification.last_attempt_at)

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            type=model.type,
            title=model.title,
            content=model.content,
            created_by=model.created_by,
            data=dict(model.data or {}),
            status=model.status,
            trigger_type=model.trigger_type,
            trigger_id=model.trigger_id,
            created_at=from_storage(model.created_at),
            sent_at=from_storage(model.sent_at),
            attempt_count=model.attempt_count or 0,
            last_attempt_at=from_storage(model.last_attempt_at),
        )

    @staticmethod
    def _to_user_notification(model: UserNotificationModel) -> UserNotification:
        return UserNotification(
            id=model.id,
            notification_id=model.notification_id,
            user_id=model.user_id,
            is_read=bool(model.is_read),
            created_at=from_storage(model.created_at),
            read_at=from_storage(model.read_at),
        )


__all__ = ["NotificationRepository"]
