"""Persistence helpers for scheduled reminders."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy.orm import Session

from rallypoint.domain.entities import ScheduledNotification
from rallypoint.infrastructure.models import ScheduledNotificationModel
from rallypoint.utils import from_storage, now_in_app_timezone, to_storage


class ScheduledNotificationRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, scheduled: ScheduledNotification) -> ScheduledNotification:
        model = ScheduledNotificationModel(
            event_id=scheduled.event_id,
            title=scheduled.title,
            content=scheduled.content,
            scheduled_for=to_storage(scheduled.scheduled_for),
            created_by=scheduled.created_by,
            created_at=to_storage(scheduled.created_at or now_in_app_timezone()),
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def list_due(self, now: datetime, *, limit: int | None = 200) -> Sequence[ScheduledNotification]:
        query = (
            self.session.query(ScheduledNotificationModel)
            .filter(ScheduledNotificationModel.processed_at.is_(None))
            .filter(ScheduledNotificationModel.scheduled_for <= to_storage(now))
            .order_by(ScheduledNotificationModel.scheduled_for.asc())
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def mark_processed(
        self, scheduled_id: str, *, notification_id: str | None, processed_at: datetime
    ) -> None:
        (
            self.session.query(ScheduledNotificationModel)
            .filter(ScheduledNotificationModel.id == scheduled_id)
            .filter(ScheduledNotificationModel.processed_at.is_(None))
            .update(
                {
                    ScheduledNotificationModel.processed_at: to_storage(processed_at),
                    ScheduledNotificationModel.notification_id: notification_id,
                },
                synchronize_session=False,
            )
        )
        self.session.commit()

    @staticmethod
    def _to_entity(model: ScheduledNotificationModel) -> ScheduledNotification:
        return ScheduledNotification(
            id=model.id,
            event_id=model.event_id,
            title=model.title,
            content=model.content,
            scheduled_for=from_storage(model.scheduled_for),
            created_by=model.created_by,
            created_at=from_storage(model.created_at),
            processed_at=from_storage(model.processed_at),
            notification_id=model.notification_id,
        )


__all__ = ["ScheduledNotificationRepository"]
