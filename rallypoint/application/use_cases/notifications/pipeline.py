"""Trigger entry points for the notification fan-out pipeline."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rallypoint.config import Settings, get_settings
from rallypoint.domain.entities import (
    NOTIFICATION_STATUS_FAILED,
    NOTIFICATION_STATUS_SENT,
    NOTIFICATION_TYPE_CHAT_MESSAGE,
    NOTIFICATION_TYPE_DIRECT,
    NOTIFICATION_TYPE_EVENT_UPDATE,
    NOTIFICATION_TYPE_NEW_THREAD,
    NOTIFICATION_TYPE_SCHEDULED_REMINDER,
    DirectTrigger,
    EventTrigger,
    Notification,
    ScheduledNotification,
    ThreadTrigger,
)
from rallypoint.domain.errors import NotFoundError, PersistenceError
from rallypoint.infrastructure.notifications import ChangeFeed
from rallypoint.infrastructure.push import PushGateway
from rallypoint.infrastructure.repositories import (
    ChatRepository,
    EventRepository,
    NotificationRepository,
    PushTokenRepository,
    ScheduledNotificationRepository,
    UserRepository,
)
from rallypoint.utils import now_in_app_timezone

from .audience import AudienceResolver
from .dispatch import PushDispatcher
from .records import NotificationRecordWriter
from .status import StatusUpdater
from .tokens import TokenLookup

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 100


def preview(text: str, *, limit: int = PREVIEW_LENGTH) -> str:
    """Shorten chat content for a notification body."""

    text = (text or "").strip()
    return text if len(text) <= limit else f"{text[:limit]}..."


@dataclass
class SweepSummary:
    reminders_created: int = 0
    processed: int = 0
    sent: int = 0
    failed: int = 0
    pending: int = 0


class NotificationPipeline:
    """Compose resolver, writer, lookup, dispatcher and status updater.

    Collaborators are injected so callers decide which session, gateway and
    change feed a run uses. Push failures never propagate out of the trigger
    methods; only missing trigger targets (:class:`NotFoundError`) and failed
    writes (:class:`PersistenceError`) do.
    """

    def __init__(
        self,
        session: Session,
        gateway: PushGateway,
        *,
        settings: Settings | None = None,
        change_feed: ChangeFeed | None = None,
        clock: Callable[[], datetime] = now_in_app_timezone,
    ) -> None:
        self.session = session
        self.settings = settings or get_settings()
        self._clock = clock
        self.resolver = AudienceResolver(session, clock=clock)
        self.writer = NotificationRecordWriter(session, change_feed=change_feed)
        self.token_lookup = TokenLookup(session)
        self.dispatcher = PushDispatcher(
            gateway,
            PushTokenRepository(session),
            batch_size=self.settings.push_batch_size,
        )
        self.status_updater = StatusUpdater(
            session,
            max_attempts=self.settings.push_max_attempts,
            change_feed=change_feed,
            clock=clock,
        )
        self._notifications = NotificationRepository(session)

    def notify_event(
        self,
        event_id: str,
        title: str,
        content: str,
        created_by: str | None,
        *,
        idempotency_key: str | None = None,
    ) -> Notification:
        """Announce something to everyone attending ``event_id``."""

        audience = self.resolver.resolve(EventTrigger(event_id))
        notification, created = self.writer.create_notification(
            type=NOTIFICATION_TYPE_EVENT_UPDATE,
            title=title,
            content=content,
            data={"event_id": event_id},
            created_by=created_by,
            audience=audience,
            trigger_id=idempotency_key,
        )
        if not created:
            return notification
        return self._deliver(notification, audience)

    def notify_thread_message(
        self,
        thread_id: str,
        message_id: str,
        sender_id: str,
        content_preview: str,
        *,
        sender_name: str | None = None,
    ) -> Notification:
        """Tell the other thread members about a new chat message."""

        thread = ChatRepository(self.session).get_thread(thread_id)
        if thread is None:
            raise NotFoundError("Chat thread", thread_id)
        audience = self.resolver.resolve(
            ThreadTrigger(thread_id, exclude_user_id=sender_id)
        )

        sender = sender_name or self._user_name(sender_id) or "New message"
        title = f"{sender} in {thread.name}" if thread.name else sender
        notification, created = self.writer.create_notification(
            type=NOTIFICATION_TYPE_CHAT_MESSAGE,
            title=title,
            content=preview(content_preview),
            data={"thread_id": thread_id, "message_id": message_id, "sender_id": sender_id},
            created_by=sender_id,
            audience=audience,
            trigger_id=message_id,
        )
        if not created:
            return notification
        return self._deliver(notification, audience)

    def notify_new_thread(self, thread_id: str, created_by: str | None) -> Notification:
        """Tell members they were added to a newly created thread."""

        thread = ChatRepository(self.session).get_thread(thread_id)
        if thread is None:
            raise NotFoundError("Chat thread", thread_id)
        creator = created_by or thread.created_by
        audience = self.resolver.resolve(ThreadTrigger(thread_id, exclude_user_id=creator))

        name = thread.name or "a new conversation"
        creator_name = self._user_name(creator) if creator else None
        content = (
            f"{creator_name} added you to {name}" if creator_name else f"You were added to {name}"
        )
        notification, created = self.writer.create_notification(
            type=NOTIFICATION_TYPE_NEW_THREAD,
            title=f"New chat: {name}",
            content=content,
            data={"thread_id": thread_id},
            created_by=creator,
            audience=audience,
            trigger_id=thread_id,
        )
        if not created:
            return notification
        return self._deliver(notification, audience)

    def notify_users(
        self,
        user_ids: Iterable[str],
        title: str,
        content: str,
        created_by: str | None,
        *,
        data: dict[str, Any] | None = None,
        idempotency_key: str | None = None,
    ) -> Notification:
        """Address an explicit list of users."""

        audience = self.resolver.resolve(DirectTrigger.of(user_ids))
        notification, created = self.writer.create_notification(
            type=NOTIFICATION_TYPE_DIRECT,
            title=title,
            content=content,
            data=data,
            created_by=created_by,
            audience=audience,
            trigger_id=idempotency_key,
        )
        if not created:
            return notification
        return self._deliver(notification, audience)

    def schedule_reminder(
        self,
        event_id: str,
        title: str,
        content: str,
        scheduled_for: datetime,
        created_by: str | None,
    ) -> ScheduledNotification:
        """Queue a reminder for the attendees of ``event_id``."""

        if EventRepository(self.session).get(event_id) is None:
            raise NotFoundError("Event", event_id)
        if not title or not title.strip():
            raise ValueError("Reminder title must not be empty")
        try:
            return ScheduledNotificationRepository(self.session).create(
                ScheduledNotification(
                    id=None,
                    event_id=event_id,
                    title=title.strip(),
                    content=content or "",
                    scheduled_for=scheduled_for,
                    created_by=created_by,
                )
            )
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceError(f"Could not schedule reminder: {exc}") from exc

    def process_pending(self) -> SweepSummary:
        """Materialize due reminders, then retry every pending notification."""

        summary = SweepSummary()
        summary.reminders_created = self._materialize_due_reminders()

        pending = self._notifications.list_pending(limit=self.settings.sweep_batch_size)
        for notification in pending:
            recipients = self._notifications.list_recipient_ids(notification.id)
            final = self._deliver(notification, recipients)
            summary.processed += 1
            if final.status == NOTIFICATION_STATUS_SENT:
                summary.sent += 1
            elif final.status == NOTIFICATION_STATUS_FAILED:
                summary.failed += 1
            else:
                summary.pending += 1

        if summary.processed or summary.reminders_created:
            logger.info(
                "Sweep finished: %d reminder(s) created, %d processed, %d sent, "
                "%d failed, %d still pending",
                summary.reminders_created,
                summary.processed,
                summary.sent,
                summary.failed,
                summary.pending,
            )
        return summary

    def _materialize_due_reminders(self) -> int:
        repository = ScheduledNotificationRepository(self.session)
        created = 0
        for scheduled in repository.list_due(self._clock(), limit=self.settings.sweep_batch_size):
            try:
                audience = self.resolver.resolve(EventTrigger(scheduled.event_id))
            except NotFoundError:
                logger.warning(
                    "Dropping reminder %s: event %s no longer exists",
                    scheduled.id,
                    scheduled.event_id,
                )
                repository.mark_processed(
                    scheduled.id, notification_id=None, processed_at=self._clock()
                )
                continue

            notification, was_created = self.writer.create_notification(
                type=NOTIFICATION_TYPE_SCHEDULED_REMINDER,
                title=scheduled.title,
                content=scheduled.content,
                data={"event_id": scheduled.event_id, "scheduled_notification_id": scheduled.id},
                created_by=scheduled.created_by,
                audience=audience,
                trigger_id=scheduled.id,
            )
            repository.mark_processed(
                scheduled.id, notification_id=notification.id, processed_at=self._clock()
            )
            created += int(was_created)
        return created

    def _deliver(self, notification: Notification, recipients: Iterable[str]) -> Notification:
        """Look up tokens, dispatch and finalize; failures leave it pending."""

        try:
            tokens_by_user = self.token_lookup.tokens_for(recipients)
            result = self.dispatcher.dispatch(notification, tokens_by_user)
            return self.status_updater.finalize(notification.id, result)
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error(
                "Delivery bookkeeping for notification %s failed; the sweep will retry: %s",
                notification.id,
                exc,
            )
            return notification

    def _user_name(self, user_id: str | None) -> str | None:
        if not user_id:
            return None
        user = UserRepository(self.session).get(user_id)
        return user.name if user else None


__all__ = ["NotificationPipeline", "SweepSummary", "preview"]
