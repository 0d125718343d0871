"""Helpers shared by the API routers."""

from __future__ import annotations

from fastapi import HTTPException, status

from rallypoint.domain.entities import InboxEntry, Notification, PushToken
from rallypoint.domain.errors import NotFoundError, PersistenceError
from rallypoint.interfaces.api.schemas import InboxEntryRead, NotificationRead, PushTokenRead


def to_http_exception(exc: Exception) -> HTTPException:
    """Translate pipeline errors into HTTP responses."""

    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, PersistenceError):
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        )
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


def notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead(
        id=notification.id or "",
        type=notification.type,
        title=notification.title,
        content=notification.content,
        data=notification.data or {},
        status=notification.status,
        created_by=notification.created_by,
        created_at=notification.created_at,
        sent_at=notification.sent_at,
        attempt_count=notification.attempt_count,
    )


def inbox_entry_to_schema(entry: InboxEntry) -> InboxEntryRead:
    row = entry.user_notification
    return InboxEntryRead(
        id=row.id or "",
        notification_id=row.notification_id,
        user_id=row.user_id,
        is_read=row.is_read,
        read_at=row.read_at,
        notification=notification_to_schema(entry.notification),
    )


def push_token_to_schema(token: PushToken) -> PushTokenRead:
    return PushTokenRead(
        id=token.id or "",
        user_id=token.user_id,
        token=token.token,
        platform=token.platform,
        is_active=token.is_active,
        created_at=token.created_at,
        updated_at=token.updated_at,
    )


__all__ = [
    "inbox_entry_to_schema",
    "notification_to_schema",
    "push_token_to_schema",
    "to_http_exception",
]
