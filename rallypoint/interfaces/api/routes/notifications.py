"""Trigger endpoints, inbox endpoints and the realtime notification socket."""

from __future__ import annotations

import logging

import anyio
from anyio import to_thread
from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status
from sqlalchemy.orm import Session, sessionmaker

from rallypoint.application.use_cases.notifications import (
    NotificationPipeline,
    list_inbox,
    mark_inbox_read,
)
from rallypoint.domain.entities import CHANGE_ACTION_INSERT, ChangeEvent
from rallypoint.domain.errors import NotificationError
from rallypoint.infrastructure.database import get_db
from rallypoint.infrastructure.notifications import ChangeFeed, ChangeFilter, Subscription
from rallypoint.interfaces.api.dependencies import (
    get_change_feed,
    get_pipeline,
    get_session_factory,
)
from rallypoint.interfaces.api.routes_helpers import (
    inbox_entry_to_schema,
    notification_to_schema,
    to_http_exception,
)
from rallypoint.interfaces.api.schemas import (
    DirectNotificationCreate,
    EventNotificationCreate,
    InboxEntryRead,
    NewThreadNotificationCreate,
    NotificationMarkReadRequest,
    NotificationMarkReadResponse,
    NotificationRead,
    ScheduledNotificationCreate,
    ScheduledNotificationRead,
    SweepSummaryRead,
    ThreadMessageNotificationCreate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])

_POLL_INTERVAL_SECONDS = 1.0


@router.post(
    "/events/{event_id}",
    response_model=NotificationRead,
    status_code=status.HTTP_201_CREATED,
)
def notify_event(
    event_id: str,
    payload: EventNotificationCreate,
    pipeline: NotificationPipeline = Depends(get_pipeline),
) -> NotificationRead:
    """Send an announcement to every attendee of ``event_id``."""

    try:
        notification = pipeline.notify_event(
            event_id,
            payload.title,
            payload.content,
            payload.created_by,
            idempotency_key=payload.idempotency_key,
        )
    except (NotificationError, ValueError) as exc:
        raise to_http_exception(exc) from exc
    return notification_to_schema(notification)


@router.post(
    "/threads/{thread_id}/messages",
    response_model=NotificationRead,
    status_code=status.HTTP_201_CREATED,
)
def notify_thread_message(
    thread_id: str,
    payload: ThreadMessageNotificationCreate,
    pipeline: NotificationPipeline = Depends(get_pipeline),
) -> NotificationRead:
    """Notify thread members about a chat message; repeats are idempotent."""

    try:
        notification = pipeline.notify_thread_message(
            thread_id,
            payload.message_id,
            payload.sender_id,
            payload.content_preview,
            sender_name=payload.sender_name,
        )
    except (NotificationError, ValueError) as exc:
        raise to_http_exception(exc) from exc
    return notification_to_schema(notification)


@router.post(
    "/threads/{thread_id}/created",
    response_model=NotificationRead,
    status_code=status.HTTP_201_CREATED,
)
def notify_new_thread(
    thread_id: str,
    payload: NewThreadNotificationCreate,
    pipeline: NotificationPipeline = Depends(get_pipeline),
) -> NotificationRead:
    try:
        notification = pipeline.notify_new_thread(thread_id, payload.created_by)
    except (NotificationError, ValueError) as exc:
        raise to_http_exception(exc) from exc
    return notification_to_schema(notification)


@router.post("/direct", response_model=NotificationRead, status_code=status.HTTP_201_CREATED)
def notify_users(
    payload: DirectNotificationCreate,
    pipeline: NotificationPipeline = Depends(get_pipeline),
) -> NotificationRead:
    try:
        notification = pipeline.notify_users(
            payload.user_ids,
            payload.title,
            payload.content,
            payload.created_by,
            data=payload.data,
            idempotency_key=payload.idempotency_key,
        )
    except (NotificationError, ValueError) as exc:
        raise to_http_exception(exc) from exc
    return notification_to_schema(notification)


@router.post(
    "/scheduled",
    response_model=ScheduledNotificationRead,
    status_code=status.HTTP_201_CREATED,
)
def schedule_reminder(
    payload: ScheduledNotificationCreate,
    pipeline: NotificationPipeline = Depends(get_pipeline),
) -> ScheduledNotificationRead:
    try:
        scheduled = pipeline.schedule_reminder(
            payload.event_id,
            payload.title,
            payload.content,
            payload.scheduled_for,
            payload.created_by,
        )
    except (NotificationError, ValueError) as exc:
        raise to_http_exception(exc) from exc
    return ScheduledNotificationRead(
        id=scheduled.id or "",
        event_id=scheduled.event_id,
        title=scheduled.title,
        content=scheduled.content,
        scheduled_for=scheduled.scheduled_for,
        created_by=scheduled.created_by,
        processed_at=scheduled.processed_at,
        notification_id=scheduled.notification_id,
    )


@router.post("/process-pending", response_model=SweepSummaryRead)
def process_pending(
    pipeline: NotificationPipeline = Depends(get_pipeline),
) -> SweepSummaryRead:
    """Run one sweep immediately (the scheduler does this periodically)."""

    try:
        summary = pipeline.process_pending()
    except NotificationError as exc:
        raise to_http_exception(exc) from exc
    return SweepSummaryRead(**vars(summary))


@router.get("/users/{user_id}", response_model=list[InboxEntryRead])
def list_user_notifications(
    user_id: str,
    unread_only: bool = Query(default=False),
    limit: int = Query(default=50, ge=1, le=200),
    db: Session = Depends(get_db),
) -> list[InboxEntryRead]:
    """Return the most recent notifications delivered to ``user_id``."""

    entries = list_inbox(db, user_id=user_id, unread_only=unread_only, limit=limit)
    return [inbox_entry_to_schema(entry) for entry in entries]


@router.post("/users/{user_id}/read", response_model=NotificationMarkReadResponse)
def mark_user_notifications_read(
    user_id: str,
    payload: NotificationMarkReadRequest,
    db: Session = Depends(get_db),
) -> NotificationMarkReadResponse:
    updated = mark_inbox_read(db, user_id=user_id, ids=payload.ids)
    return NotificationMarkReadResponse(updated=updated)


@router.websocket("/ws")
async def notifications_websocket(
    websocket: WebSocket,
    feed: ChangeFeed = Depends(get_change_feed),
    session_factory: sessionmaker = Depends(get_session_factory),
) -> None:
    """Stream new inbox entries for ``user_id`` while the socket is open."""

    user_id = websocket.query_params.get("user_id")
    if not user_id:
        await websocket.close(code=1008)
        return

    session = session_factory()
    try:
        unread = [
            inbox_entry_to_schema(entry).model_dump(mode="json")
            for entry in list_inbox(session, user_id=user_id, unread_only=True)
        ]
    finally:
        session.close()

    await websocket.accept()
    subscription = feed.watch(
        ChangeFilter(
            table="user_notifications",
            action=CHANGE_ACTION_INSERT,
            match={"user_id": user_id},
        )
    )
    logger.debug("Notification socket opened for user %s", user_id)
    try:
        await websocket.send_json({"type": "init", "data": unread})
        async with anyio.create_task_group() as task_group:
            task_group.start_soon(_forward_changes, websocket, subscription)
            await _receive_commands(websocket, user_id, session_factory)
            task_group.cancel_scope.cancel()
    finally:
        feed.unwatch(subscription)
        logger.debug("Notification socket closed for user %s", user_id)


async def _forward_changes(websocket: WebSocket, subscription: Subscription) -> None:
    while not subscription.closed:
        event = await to_thread.run_sync(subscription.get, _POLL_INTERVAL_SECONDS)
        if event is None:
            continue
        try:
            await websocket.send_json({"type": "notification", "data": _serialize_change(event)})
        except (RuntimeError, WebSocketDisconnect):
            return


async def _receive_commands(
    websocket: WebSocket, user_id: str, session_factory: sessionmaker
) -> None:
    while True:
        try:
            message = await websocket.receive_json()
        except WebSocketDisconnect:
            return
        except ValueError:
            continue

        if not isinstance(message, dict):
            continue

        message_type = message.get("type")
        if message_type == "ping":
            await websocket.send_json({"type": "pong"})
        elif message_type == "ack":
            ids = message.get("ids", [])
            if isinstance(ids, list) and ids:
                session = session_factory()
                try:
                    mark_inbox_read(session, user_id=user_id, ids=[str(value) for value in ids])
                finally:
                    session.close()


def _serialize_change(event: ChangeEvent) -> dict[str, object]:
    payload = dict(event.data)
    payload["id"] = event.record_id
    return payload


__all__ = ["router"]
