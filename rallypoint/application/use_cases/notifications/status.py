"""Record the outcome of a dispatch on the notification row."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from sqlalchemy.orm import Session

from rallypoint.domain.entities import (
    CHANGE_ACTION_UPDATE,
    NOTIFICATION_STATUS_FAILED,
    NOTIFICATION_STATUS_PENDING,
    NOTIFICATION_STATUS_SENT,
    ChangeEvent,
    DispatchResult,
    Notification,
)
from rallypoint.domain.errors import NotFoundError
from rallypoint.infrastructure.notifications import ChangeFeed
from rallypoint.infrastructure.repositories import NotificationRepository
from rallypoint.utils import now_in_app_timezone

logger = logging.getLogger(__name__)


def decide_status(result: DispatchResult, *, attempts_so_far: int, max_attempts: int) -> str:
    """Return the status ``result`` leads to.

    * nothing to deliver, or at least one delivery -> ``sent``
    * every attempted token failed permanently -> ``failed``
    * otherwise the notification stays ``pending`` for the next sweep, until
      ``max_attempts`` dispatches have been made.
    """

    if result.attempted == 0 or result.delivered > 0:
        return NOTIFICATION_STATUS_SENT
    if result.all_permanent_failures:
        return NOTIFICATION_STATUS_FAILED
    if attempts_so_far + 1 >= max_attempts:
        return NOTIFICATION_STATUS_FAILED
    return NOTIFICATION_STATUS_PENDING


class StatusUpdater:
    """Move notifications out of ``pending``; never touches delivery rows."""

    def __init__(
        self,
        session: Session,
        *,
        max_attempts: int,
        change_feed: ChangeFeed | None = None,
        clock: Callable[[], datetime] = now_in_app_timezone,
    ) -> None:
        self._repository = NotificationRepository(session)
        self._max_attempts = max_attempts
        self._change_feed = change_feed
        self._clock = clock

    def finalize(self, notification_id: str, result: DispatchResult) -> Notification:
        notification = self._repository.get(notification_id)
        if notification is None:
            raise NotFoundError("Notification", notification_id)
        if notification.is_terminal:
            logger.debug(
                "Notification %s is already %s; leaving it untouched",
                notification_id,
                notification.status,
            )
            return notification

        status = decide_status(
            result,
            attempts_so_far=notification.attempt_count,
            max_attempts=self._max_attempts,
        )
        now = self._clock()
        updated = self._repository.finalize_attempt(
            notification_id,
            status=status,
            attempted_at=now,
            sent_at=now if status == NOTIFICATION_STATUS_SENT else None,
        )
        refreshed = self._repository.get(notification_id) or notification
        if not updated:
            return refreshed

        if status == NOTIFICATION_STATUS_PENDING:
            logger.warning(
                "Notification %s stays pending after attempt %d (%s)",
                notification_id,
                refreshed.attempt_count,
                "; ".join(result.dispatch_errors) or "transient delivery errors",
            )
        elif status == NOTIFICATION_STATUS_FAILED:
            logger.warning(
                "Notification %s failed after %d attempt(s)",
                notification_id,
                refreshed.attempt_count,
            )
        else:
            logger.info("Notification %s marked as sent", notification_id)

        if self._change_feed is not None and status != NOTIFICATION_STATUS_PENDING:
            self._change_feed.publish(
                ChangeEvent(
                    table="notifications",
                    action=CHANGE_ACTION_UPDATE,
                    record_id=notification_id,
                    data={"status": status},
                )
            )
        return refreshed


__all__ = ["StatusUpdater", "decide_status"]
