"""Tests for recording dispatch outcomes on notifications."""

from __future__ import annotations

import pytest

from rallypoint.application.use_cases.notifications import (
    NotificationRecordWriter,
    StatusUpdater,
    decide_status,
)
from rallypoint.domain.entities import DeliveryStatus, DispatchOutcome, DispatchResult
from rallypoint.domain.errors import NotFoundError


def _result(*statuses: DeliveryStatus, errors: list[str] | None = None) -> DispatchResult:
    return DispatchResult(
        notification_id="n-1",
        outcomes=[
            DispatchOutcome(user_id="u", token_id=f"t{index}", token=f"tok{index}", status=status)
            for index, status in enumerate(statuses)
        ],
        dispatch_errors=errors or [],
    )


@pytest.mark.parametrize(
    ("statuses", "expected"),
    [
        ((), "sent"),
        ((DeliveryStatus.DELIVERED, DeliveryStatus.INVALID_TOKEN), "sent"),
        ((DeliveryStatus.DELIVERED, DeliveryStatus.TRANSIENT_ERROR), "sent"),
        ((DeliveryStatus.INVALID_TOKEN, DeliveryStatus.INVALID_TOKEN), "failed"),
        ((DeliveryStatus.INVALID_TOKEN, DeliveryStatus.REJECTED), "failed"),
        ((DeliveryStatus.TRANSIENT_ERROR,), "pending"),
        ((DeliveryStatus.RATE_LIMITED, DeliveryStatus.INVALID_TOKEN), "pending"),
    ],
)
def test_decide_status(statuses, expected):
    assert decide_status(_result(*statuses), attempts_so_far=0, max_attempts=5) == expected


def test_decide_status_gives_up_at_the_attempt_cap():
    result = _result(DeliveryStatus.TRANSIENT_ERROR)

    assert decide_status(result, attempts_so_far=3, max_attempts=5) == "pending"
    assert decide_status(result, attempts_so_far=4, max_attempts=5) == "failed"


def _pending_notification(session):
    notification, _ = NotificationRecordWriter(session).create_notification(
        type="direct",
        title="Hello",
        content="",
        data=None,
        created_by=None,
        audience={"u1"},
    )
    return notification


def test_finalize_records_attempt_and_sent_time(session):
    notification = _pending_notification(session)
    updater = StatusUpdater(session, max_attempts=5)

    updated = updater.finalize(notification.id, _result(DeliveryStatus.DELIVERED))

    assert updated.status == "sent"
    assert updated.attempt_count == 1
    assert updated.sent_at is not None
    assert updated.last_attempt_at is not None


def test_pending_outcome_only_counts_the_attempt(session):
    notification = _pending_notification(session)
    updater = StatusUpdater(session, max_attempts=5)

    updated = updater.finalize(
        notification.id, _result(DeliveryStatus.TRANSIENT_ERROR, errors=["timeout"])
    )

    assert updated.status == "pending"
    assert updated.attempt_count == 1
    assert updated.sent_at is None


def test_terminal_status_is_never_overwritten(session):
    notification = _pending_notification(session)
    updater = StatusUpdater(session, max_attempts=5)
    updater.finalize(notification.id, _result(DeliveryStatus.INVALID_TOKEN))

    again = updater.finalize(notification.id, _result(DeliveryStatus.DELIVERED))

    assert again.status == "failed"
    assert again.attempt_count == 1


def test_unknown_notification_raises_not_found(session):
    with pytest.raises(NotFoundError):
        StatusUpdater(session, max_attempts=5).finalize("missing", _result())
