"""Tests for the in-process change feed."""

from __future__ import annotations

from rallypoint.domain.entities import ChangeEvent
from rallypoint.infrastructure.notifications import ChangeFeed, ChangeFilter


def _inbox_event(user_id: str) -> ChangeEvent:
    return ChangeEvent(
        table="user_notifications",
        action="insert",
        record_id=f"row-{user_id}",
        data={"user_id": user_id},
    )


def test_subscriptions_only_receive_matching_events():
    feed = ChangeFeed()
    ana = feed.watch(ChangeFilter(table="user_notifications", match={"user_id": "ana"}))
    everything = feed.watch()

    feed.publish(_inbox_event("ana"))
    feed.publish(_inbox_event("ben"))
    feed.publish(ChangeEvent(table="notifications", action="update", record_id="n", data={}))

    assert [event.record_id for event in ana.drain()] == ["row-ana"]
    assert len(everything.drain()) == 3


def test_unwatch_stops_delivery_and_releases_subscription():
    feed = ChangeFeed()
    subscription = feed.watch()
    assert feed.subscriber_count == 1

    feed.unwatch(subscription)
    feed.publish(_inbox_event("ana"))

    assert feed.subscriber_count == 0
    assert subscription.closed is True
    assert subscription.drain() == []


def test_get_times_out_with_none():
    subscription = ChangeFeed().watch()

    assert subscription.get(timeout=0.01) is None
