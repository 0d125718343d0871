"""Tests for turning triggers into recipient sets."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from rallypoint.application.use_cases.notifications import AudienceResolver
from rallypoint.domain.entities import DirectTrigger, EventTrigger, ThreadTrigger
from rallypoint.domain.errors import NotFoundError

NOW = datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def resolver(session) -> AudienceResolver:
    return AudienceResolver(session, clock=lambda: NOW)


def test_event_audience_only_includes_approved_attendees(seed, resolver):
    event_id = seed.event()
    ana = seed.user("Ana")
    ben = seed.user("Ben")
    cleo = seed.user("Cleo")
    dana = seed.user("Dana")
    seed.rsvp(event_id, ana)
    seed.rsvp(event_id, ben, status="maybe")
    seed.rsvp(event_id, cleo, is_approved=False)
    seed.rsvp(event_id, dana, status="not_attending")

    assert resolver.resolve(EventTrigger(event_id)) == {ana}


def test_event_audience_respects_preferences_and_inactive_users(seed, resolver):
    event_id = seed.event()
    ana = seed.user("Ana")
    ben = seed.user("Ben", preferences={"notifications": {"push": False}})
    cleo = seed.user("Cleo", is_active=False)
    for user_id in (ana, ben, cleo):
        seed.rsvp(event_id, user_id)

    assert resolver.resolve(EventTrigger(event_id)) == {ana}


def test_event_without_attendees_resolves_to_empty_set(seed, resolver):
    event_id = seed.event()

    assert resolver.resolve(EventTrigger(event_id)) == set()


def test_missing_event_raises_not_found(resolver):
    with pytest.raises(NotFoundError) as excinfo:
        resolver.resolve(EventTrigger("missing-event"))

    assert excinfo.value.resource == "Event"


def test_thread_audience_excludes_sender_and_silenced_members(seed, resolver):
    thread_id = seed.thread()
    sender = seed.user("Sender")
    listener = seed.user("Listener")
    muted = seed.user("Muted")
    mute_expired = seed.user("Expired")
    disabled = seed.user("Disabled")
    left = seed.user("Left")
    chat_off = seed.user("ChatOff", preferences={"notifications": {"chat": False}})

    seed.member(thread_id, sender)
    seed.member(thread_id, listener)
    seed.member(thread_id, muted, mute_until=NOW + timedelta(hours=1))
    seed.member(thread_id, mute_expired, mute_until=NOW - timedelta(minutes=1))
    seed.member(thread_id, disabled, notifications_enabled=False)
    seed.member(thread_id, left, is_active=False, left_at=NOW - timedelta(days=1))
    seed.member(thread_id, chat_off)

    audience = resolver.resolve(ThreadTrigger(thread_id, exclude_user_id=sender))

    assert audience == {listener, mute_expired}


def test_missing_thread_raises_not_found(resolver):
    with pytest.raises(NotFoundError):
        resolver.resolve(ThreadTrigger("missing-thread"))


def test_direct_audience_drops_unknown_users(seed, resolver):
    ana = seed.user("Ana")

    audience = resolver.resolve(DirectTrigger.of([ana, "ghost", "", ana]))

    assert audience == {ana}
