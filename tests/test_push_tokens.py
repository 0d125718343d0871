"""Tests for device token registration use cases."""

from __future__ import annotations

import pytest

from rallypoint.application.use_cases.push_tokens import (
    deactivate_push_token,
    register_push_token,
)
from rallypoint.domain.errors import NotFoundError
from rallypoint.infrastructure.models import PushTokenModel
from rallypoint.infrastructure.repositories import PushTokenRepository


def test_registering_a_known_token_moves_and_reactivates_it(seed, session):
    ana, ben = seed.user("Ana"), seed.user("Ben")
    seed.token(ana, "tok-shared", is_active=False)

    token = register_push_token(session, user_id=ben, token=" tok-shared ", platform="Android")

    assert token.user_id == ben
    assert token.platform == "android"
    assert token.is_active is True
    assert session.query(PushTokenModel).count() == 1


@pytest.mark.parametrize(
    ("token", "platform"),
    [("", "ios"), ("tok", "blackberry")],
)
def test_invalid_registrations_are_rejected(seed, session, token, platform):
    ana = seed.user("Ana")

    with pytest.raises(ValueError):
        register_push_token(session, user_id=ana, token=token, platform=platform)


def test_deactivating_unknown_token_raises(session):
    with pytest.raises(NotFoundError):
        deactivate_push_token(session, token="nope")


def test_deactivation_is_idempotent(seed, session):
    ana = seed.user("Ana")
    seed.token(ana, "tok-1")

    deactivate_push_token(session, token="tok-1")
    deactivate_push_token(session, token="tok-1")

    assert session.query(PushTokenModel).one().is_active is False


def test_concurrent_registration_of_the_same_token_updates_the_winner(
    seed, session, monkeypatch
):
    ana, ben = seed.user("Ana"), seed.user("Ben")
    seed.token(ana, "tok-race")

    original_get_model = PushTokenRepository._get_model
    lookups = []

    def stale_get_model(self, token):
        lookups.append(token)
        if len(lookups) == 1:
            return None
        return original_get_model(self, token)

    monkeypatch.setattr(PushTokenRepository, "_get_model", stale_get_model)

    token = register_push_token(session, user_id=ben, token="tok-race", platform="web")

    assert token.user_id == ben
    assert token.platform == "web"
    assert session.query(PushTokenModel).count() == 1
