"""Tests for mapping recipients to their active device tokens."""

from __future__ import annotations

from rallypoint.application.use_cases.notifications import TokenLookup


def test_every_requested_user_is_a_key(seed, session):
    ana = seed.user("Ana")
    ben = seed.user("Ben")
    seed.token(ana, "ExponentPushToken[ana-phone]")
    seed.token(ana, "ExponentPushToken[ana-tablet]", platform="android")
    seed.token(ana, "ExponentPushToken[ana-old]", is_active=False)

    tokens = TokenLookup(session).tokens_for([ana, ben])

    assert set(tokens) == {ana, ben}
    assert sorted(token.token for token in tokens[ana]) == [
        "ExponentPushToken[ana-phone]",
        "ExponentPushToken[ana-tablet]",
    ]
    assert tokens[ben] == []


def test_empty_request_returns_empty_mapping(session):
    assert TokenLookup(session).tokens_for([]) == {}
