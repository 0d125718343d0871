"""Tests for the Expo push gateway using an in-memory HTTP transport."""

from __future__ import annotations

import json

import httpx
import pytest

from rallypoint.config import Settings
from rallypoint.domain.entities import DeliveryStatus, PushMessage
from rallypoint.infrastructure.push import ExpoPushGateway, PushGatewayError, classify_expo_error

URL = "https://push.example.test/send"


def _gateway(handler, **kwargs) -> ExpoPushGateway:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return ExpoPushGateway(url=URL, client=client, **kwargs)


def _message(token: str = "ExponentPushToken[abc]") -> PushMessage:
    return PushMessage(to=token, title="Venue changed", body="North pier", data={"event_id": "e-1"})


def test_send_posts_batch_and_parses_tickets():
    captured: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["payload"] = json.loads(request.content)
        captured["auth"] = request.headers.get("Authorization")
        return httpx.Response(
            200,
            json={
                "data": [
                    {"status": "ok", "id": "ticket-1"},
                    {
                        "status": "error",
                        "message": "not registered",
                        "details": {"error": "DeviceNotRegistered"},
                    },
                ]
            },
        )

    gateway = _gateway(handler, access_token="secret")
    tickets = gateway.send([_message("tok-1"), _message("tok-2")])

    assert [ticket.status for ticket in tickets] == [
        DeliveryStatus.DELIVERED,
        DeliveryStatus.INVALID_TOKEN,
    ]
    assert tickets[0].ticket_id == "ticket-1"
    assert tickets[1].detail == "not registered"
    assert captured["auth"] == "Bearer secret"
    assert captured["payload"][0] == {
        "to": "tok-1",
        "title": "Venue changed",
        "body": "North pier",
        "data": {"event_id": "e-1"},
        "priority": "high",
        "sound": "default",
        "channelId": "default",
    }


def test_rate_limit_response_is_flagged():
    gateway = _gateway(lambda request: httpx.Response(429))

    with pytest.raises(PushGatewayError) as excinfo:
        gateway.send([_message()])

    assert excinfo.value.rate_limited is True
    assert excinfo.value.status_code == 429


@pytest.mark.parametrize(("status_code", "transient"), [(503, True), (400, False)])
def test_http_errors_carry_transience(status_code, transient):
    body = {"errors": [{"code": "VALIDATION_ERROR", "message": "bad token format"}]}
    gateway = _gateway(lambda request: httpx.Response(status_code, json=body))

    with pytest.raises(PushGatewayError) as excinfo:
        gateway.send([_message()])

    assert excinfo.value.transient is transient
    assert "VALIDATION_ERROR: bad token format" in str(excinfo.value)


def test_network_errors_are_transient():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(PushGatewayError) as excinfo:
        _gateway(handler).send([_message()])

    assert excinfo.value.transient is True


def test_body_without_tickets_is_an_error():
    gateway = _gateway(lambda request: httpx.Response(200, json={"unexpected": True}))

    with pytest.raises(PushGatewayError):
        gateway.send([_message()])


def test_oversized_batch_is_refused_before_any_request():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={"data": []})

    gateway = _gateway(handler, batch_size=2)

    with pytest.raises(ValueError):
        gateway.send([_message(f"tok-{index}") for index in range(3)])
    assert calls == []


def test_empty_batch_makes_no_request():
    gateway = _gateway(lambda request: pytest.fail("no request expected"))

    assert gateway.send([]) == []


@pytest.mark.parametrize(
    ("code", "expected"),
    [
        ("DeviceNotRegistered", DeliveryStatus.INVALID_TOKEN),
        ("MessageRateExceeded", DeliveryStatus.RATE_LIMITED),
        ("MessageTooBig", DeliveryStatus.REJECTED),
        ("SomethingNew", DeliveryStatus.TRANSIENT_ERROR),
        (None, DeliveryStatus.TRANSIENT_ERROR),
    ],
)
def test_classify_expo_error(code, expected):
    assert classify_expo_error(code) is expected


def test_from_settings_caps_batch_size():
    settings = Settings(push_gateway_url=URL, push_batch_size=50)

    gateway = ExpoPushGateway.from_settings(settings)
    try:
        assert gateway.max_batch_size == 50
        assert gateway.url == URL
    finally:
        gateway.close()
