"""Push gateway backed by the Expo push service."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Any

import httpx

from rallypoint.config import Settings
from rallypoint.domain.entities import DeliveryStatus, PushMessage, PushTicket

from .base import PushGateway, PushGatewayError

logger = logging.getLogger(__name__)

EXPO_MAX_BATCH_SIZE = 100

_ERROR_CLASSIFICATION: dict[str, DeliveryStatus] = {
    "DeviceNotRegistered": DeliveryStatus.INVALID_TOKEN,
    "MessageRateExceeded": DeliveryStatus.RATE_LIMITED,
    "MessageTooBig": DeliveryStatus.REJECTED,
    "InvalidCredentials": DeliveryStatus.REJECTED,
    "MismatchSenderId": DeliveryStatus.REJECTED,
}


def classify_expo_error(code: str | None) -> DeliveryStatus:
    """Map an Expo ticket error code to a :class:`DeliveryStatus`."""

    if not code:
        return DeliveryStatus.TRANSIENT_ERROR
    return _ERROR_CLASSIFICATION.get(code, DeliveryStatus.TRANSIENT_ERROR)


def _extract_error_details(body: Any) -> str | None:
    """Return a human readable description for an Expo error payload."""

    if body in (None, "", b""):
        return None
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None
    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            body = json.loads(body)
        except json.JSONDecodeError:
            return body

    if isinstance(body, dict):
        errors = body.get("errors")
        if isinstance(errors, list):
            messages = [
                f"{item.get('code')}: {item.get('message')}"
                if item.get("code")
                else str(item.get("message"))
                for item in errors
                if isinstance(item, dict) and item.get("message")
            ]
            if messages:
                return "; ".join(messages)
        return json.dumps(body)
    return str(body)


class ExpoPushGateway(PushGateway):
    """Send push messages through the Expo HTTP/2 push endpoint."""

    max_batch_size = EXPO_MAX_BATCH_SIZE

    def __init__(
        self,
        *,
        url: str,
        access_token: str | None = None,
        timeout: float = 10.0,
        batch_size: int = EXPO_MAX_BATCH_SIZE,
        client: httpx.Client | None = None,
    ) -> None:
        self.url = url
        self.max_batch_size = min(batch_size, EXPO_MAX_BATCH_SIZE)
        headers = {
            "Accept": "application/json",
            "Accept-Encoding": "gzip, deflate",
            "Content-Type": "application/json",
        }
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)
        self._headers = headers

    @classmethod
    def from_settings(cls, settings: Settings) -> "ExpoPushGateway":
        return cls(
            url=settings.push_gateway_url,
            access_token=settings.push_access_token,
            timeout=settings.push_timeout_seconds,
            batch_size=settings.push_batch_size,
        )

    def send(self, messages: Sequence[PushMessage]) -> list[PushTicket]:
        if not messages:
            return []
        if len(messages) > self.max_batch_size:
            raise ValueError(
                f"Expo accepts at most {self.max_batch_size} messages per request"
            )

        payload = [self._serialize(message) for message in messages]
        try:
            response = self._client.post(self.url, json=payload, headers=self._headers)
        except httpx.TimeoutException as exc:
            raise PushGatewayError(f"Push gateway timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            raise PushGatewayError(f"Push gateway unreachable: {exc}") from exc

        if response.status_code == 429:
            raise PushGatewayError(
                "Push gateway rate limit exceeded",
                rate_limited=True,
                status_code=response.status_code,
            )
        if not response.is_success:
            details = _extract_error_details(response.content)
            raise PushGatewayError(
                f"Push gateway responded with status {response.status_code}"
                + (f": {details}" if details else ""),
                transient=response.status_code >= 500,
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise PushGatewayError("Push gateway returned a non-JSON body") from exc

        tickets = body.get("data") if isinstance(body, dict) else None
        if not isinstance(tickets, list):
            details = _extract_error_details(body)
            raise PushGatewayError(
                "Push gateway response did not contain tickets"
                + (f": {details}" if details else "")
            )
        return [self._parse_ticket(ticket) for ticket in tickets]

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    @staticmethod
    def _serialize(message: PushMessage) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "to": message.to,
            "title": message.title,
            "body": message.body,
            "data": message.data,
            "priority": message.priority,
        }
        if message.sound:
            payload["sound"] = message.sound
        if message.channel_id:
            payload["channelId"] = message.channel_id
        return payload

    @staticmethod
    def _parse_ticket(ticket: Any) -> PushTicket:
        if not isinstance(ticket, dict):
            return PushTicket(DeliveryStatus.TRANSIENT_ERROR, detail="Malformed ticket")
        if ticket.get("status") == "ok":
            return PushTicket(DeliveryStatus.DELIVERED, ticket_id=ticket.get("id"))

        details = ticket.get("details") or {}
        code = details.get("error") if isinstance(details, dict) else None
        return PushTicket(
            classify_expo_error(code),
            ticket_id=ticket.get("id"),
            detail=ticket.get("message") or code,
        )


__all__ = ["ExpoPushGateway", "EXPO_MAX_BATCH_SIZE", "classify_expo_error"]
