"""Value objects exchanged between the dispatcher and a push gateway."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class DeliveryStatus(str, Enum):
    """Classified outcome of one message handed to the gateway."""

    DELIVERED = "delivered"
    INVALID_TOKEN = "invalid_token"
    TRANSIENT_ERROR = "transient_error"
    RATE_LIMITED = "rate_limited"
    REJECTED = "rejected"

    @property
    def is_transient(self) -> bool:
        return self in (DeliveryStatus.TRANSIENT_ERROR, DeliveryStatus.RATE_LIMITED)

    @property
    def is_permanent_failure(self) -> bool:
        return self in (DeliveryStatus.INVALID_TOKEN, DeliveryStatus.REJECTED)


@dataclass(frozen=True)
class PushMessage:
    """One message addressed to one device token."""

    to: str
    title: str
    body: str
    data: dict[str, Any] = field(default_factory=dict)
    sound: str | None = "default"
    priority: str = "high"
    channel_id: str | None = "default"


@dataclass(frozen=True)
class PushTicket:
    """Gateway answer for the message at the same position in the batch."""

    status: DeliveryStatus
    ticket_id: str | None = None
    detail: str | None = None


@dataclass(frozen=True)
class DispatchOutcome:
    user_id: str
    token_id: str | None
    token: str
    status: DeliveryStatus
    detail: str | None = None


@dataclass
class DispatchResult:
    """Everything the status updater needs to know about one dispatch."""

    notification_id: str
    outcomes: list[DispatchOutcome] = field(default_factory=list)
    dispatch_errors: list[str] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return len(self.outcomes)

    def count(self, status: DeliveryStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status is status)

    @property
    def delivered(self) -> int:
        return self.count(DeliveryStatus.DELIVERED)

    @property
    def all_permanent_failures(self) -> bool:
        return bool(self.outcomes) and all(
            outcome.status.is_permanent_failure for outcome in self.outcomes
        )

    @property
    def invalid_token_ids(self) -> list[str]:
        return [
            outcome.token_id
            for outcome in self.outcomes
            if outcome.status is DeliveryStatus.INVALID_TOKEN and outcome.token_id
        ]


__all__ = [
    "DeliveryStatus",
    "DispatchOutcome",
    "DispatchResult",
    "PushMessage",
    "PushTicket",
]
