"""Abstract contract every push gateway implementation honours."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from rallypoint.domain.entities import PushMessage, PushTicket


class PushGatewayError(Exception):
    """The gateway call failed as a whole; no per-message tickets exist."""

    def __init__(
        self,
        message: str,
        *,
        transient: bool = True,
        rate_limited: bool = False,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.transient = transient
        self.rate_limited = rate_limited
        self.status_code = status_code


class PushGateway(ABC):
    """Send batches of :class:`PushMessage` and classify each result."""

    max_batch_size: int = 100

    @abstractmethod
    def send(self, messages: Sequence[PushMessage]) -> list[PushTicket]:
        """Deliver ``messages`` in one round trip.

        Returns one ticket per message in the same order. Raises
        :class:`PushGatewayError` when the call itself fails.
        """

    def close(self) -> None:
        """Release network resources held by the gateway."""


__all__ = ["PushGateway", "PushGatewayError"]
