"""Hand notifications to the push gateway and classify what came back."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence

from sqlalchemy.exc import SQLAlchemyError

from rallypoint.domain.entities import (
    DeliveryStatus,
    DispatchOutcome,
    DispatchResult,
    Notification,
    PushMessage,
    PushTicket,
    PushToken,
)
from rallypoint.infrastructure.push import PushGateway, PushGatewayError
from rallypoint.infrastructure.repositories import PushTokenRepository

logger = logging.getLogger(__name__)


class PushDispatcher:
    """Best-effort, single-attempt delivery of one notification.

    Every ``(user, token)`` pair becomes one message; messages are chunked to
    the gateway's batch limit. Nothing raised by the gateway escapes
    :meth:`dispatch`: whole-call failures are recorded on the result and
    classified per message so the status updater can still run.
    """

    def __init__(
        self,
        gateway: PushGateway,
        token_repository: PushTokenRepository,
        *,
        batch_size: int | None = None,
    ) -> None:
        self._gateway = gateway
        self._tokens = token_repository
        limit = gateway.max_batch_size
        self.batch_size = min(batch_size, limit) if batch_size else limit

    def dispatch(
        self,
        notification: Notification,
        tokens_by_user: Mapping[str, Sequence[PushToken]],
    ) -> DispatchResult:
        result = DispatchResult(notification_id=notification.id)
        targets = [
            (user_id, token)
            for user_id, tokens in tokens_by_user.items()
            for token in tokens
            if token.is_active
        ]
        if not targets:
            logger.info("Notification %s has no active tokens to deliver to", notification.id)
            return result

        for chunk in _chunks(targets, self.batch_size):
            messages = [
                self._build_message(notification, user_id, token) for user_id, token in chunk
            ]
            tickets = self._send(notification, messages, result)
            for (user_id, token), ticket in zip(chunk, tickets):
                result.outcomes.append(
                    DispatchOutcome(
                        user_id=user_id,
                        token_id=token.id,
                        token=token.token,
                        status=ticket.status,
                        detail=ticket.detail,
                    )
                )

        self._deactivate_invalid_tokens(result)
        self._log_result(notification, result)
        return result

    def _send(
        self,
        notification: Notification,
        messages: list[PushMessage],
        result: DispatchResult,
    ) -> list[PushTicket]:
        try:
            tickets = self._gateway.send(messages)
        except PushGatewayError as exc:
            if exc.rate_limited:
                status = DeliveryStatus.RATE_LIMITED
            elif exc.transient:
                status = DeliveryStatus.TRANSIENT_ERROR
            else:
                status = DeliveryStatus.REJECTED
            logger.warning(
                "Push gateway call for notification %s failed (%s): %s",
                notification.id,
                status.value,
                exc,
            )
            result.dispatch_errors.append(str(exc))
            return [PushTicket(status, detail=str(exc)) for _ in messages]
        except Exception as exc:
            logger.exception(
                "Unexpected push gateway error for notification %s", notification.id
            )
            result.dispatch_errors.append(repr(exc))
            return [
                PushTicket(DeliveryStatus.TRANSIENT_ERROR, detail=repr(exc))
                for _ in messages
            ]

        if len(tickets) < len(messages):
            logger.warning(
                "Push gateway returned %d ticket(s) for %d message(s) of notification %s",
                len(tickets),
                len(messages),
                notification.id,
            )
            tickets = list(tickets) + [
                PushTicket(DeliveryStatus.TRANSIENT_ERROR, detail="Missing ticket")
                for _ in range(len(messages) - len(tickets))
            ]
        return list(tickets)

    def _deactivate_invalid_tokens(self, result: DispatchResult) -> None:
        token_ids = result.invalid_token_ids
        if not token_ids:
            return
        try:
            updated = self._tokens.deactivate(token_ids)
        except SQLAlchemyError as exc:
            self._tokens.session.rollback()
            logger.error("Could not deactivate %d invalid token(s): %s", len(token_ids), exc)
            return
        logger.info("Deactivated %d invalid push token(s)", updated)

    @staticmethod
    def _build_message(
        notification: Notification, user_id: str, token: PushToken
    ) -> PushMessage:
        data = dict(notification.data or {})
        data.update(
            {
                "notification_id": notification.id,
                "user_id": user_id,
                "type": notification.type,
            }
        )
        return PushMessage(
            to=token.token,
            title=notification.title,
            body=notification.content,
            data=data,
        )

    @staticmethod
    def _log_result(notification: Notification, result: DispatchResult) -> None:
        transient = result.count(DeliveryStatus.TRANSIENT_ERROR) + result.count(
            DeliveryStatus.RATE_LIMITED
        )
        logger.info(
            "Dispatched notification %s: %d attempted, %d delivered, %d invalid, "
            "%d rejected, %d transient",
            notification.id,
            result.attempted,
            result.delivered,
            result.count(DeliveryStatus.INVALID_TOKEN),
            result.count(DeliveryStatus.REJECTED),
            transient,
        )


def _chunks(items: list, size: int) -> Iterator[list]:
    for start in range(0, len(items), size):
        yield items[start : start + size]


__all__ = ["PushDispatcher"]
