"""Map recipients to their active push tokens."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy.orm import Session

from rallypoint.domain.entities import PushToken
from rallypoint.infrastructure.repositories import PushTokenRepository


class TokenLookup:
    def __init__(self, session: Session) -> None:
        self._repository = PushTokenRepository(session)

    def tokens_for(self, user_ids: Iterable[str]) -> dict[str, list[PushToken]]:
        """Every requested user is a key; untokened users map to ``[]``."""

        tokens_by_user: dict[str, list[PushToken]] = {
            user_id: [] for user_id in user_ids if user_id
        }
        for token in self._repository.list_active_for_users(tokens_by_user):
            tokens_by_user.setdefault(token.user_id, []).append(token)
        return tokens_by_user


__all__ = ["TokenLookup"]
