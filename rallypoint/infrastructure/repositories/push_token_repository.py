"""Persistence helpers for device push tokens."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from sqlalchemy.orm import Session

from rallypoint.domain.entities import PushToken
from rallypoint.infrastructure.models import PushTokenModel
from rallypoint.utils import from_storage, now_in_app_timezone, to_storage


class PushTokenRepository:
    """Read active tokens and maintain their ``is_active`` flag."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_active_for_users(self, user_ids: Iterable[str]) -> Sequence[PushToken]:
        ids = sorted({user_id for user_id in user_ids if user_id})
        if not ids:
            return []
        query = (
            self.session.query(PushTokenModel)
            .filter(PushTokenModel.user_id.in_(ids))
            .filter(PushTokenModel.is_active.is_(True))
            .order_by(PushTokenModel.user_id, PushTokenModel.created_at)
        )
        return [self._to_entity(model) for model in query.all()]

    def get_by_token(self, token: str) -> PushToken | None:
        model = self._get_model(token)
        return self._to_entity(model) if model else None

    def upsert(self, *, user_id: str, token: str, platform: str) -> PushToken:
        """Register ``token`` for ``user_id``, reactivating it if it exists."""

        model = self._get_model(token)
        if model is None:
            model = PushTokenModel(token=token)
            self.session.add(model)
        model.user_id = user_id
        model.platform = platform
        model.is_active = True
        model.updated_at = to_storage(now_in_app_timezone())
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def deactivate(self, token_ids: Iterable[str]) -> int:
        """Mark the given tokens inactive. Already inactive rows are left alone."""

        ids = sorted({token_id for token_id in token_ids if token_id})
        if not ids:
            return 0
        updated = (
            self.session.query(PushTokenModel)
            .filter(PushTokenModel.id.in_(ids), PushTokenModel.is_active.is_(True))
            .update(
                {
                    PushTokenModel.is_active: False,
                    PushTokenModel.updated_at: to_storage(now_in_app_timezone()),
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return updated

    def deactivate_token(self, token: str) -> bool:
        model = self._get_model(token)
        if model is None:
            return False
        self.deactivate([model.id])
        return True

    def _get_model(self, token: str) -> PushTokenModel | None:
        return (
            self.session.query(PushTokenModel)
            .filter(PushTokenModel.token == token)
            .one_or_none()
        )

    @staticmethod
    def _to_entity(model: PushTokenModel) -> PushToken:
        return PushToken(
            id=model.id,
            user_id=model.user_id,
            token=model.token,
            platform=model.platform,
            is_active=bool(model.is_active),
            created_at=from_storage(model.created_at),
            updated_at=from_storage(model.updated_at),
        )


__all__ = ["PushTokenRepository"]
