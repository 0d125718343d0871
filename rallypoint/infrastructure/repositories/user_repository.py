"""Read access to platform users."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy.orm import Session

from rallypoint.domain.entities import User
from rallypoint.infrastructure.models import UserModel


class UserRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: str) -> User | None:
        model = self.session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    def get_map_by_ids(self, user_ids: Iterable[str]) -> dict[str, User]:
        ids = sorted({user_id for user_id in user_ids if user_id})
        if not ids:
            return {}
        models = self.session.query(UserModel).filter(UserModel.id.in_(ids)).all()
        return {model.id: self._to_entity(model) for model in models}

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            name=model.name,
            email=model.email,
            is_active=bool(model.is_active),
            preferences=dict(model.preferences or {}),
        )


__all__ = ["UserRepository"]
