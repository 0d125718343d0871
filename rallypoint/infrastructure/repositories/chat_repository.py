"""Read access to chat threads and memberships."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from rallypoint.domain.entities import ChatMembership, ChatThread
from rallypoint.infrastructure.models import ChatMembershipModel, ChatThreadModel
from rallypoint.utils import from_storage


class ChatRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get_thread(self, thread_id: str) -> ChatThread | None:
        model = self.session.get(ChatThreadModel, thread_id)
        if model is None:
            return None
        return ChatThread(
            id=model.id,
            name=model.name,
            type=model.type,
            event_id=model.event_id,
            created_by=model.created_by,
        )

    def list_memberships(self, thread_id: str) -> Sequence[ChatMembership]:
        models = (
            self.session.query(ChatMembershipModel)
            .filter(ChatMembershipModel.thread_id == thread_id)
            .all()
        )
        return [
            ChatMembership(
                id=model.id,
                thread_id=model.thread_id,
                user_id=model.user_id,
                notifications_enabled=bool(model.notifications_enabled),
                mute_until=from_storage(model.mute_until),
                is_active=bool(model.is_active),
                left_at=from_storage(model.left_at),
            )
            for model in models
        ]


__all__ = ["ChatRepository"]
