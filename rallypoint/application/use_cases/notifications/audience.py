"""Resolve which users a trigger should reach."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import datetime

from sqlalchemy.orm import Session

from rallypoint.domain.entities import DirectTrigger, EventTrigger, ThreadTrigger, Trigger
from rallypoint.domain.errors import NotFoundError
from rallypoint.infrastructure.repositories import (
    ChatRepository,
    EventRepository,
    UserRepository,
)
from rallypoint.utils import now_in_app_timezone

logger = logging.getLogger(__name__)

PUSH_CATEGORY = "push"
CHAT_CATEGORY = "chat"


class AudienceResolver:
    """Turn a trigger descriptor into the set of eligible recipient ids."""

    def __init__(
        self,
        session: Session,
        *,
        clock: Callable[[], datetime] = now_in_app_timezone,
    ) -> None:
        self._events = EventRepository(session)
        self._chats = ChatRepository(session)
        self._users = UserRepository(session)
        self._clock = clock

    def resolve(self, trigger: Trigger) -> set[str]:
        """Return recipients for ``trigger``.

        Raises :class:`NotFoundError` when the referenced event or thread is
        missing. An empty audience is returned as an empty set.
        """

        if isinstance(trigger, EventTrigger):
            candidates = self._event_candidates(trigger)
            categories: tuple[str, ...] = (PUSH_CATEGORY,)
        elif isinstance(trigger, ThreadTrigger):
            candidates = self._thread_candidates(trigger)
            categories = (PUSH_CATEGORY, CHAT_CATEGORY)
        elif isinstance(trigger, DirectTrigger):
            candidates = set(trigger.user_ids)
            categories = (PUSH_CATEGORY,)
        else:
            raise TypeError(f"Unsupported trigger: {trigger!r}")

        audience = self._eligible(candidates, categories)
        logger.debug(
            "Resolved %d recipient(s) out of %d candidate(s) for %s",
            len(audience),
            len(candidates),
            trigger,
        )
        return audience

    def _event_candidates(self, trigger: EventTrigger) -> set[str]:
        if self._events.get(trigger.event_id) is None:
            raise NotFoundError("Event", trigger.event_id)
        return set(self._events.list_attendee_ids(trigger.event_id))

    def _thread_candidates(self, trigger: ThreadTrigger) -> set[str]:
        if self._chats.get_thread(trigger.thread_id) is None:
            raise NotFoundError("Chat thread", trigger.thread_id)
        now = self._clock()
        return {
            membership.user_id
            for membership in self._chats.list_memberships(trigger.thread_id)
            if membership.receives_notifications(now)
            and membership.user_id != trigger.exclude_user_id
        }

    def _eligible(self, candidates: Iterable[str], categories: tuple[str, ...]) -> set[str]:
        users = self._users.get_map_by_ids(candidates)
        eligible: set[str] = set()
        for user_id in candidates:
            user = users.get(user_id)
            if user is None:
                logger.debug("Skipping unknown recipient %s", user_id)
                continue
            if not user.is_active:
                continue
            if all(user.allows_notifications(category) for category in categories):
                eligible.add(user_id)
        return eligible


__all__ = ["AudienceResolver"]
