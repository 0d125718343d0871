"""Shared fixtures: an in-memory database, seed helpers and a fake push gateway."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Sequence
from datetime import datetime
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["APP_TIMEZONE"] = "UTC"

from sqlalchemy.orm import sessionmaker

from rallypoint.config import Settings
from rallypoint.domain.entities import DeliveryStatus, PushMessage, PushTicket
from rallypoint.infrastructure.database import Base, build_engine, initialize_database
from rallypoint.infrastructure.models import (
    ChatMembershipModel,
    ChatThreadModel,
    EventModel,
    EventRsvpModel,
    PushTokenModel,
    UserModel,
)
from rallypoint.infrastructure.push import PushGateway, PushGatewayError
from rallypoint.utils import to_storage


class FakeGateway(PushGateway):
    """Record every batch and answer with a configurable ticket per message."""

    def __init__(self, *, max_batch_size: int = 100) -> None:
        self.max_batch_size = max_batch_size
        self.calls: list[list[PushMessage]] = []
        self.invalid_tokens: set[str] = set()
        self.transient_tokens: set[str] = set()
        self.error: PushGatewayError | None = None
        self.ticket_factory: Callable[[PushMessage], PushTicket] | None = None
        self.closed = False

    @property
    def messages(self) -> list[PushMessage]:
        return [message for batch in self.calls for message in batch]

    def send(self, messages: Sequence[PushMessage]) -> list[PushTicket]:
        self.calls.append(list(messages))
        if self.error is not None:
            raise self.error
        return [self._ticket(message) for message in messages]

    def close(self) -> None:
        self.closed = True

    def _ticket(self, message: PushMessage) -> PushTicket:
        if self.ticket_factory is not None:
            return self.ticket_factory(message)
        if message.to in self.invalid_tokens:
            return PushTicket(DeliveryStatus.INVALID_TOKEN, detail="DeviceNotRegistered")
        if message.to in self.transient_tokens:
            return PushTicket(DeliveryStatus.TRANSIENT_ERROR, detail="Try again")
        return PushTicket(DeliveryStatus.DELIVERED, ticket_id=f"ticket-{message.to}")


class Seeder:
    """Insert the read-only rows the pipeline consumes."""

    def __init__(self, session) -> None:
        self.session = session

    def _add(self, model):
        self.session.add(model)
        self.session.commit()
        return model.id

    def user(
        self,
        name: str,
        *,
        is_active: bool = True,
        preferences: dict | None = None,
    ) -> str:
        return self._add(
            UserModel(
                name=name,
                email=f"{name.lower()}@example.com",
                is_active=is_active,
                preferences=preferences or {},
            )
        )

    def event(self, title: str = "Beach cleanup", *, location=None) -> str:
        return self._add(EventModel(title=title, status="published", location=location))

    def rsvp(
        self,
        event_id: str,
        user_id: str,
        *,
        status: str = "attending",
        is_approved: bool = True,
    ) -> str:
        return self._add(
            EventRsvpModel(
                event_id=event_id, user_id=user_id, status=status, is_approved=is_approved
            )
        )

    def thread(self, name: str | None = "Volunteers", *, created_by: str | None = None) -> str:
        return self._add(ChatThreadModel(name=name, type="group", created_by=created_by))

    def member(
        self,
        thread_id: str,
        user_id: str,
        *,
        notifications_enabled: bool = True,
        mute_until: datetime | None = None,
        is_active: bool = True,
        left_at: datetime | None = None,
    ) -> str:
        return self._add(
            ChatMembershipModel(
                thread_id=thread_id,
                user_id=user_id,
                notifications_enabled=notifications_enabled,
                mute_until=to_storage(mute_until),
                is_active=is_active,
                left_at=to_storage(left_at),
            )
        )

    def token(
        self,
        user_id: str,
        token: str,
        *,
        platform: str = "ios",
        is_active: bool = True,
    ) -> str:
        return self._add(
            PushTokenModel(user_id=user_id, token=token, platform=platform, is_active=is_active)
        )


@pytest.fixture()
def settings() -> Settings:
    return Settings(database_url="sqlite://", scheduler_enabled=False)


@pytest.fixture()
def session_factory(settings: Settings):
    """A fresh in-memory schema per test."""

    engine = build_engine(settings)
    initialize_database(engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def seed(session) -> Seeder:
    return Seeder(session)


@pytest.fixture()
def gateway() -> FakeGateway:
    return FakeGateway()
