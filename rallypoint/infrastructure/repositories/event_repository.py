"""Read access to events and their RSVPs."""

from __future__ import annotations

from sqlalchemy.orm import Session

from rallypoint.domain.entities import RSVP_STATUS_ATTENDING, Event, EventLocation
from rallypoint.infrastructure.models import EventModel, EventRsvpModel
from rallypoint.utils import from_storage


class EventRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, event_id: str) -> Event | None:
        model = self.session.get(EventModel, event_id)
        return self._to_entity(model) if model else None

    def list_attendee_ids(self, event_id: str) -> list[str]:
        """Return users with an approved ``attending`` RSVP for ``event_id``."""

        rows = (
            self.session.query(EventRsvpModel.user_id)
            .filter(EventRsvpModel.event_id == event_id)
            .filter(EventRsvpModel.status == RSVP_STATUS_ATTENDING)
            .filter(EventRsvpModel.is_approved.is_(True))
            .all()
        )
        return [user_id for (user_id,) in rows]

    @staticmethod
    def _to_entity(model: EventModel) -> Event:
        return Event(
            id=model.id,
            title=model.title,
            status=model.status,
            organization_id=model.organization_id,
            start_time=from_storage(model.start_time),
            location=EventLocation.parse(model.location),
        )


__all__ = ["EventRepository"]
