"""Domain entities for events, their location and RSVPs."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping

RSVP_STATUS_ATTENDING = "attending"
RSVP_STATUS_NOT_ATTENDING = "not_attending"
RSVP_STATUS_MAYBE = "maybe"
RSVP_STATUS_WAITLIST = "waitlist"


@dataclass(frozen=True)
class EventLocation:
    """Structured location with every sub-field resolved.

    Older rows store the location as a bare string while newer ones store an
    object; :meth:`parse` accepts both so consumers only see this type.
    """

    name: str
    address: str
    latitude: float | None = None
    longitude: float | None = None
    is_virtual: bool = False
    meeting_url: str | None = None

    @classmethod
    def parse(cls, raw: Any) -> "EventLocation | None":
        if raw is None:
            return None
        if isinstance(raw, str):
            text = raw.strip()
            if not text:
                return None
            return cls(name=text, address=text)
        if not isinstance(raw, Mapping):
            raise ValueError(f"Unsupported location value: {raw!r}")

        name = str(raw.get("name") or "").strip()
        address = str(raw.get("address") or "").strip()
        if not name and not address:
            raise ValueError("Location requires a name or an address")

        latitude, longitude = _parse_coordinates(raw)
        meeting_url = raw.get("meetingUrl", raw.get("meeting_url"))
        is_virtual = raw.get("isVirtual", raw.get("is_virtual", False))
        return cls(
            name=name or address,
            address=address or name,
            latitude=latitude,
            longitude=longitude,
            is_virtual=bool(is_virtual),
            meeting_url=str(meeting_url) if meeting_url else None,
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "name": self.name,
            "address": self.address,
            "isVirtual": self.is_virtual,
        }
        if self.latitude is not None and self.longitude is not None:
            payload["coordinates"] = {"lat": self.latitude, "lng": self.longitude}
        if self.meeting_url:
            payload["meetingUrl"] = self.meeting_url
        return payload


def _parse_coordinates(raw: Mapping[str, Any]) -> tuple[float | None, float | None]:
    coordinates = raw.get("coordinates")
    if isinstance(coordinates, Mapping):
        lat, lng = coordinates.get("lat"), coordinates.get("lng")
    else:
        lat, lng = raw.get("latitude"), raw.get("longitude")
    if lat is None or lng is None:
        return None, None
    try:
        return float(lat), float(lng)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid coordinates: {lat!r}, {lng!r}") from exc


@dataclass
class Event:
    """Event published by an organization."""

    id: str
    title: str
    status: str
    organization_id: str | None = None
    start_time: datetime | None = None
    location: EventLocation | None = None


@dataclass
class EventRsvp:
    """A user's answer to an event invitation."""

    id: str
    event_id: str
    user_id: str
    status: str = RSVP_STATUS_ATTENDING
    is_approved: bool = True


__all__ = [
    "Event",
    "EventLocation",
    "EventRsvp",
    "RSVP_STATUS_ATTENDING",
    "RSVP_STATUS_NOT_ATTENDING",
    "RSVP_STATUS_MAYBE",
    "RSVP_STATUS_WAITLIST",
]
