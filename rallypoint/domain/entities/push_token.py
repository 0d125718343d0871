"""Domain entity representing a device registration with the push gateway."""

from dataclasses import dataclass
from datetime import datetime

PUSH_PLATFORMS = frozenset({"ios", "android", "web"})


@dataclass
class PushToken:
    """Opaque device token owned by a user."""

    id: str | None
    user_id: str
    token: str
    platform: str
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


__all__ = ["PushToken", "PUSH_PLATFORMS"]
