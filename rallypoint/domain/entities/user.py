"""Domain entity representing a platform user."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class User:
    """The subset of user attributes the notification pipeline reads."""

    id: str
    name: str
    email: str
    is_active: bool = True
    preferences: dict[str, Any] = field(default_factory=dict)

    def allows_notifications(self, category: str) -> bool:
        """Return ``False`` only when ``category`` was explicitly switched off.

        Missing preference blocks default to enabled, matching how accounts
        are created with every channel on.
        """

        notifications = (self.preferences or {}).get("notifications")
        if not isinstance(notifications, dict):
            return True
        return notifications.get(category, True) is not False


__all__ = ["User"]
