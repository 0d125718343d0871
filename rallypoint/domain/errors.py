"""Errors raised by the notification pipeline."""

from __future__ import annotations


class NotificationError(Exception):
    """Base class for pipeline failures surfaced to callers."""


class NotFoundError(NotificationError, LookupError):
    """A trigger references an event, thread or notification that does not exist."""

    def __init__(self, resource: str, identifier: object) -> None:
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} with id {identifier} not found")


class PersistenceError(NotificationError):
    """Notification storage rejected a write; the transaction was rolled back."""


__all__ = ["NotificationError", "NotFoundError", "PersistenceError"]
