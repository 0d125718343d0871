"""Change propagation helpers for the infrastructure layer."""

from .changes import ChangeFeed, ChangeFilter, Subscription, change_feed

__all__ = ["ChangeFeed", "ChangeFilter", "Subscription", "change_feed"]
