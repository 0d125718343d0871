"""Public entry points of the notification pipeline."""

from .audience import AudienceResolver
from .dispatch import PushDispatcher
from .inbox import list_inbox, mark_inbox_read
from .pipeline import NotificationPipeline, SweepSummary, preview
from .records import NotificationRecordWriter
from .status import StatusUpdater, decide_status
from .tokens import TokenLookup

__all__ = [
    "AudienceResolver",
    "NotificationRecordWriter",
    "TokenLookup",
    "PushDispatcher",
    "StatusUpdater",
    "decide_status",
    "NotificationPipeline",
    "SweepSummary",
    "preview",
    "list_inbox",
    "mark_inbox_read",
]
