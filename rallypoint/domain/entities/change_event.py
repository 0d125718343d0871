"""Change notification emitted after the pipeline commits a write."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

CHANGE_ACTION_INSERT = "insert"
CHANGE_ACTION_UPDATE = "update"


@dataclass(frozen=True)
class ChangeEvent:
    table: str
    action: str
    record_id: str
    data: dict[str, Any] = field(default_factory=dict)


__all__ = ["ChangeEvent", "CHANGE_ACTION_INSERT", "CHANGE_ACTION_UPDATE"]
