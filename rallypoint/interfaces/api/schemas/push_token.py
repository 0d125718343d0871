"""Pydantic models for device registration."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class PushTokenRegister(BaseModel):
    user_id: str = Field(..., min_length=1)
    token: str = Field(..., min_length=1, max_length=255)
    platform: str = Field(..., description="ios, android or web")


class PushTokenRead(BaseModel):
    id: str
    user_id: str
    token: str
    platform: str
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


__all__ = ["PushTokenRead", "PushTokenRegister"]
