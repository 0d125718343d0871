"""Tests for environment driven settings."""

from __future__ import annotations

from datetime import timedelta

import pytest
from pydantic import ValidationError

from rallypoint import config
from rallypoint.utils import datetime as datetime_utils


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("PUSH_MAX_ATTEMPTS", "7")
    monkeypatch.setenv("SWEEP_INTERVAL_SECONDS", "60")
    config.reset_settings_cache()
    try:
        settings = config.get_settings()
        assert settings.push_max_attempts == 7
        assert settings.sweep_interval_seconds == 60
        assert settings.push_batch_size == 100
    finally:
        config.reset_settings_cache()


def test_gateway_url_must_be_http():
    with pytest.raises(ValidationError):
        config.Settings(push_gateway_url="ftp://push.example")


def test_batch_size_cannot_exceed_gateway_limit():
    with pytest.raises(ValidationError):
        config.Settings(push_batch_size=101)


def test_offset_timezones_are_supported(monkeypatch):
    monkeypatch.setenv("APP_TIMEZONE", "UTC-05:00")
    config.reset_settings_cache()
    datetime_utils.get_app_timezone.cache_clear()
    try:
        tz = datetime_utils.get_app_timezone()
        assert tz.utcoffset(None) == timedelta(hours=-5)
    finally:
        monkeypatch.undo()
        config.reset_settings_cache()
        datetime_utils.get_app_timezone.cache_clear()


def test_storage_now_refuses_to_return_none(monkeypatch):
    monkeypatch.setattr(datetime_utils, "to_storage", lambda value: None)

    with pytest.raises(RuntimeError, match="storage datetime"):
        datetime_utils.storage_now()
