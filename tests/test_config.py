"""
Tests for environment-driven settings.
"""
from __future__ import annotations

from pathlib import Path

import pytest

from maintenance_alerts.config import load_settings

ENV_VARS = ("DB_PATH", "TZ", "APP_URL", "RESEND_API_KEY", "MAIL_FROM", "NOTIFY_AT", "POLL_SECONDS", "MAX_CONCURRENCY")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = load_settings(dotenv=False)
    assert settings.db_path == Path("data/maintenance.db")
    assert settings.timezone == "UTC"
    assert settings.app_url == "http://localhost:3000"
    assert settings.resend_api_key is None
    assert settings.notify_at == "09:00"
    assert settings.poll_seconds == 60
    assert settings.max_concurrency == 1


def test_values_from_environment(monkeypatch):
    monkeypatch.setenv("TZ", "Asia/Seoul")
    monkeypatch.setenv("APP_URL", "https://shop.example.com/")
    monkeypatch.setenv("RESEND_API_KEY", " re_123 ")
    monkeypatch.setenv("NOTIFY_AT", "07:45")
    monkeypatch.setenv("MAX_CONCURRENCY", "4")
    settings = load_settings(dotenv=False)
    assert settings.timezone == "Asia/Seoul"
    assert settings.app_url == "https://shop.example.com"
    assert settings.resend_api_key == "re_123"
    assert settings.notify_at == "07:45"
    assert settings.max_concurrency == 4


@pytest.mark.parametrize(
    "name,value",
    [("NOTIFY_AT", "9:00"), ("POLL_SECONDS", "0"), ("MAX_CONCURRENCY", "many")],
)
def test_invalid_values_fail_fast(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(RuntimeError):
        load_settings(dotenv=False)
