from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from maintenance_alerts.domain.common.time import parse_hhmm


@dataclass(frozen=True)
class Settings:
    db_path: Path
    timezone: str
    app_url: str
    resend_api_key: Optional[str]
    mail_from: str
    notify_at: str
    poll_seconds: int
    max_concurrency: int


def _int_env(name: str, default: int, minimum: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise RuntimeError(f"{name} must be >= {minimum}, got {value}")
    return value


def load_settings(dotenv: bool = True) -> Settings:
    if dotenv:
        load_dotenv()

    notify_at = os.getenv("NOTIFY_AT", "09:00").strip()
    if parse_hhmm(notify_at) is None:
        raise RuntimeError(f"NOTIFY_AT must be HH:MM, got {notify_at!r}")

    # db_path may still be relative; the composition root anchors it
    return Settings(
        db_path=Path(os.getenv("DB_PATH", "data/maintenance.db").strip()),
        timezone=os.getenv("TZ", "UTC").strip() or "UTC",
        app_url=os.getenv("APP_URL", "http://localhost:3000").strip().rstrip("/"),
        resend_api_key=os.getenv("RESEND_API_KEY", "").strip() or None,
        mail_from=os.getenv("MAIL_FROM", "Violins & Bows <notifications@example.com>").strip(),
        notify_at=notify_at,
        poll_seconds=_int_env("POLL_SECONDS", 60, minimum=1),
        max_concurrency=_int_env("MAX_CONCURRENCY", 1, minimum=1),
    )
