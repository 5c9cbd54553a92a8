from __future__ import annotations

from typing import Any, Optional, Sequence

from maintenance_alerts.domain.common.errors import ValidationError
from maintenance_alerts.domain.common.time import parse_hhmm, to_iso
from maintenance_alerts.domain.notifications.models import (
    DEFAULT_DAYS_BEFORE_DUE,
    DEFAULT_NOTIFICATION_TIME,
    NotificationSettings,
)
from maintenance_alerts.domain.notifications.ports import Clock, NotificationSettingsRepository

MAX_DAYS_BEFORE_DUE = 365


def validate_notification_time(value: str) -> str:
    if not isinstance(value, str) or parse_hhmm(value) is None:
        raise ValidationError("Invalid notification_time format. Use HH:MM")
    return value


def normalize_days_before_due(value: Any) -> tuple[int, ...]:
    """Unique positive day offsets, largest first (e.g. (7, 3, 1))."""
    if not isinstance(value, (list, tuple)):
        raise ValidationError("days_before_due must be an array")
    days: set[int] = set()
    for item in value:
        if isinstance(item, bool) or not isinstance(item, int):
            raise ValidationError(f"days_before_due entries must be integers, got {item!r}")
        if item < 1 or item > MAX_DAYS_BEFORE_DUE:
            raise ValidationError(f"days_before_due entries must be between 1 and {MAX_DAYS_BEFORE_DUE}")
        days.add(item)
    return tuple(sorted(days, reverse=True))


def default_settings(user_id: str) -> NotificationSettings:
    return NotificationSettings(user_id=user_id)


class NotificationSettingsService:
    """
    Per-user notification preferences. Reads fall back to defaults without
    persisting them; writes replace the whole record.
    """

    def __init__(self, repo: NotificationSettingsRepository, clock: Clock) -> None:
        self._repo = repo
        self._clock = clock

    async def get(self, user_id: str) -> NotificationSettings:
        if not user_id:
            raise ValidationError("user_id is required")
        stored = await self._repo.get(user_id)
        return stored if stored is not None else default_settings(user_id)

    async def save(
        self,
        user_id: str,
        *,
        email_notifications: Optional[bool] = None,
        notification_time: Optional[str] = None,
        days_before_due: Optional[Sequence[int]] = None,
        enabled: Optional[bool] = None,
    ) -> NotificationSettings:
        if not user_id:
            raise ValidationError("user_id is required")

        # omitted fields reset to defaults
        settings = NotificationSettings(
            user_id=user_id,
            email_notifications=True if email_notifications is None else bool(email_notifications),
            notification_time=(
                validate_notification_time(notification_time) if notification_time else DEFAULT_NOTIFICATION_TIME
            ),
            days_before_due=(
                normalize_days_before_due(days_before_due) if days_before_due is not None else DEFAULT_DAYS_BEFORE_DUE
            ),
            enabled=True if enabled is None else bool(enabled),
        )
        return await self._repo.upsert(settings, to_iso(self._clock.now()))
