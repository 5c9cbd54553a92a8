from __future__ import annotations

import json
import logging
from typing import Optional, Sequence

from maintenance_alerts.domain.common.errors import NotFoundError
from maintenance_alerts.domain.common.time import from_iso
from maintenance_alerts.domain.notifications.models import DEFAULT_DAYS_BEFORE_DUE, NotificationSettings
from maintenance_alerts.domain.notifications.ports import NotificationSettingsRepository
from maintenance_alerts.infra.db.connection import Database

logger = logging.getLogger(__name__)


class NotificationSettingsSqliteRepo(NotificationSettingsRepository):
    def __init__(self, db: Database) -> None:
        self._db = db

    async def list_subscribed(self) -> Sequence[NotificationSettings]:
        rows = await self._db.fetchall(
            """
            SELECT *
            FROM notification_settings
            WHERE enabled = 1 AND email_notifications = 1
            ORDER BY user_id ASC;
            """
        )
        return [self._row_to_settings(r) for r in rows]

    async def get(self, user_id: str) -> Optional[NotificationSettings]:
        row = await self._db.fetchone("SELECT * FROM notification_settings WHERE user_id = ?;", (user_id,))
        return self._row_to_settings(row) if row else None

    async def upsert(self, settings: NotificationSettings, now_iso: str) -> NotificationSettings:
        await self._db.execute(
            """
            INSERT INTO notification_settings(
              user_id, email_notifications, notification_time, days_before_due, enabled,
              created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(user_id) DO UPDATE SET
              email_notifications = excluded.email_notifications,
              notification_time = excluded.notification_time,
              days_before_due = excluded.days_before_due,
              enabled = excluded.enabled,
              updated_at = excluded.updated_at;
            """,
            (
                settings.user_id,
                1 if settings.email_notifications else 0,
                settings.notification_time,
                json.dumps(list(settings.days_before_due)),
                1 if settings.enabled else 0,
                now_iso,
                now_iso,
            ),
        )
        stored = await self.get(settings.user_id)
        if stored is None:
            raise NotFoundError(f"notification settings for {settings.user_id} vanished after upsert")
        return stored

    async def mark_sent(self, user_id: str, sent_at_iso: str) -> None:
        await self._db.execute(
            """
            UPDATE notification_settings
            SET last_notification_sent_at = ?, updated_at = ?
            WHERE user_id = ?;
            """,
            (sent_at_iso, sent_at_iso, user_id),
        )

    def _row_to_settings(self, row) -> NotificationSettings:
        return NotificationSettings(
            user_id=row["user_id"],
            enabled=bool(row["enabled"]),
            email_notifications=bool(row["email_notifications"]),
            notification_time=row["notification_time"],
            days_before_due=self._parse_days(row["user_id"], row["days_before_due"]),
            last_notification_sent_at=(
                from_iso(row["last_notification_sent_at"]) if row["last_notification_sent_at"] else None
            ),
            created_at=from_iso(row["created_at"]),
            updated_at=from_iso(row["updated_at"]),
        )

    def _parse_days(self, user_id: str, raw: Optional[str]) -> tuple[int, ...]:
        if raw is None:
            return DEFAULT_DAYS_BEFORE_DUE
        try:
            values = json.loads(raw)
        except ValueError:
            logger.warning(f"Unreadable days_before_due for user {user_id}: {raw!r}, using defaults")
            return DEFAULT_DAYS_BEFORE_DUE
        if not isinstance(values, list):
            return DEFAULT_DAYS_BEFORE_DUE
        return tuple(v for v in values if isinstance(v, int) and not isinstance(v, bool) and v > 0)
