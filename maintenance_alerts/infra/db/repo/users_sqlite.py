from __future__ import annotations

from typing import Optional

from maintenance_alerts.domain.notifications.ports import UserDirectory
from maintenance_alerts.infra.db.connection import Database


class UsersSqliteRepo(UserDirectory):
    def __init__(self, db: Database) -> None:
        self._db = db

    async def upsert_user(self, user_id: str, email: Optional[str], now_iso: str) -> None:
        await self._db.execute(
            """
            INSERT INTO users(user_id, email, created_at, updated_at) VALUES (?, ?, ?, ?)
            ON CONFLICT(user_id) DO UPDATE SET email = excluded.email, updated_at = excluded.updated_at;
            """,
            (user_id, email, now_iso, now_iso),
        )

    async def get_email(self, user_id: str) -> Optional[str]:
        row = await self._db.fetchone("SELECT email FROM users WHERE user_id = ?;", (user_id,))
        if not row or not row["email"]:
            return None
        return row["email"].strip() or None
