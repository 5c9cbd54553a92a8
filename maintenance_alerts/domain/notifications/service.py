from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Optional

from maintenance_alerts.domain.common.errors import UnknownError, to_domain_error
from maintenance_alerts.domain.common.time import to_iso
from maintenance_alerts.domain.notifications.digest import build_digest
from maintenance_alerts.domain.notifications.email import render_digest_email
from maintenance_alerts.domain.notifications.models import NotificationSettings, RunReport, UserRunResult
from maintenance_alerts.domain.notifications.ports import (
    Clock,
    EmailSender,
    NotificationSettingsRepository,
    TaskRepository,
    UserDirectory,
)

logger = logging.getLogger(__name__)


class NotificationService:
    """
    Daily digest run. No sqlite, no HTTP: collaborators come in through ports.

    Every user is handled independently. A failure for one user is logged and
    reported, never raised, and leaves last_notification_sent_at untouched so
    the next run retries.
    """

    def __init__(
        self,
        tasks: TaskRepository,
        settings: NotificationSettingsRepository,
        users: UserDirectory,
        sender: EmailSender,
        clock: Clock,
        app_url: str,
        max_concurrency: int = 1,
    ) -> None:
        self._tasks = tasks
        self._settings = settings
        self._users = users
        self._sender = sender
        self._clock = clock
        self._app_url = app_url
        self._max_concurrency = max(1, int(max_concurrency))

    async def run(self) -> RunReport:
        now = self._clock.now()
        report = RunReport(started_at=now)

        subscribed = [s for s in await self._settings.list_subscribed() if s.wants_email]
        report.subscribers = len(subscribed)
        if not subscribed:
            logger.info("No users with email notifications enabled")
            return report

        if self._max_concurrency == 1:
            for s in subscribed:
                result = await self._process_user(s, now)
                if result is not None:
                    report.results.append(result)
        else:
            sem = asyncio.Semaphore(self._max_concurrency)

            async def bounded(s: NotificationSettings) -> Optional[UserRunResult]:
                async with sem:
                    return await self._process_user(s, now)

            results = await asyncio.gather(*(bounded(s) for s in subscribed))
            report.results.extend(r for r in results if r is not None)

        logger.info(f"Notification run finished: {report.summary()}")
        return report

    async def _process_user(self, settings: NotificationSettings, now: datetime) -> Optional[UserRunResult]:
        """Returns None when the user has nothing to be notified about."""
        user_id = settings.user_id
        email: Optional[str] = None
        try:
            email = await self._users.get_email(user_id)
            if not email:
                logger.warning(f"No email found for user {user_id}")
                return UserRunResult(user_id=user_id, status="skipped")

            tasks = await self._tasks.list_open_tasks(user_id)
            digest = build_digest(settings, tasks, now)
            if digest.is_empty:
                return None

            message = render_digest_email(digest, self._app_url)
            status = await self._sender.send(email, message)
        except Exception as e:
            err = to_domain_error(e)
            if isinstance(err, UnknownError):
                logger.error(f"Notification failed: user_id={user_id}, error={err.message}", exc_info=True)
            else:
                logger.error(f"Notification failed: user_id={user_id}, kind={err.kind}, error={err.message}")
            return UserRunResult(user_id=user_id, status="failed", email=email, error_kind=err.kind, error=err.message)

        if status == "sent":
            await self._record_sent(user_id)
        return UserRunResult(user_id=user_id, status=status, email=email, notification_count=digest.count)

    async def _record_sent(self, user_id: str) -> None:
        """Stamp last_notification_sent_at with the send time. Failures are logged; the send still counts."""
        try:
            await self._settings.mark_sent(user_id, to_iso(self._clock.now()))
        except Exception as e:
            err = to_domain_error(e)
            logger.warning(
                f"Email sent but last_notification_sent_at not updated: user_id={user_id}, "
                f"kind={err.kind}, error={err.message}"
            )
