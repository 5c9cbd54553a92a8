from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import os
from pathlib import Path
from typing import Optional

from maintenance_alerts.config import Settings, load_settings
from maintenance_alerts.domain.common.time import to_iso
from maintenance_alerts.domain.notifications.ports import EmailSender
from maintenance_alerts.domain.notifications.service import NotificationService
from maintenance_alerts.infra.clock.system_clock import SystemClock
from maintenance_alerts.infra.db.connection import Database
from maintenance_alerts.infra.db.repo.job_runs_sqlite import JobRunsRepo
from maintenance_alerts.infra.db.repo.notification_settings_sqlite import NotificationSettingsSqliteRepo
from maintenance_alerts.infra.db.repo.tasks_sqlite import TasksSqliteRepo
from maintenance_alerts.infra.db.repo.users_sqlite import UsersSqliteRepo
from maintenance_alerts.infra.db.schema_version import apply_migrations
from maintenance_alerts.infra.mail.logging_sender import LoggingEmailSender
from maintenance_alerts.infra.mail.resend import ResendEmailSender
from maintenance_alerts.infra.scheduler.loop import DailySchedulerLoop, JobRunner, SchedulerConfig

logger = logging.getLogger(__name__)

DIGEST_JOB = "maintenance_digest"


def build_sender(settings: Settings) -> EmailSender:
    if settings.resend_api_key:
        return ResendEmailSender(api_key=settings.resend_api_key, mail_from=settings.mail_from)
    logger.warning("RESEND_API_KEY not set: digests will be logged, not sent")
    return LoggingEmailSender()


async def build_service(settings: Settings, clock: SystemClock) -> tuple[Database, NotificationService]:
    db_path = settings.db_path
    if not db_path.is_absolute():
        db_path = Path.cwd() / db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info(f"DB_PATH: {db_path}")

    db = Database(str(db_path))
    await apply_migrations(db, now_iso=to_iso(clock.now()))

    service = NotificationService(
        tasks=TasksSqliteRepo(db),
        settings=NotificationSettingsSqliteRepo(db),
        users=UsersSqliteRepo(db),
        sender=build_sender(settings),
        clock=clock,
        app_url=settings.app_url,
        max_concurrency=settings.max_concurrency,
    )
    return db, service


async def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Maintenance task e-mail digests")
    parser.add_argument("--once", action="store_true", help="run the digest job now and exit (for cron)")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - [PID:%(process)d] - %(message)s",
    )

    settings = load_settings()
    clock = SystemClock(settings.timezone)
    db, service = await build_service(settings, clock)

    if args.once:
        report = await service.run()
        logger.info(f"Digest run complete: {report.summary()}")
        return

    async def run_digest() -> None:
        await service.run()

    runner = JobRunner()
    runner.register_daily(DIGEST_JOB, settings.notify_at, run_digest)

    scheduler = DailySchedulerLoop(
        repo=JobRunsRepo(db),
        runner=runner,
        clock=clock,
        cfg=SchedulerConfig(poll_seconds=settings.poll_seconds),
    )
    logger.info(f"Scheduler started - PID: {os.getpid()}, digest at {settings.notify_at} {settings.timezone}")
    scheduler_task = asyncio.create_task(scheduler.run_forever())
    try:
        await scheduler_task
    finally:
        scheduler.stop()
        scheduler_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await scheduler_task
        logger.info(f"Scheduler shutdown complete - PID: {os.getpid()}")


def cli() -> None:
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Stopped by user")


if __name__ == "__main__":
    cli()
