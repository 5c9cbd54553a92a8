from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, time
from typing import Awaitable, Callable, Dict, Optional

from maintenance_alerts.domain.common.time import parse_hhmm, to_iso
from maintenance_alerts.domain.notifications.ports import Clock
from maintenance_alerts.infra.db.repo.job_runs_sqlite import JobRunsRepo

logger = logging.getLogger(__name__)

JobFn = Callable[[], Awaitable[None]]


@dataclass
class SchedulerConfig:
    poll_seconds: int = 60


@dataclass(frozen=True)
class DailyJob:
    name: str
    run_at: time
    fn: JobFn


class JobRunner:
    """
    job name -> coroutine
    Jobs are registered in the composition root.
    """

    def __init__(self) -> None:
        self._jobs: Dict[str, DailyJob] = {}

    def register_daily(self, name: str, run_at: str, fn: JobFn) -> None:
        parsed = parse_hhmm(run_at)
        if parsed is None:
            raise ValueError(f"Invalid run_at for job {name}: {run_at!r} (expected HH:MM)")
        self._jobs[name] = DailyJob(name=name, run_at=time(*parsed), fn=fn)

    def jobs(self) -> list[DailyJob]:
        return list(self._jobs.values())

    def get(self, name: str) -> Optional[DailyJob]:
        return self._jobs.get(name)

    async def run(self, name: str) -> None:
        job = self._jobs.get(name)
        if not job:
            raise RuntimeError(f"No job registered with name={name}")
        await job.fn()


class DailySchedulerLoop:
    """Runs each registered job once per local calendar day, after its run_at time."""

    def __init__(
        self,
        repo: JobRunsRepo,
        runner: JobRunner,
        clock: Clock,
        cfg: Optional[SchedulerConfig] = None,
    ) -> None:
        self._repo = repo
        self._runner = runner
        self._clock = clock
        self._cfg = cfg or SchedulerConfig()
        self._stop = asyncio.Event()

    def stop(self) -> None:
        self._stop.set()

    async def run_forever(self) -> None:
        while not self._stop.is_set():
            try:
                await self.tick()
            except Exception as e:
                # a broken tick must not kill the process
                logger.error(f"Scheduler tick error: {e}", exc_info=True)
            try:
                await asyncio.wait_for(self._stop.wait(), timeout=self._cfg.poll_seconds)
            except asyncio.TimeoutError:
                pass

    async def tick(self) -> list[str]:
        """Run every job that is due now. Returns the names of jobs attempted."""
        now = self._clock.now()
        attempted = []
        for job in self._runner.jobs():
            if await self._is_due(job, now):
                attempted.append(job.name)
                await self._execute_one(job, now)
        return attempted

    async def _is_due(self, job: DailyJob, now: datetime) -> bool:
        if now.time() < job.run_at:
            return False
        last = await self._repo.get(job.name)
        return last is None or last.last_run_date != now.date().isoformat()

    async def _execute_one(self, job: DailyJob, now: datetime) -> None:
        try:
            await self._runner.run(job.name)
            await self._repo.mark_run_ok(job.name, now.date().isoformat(), to_iso(self._clock.now()))
        except Exception as e:
            logger.error(f"Job execution failed: job={job.name}, error={e}", exc_info=True)
            await self._repo.mark_run_failed(job.name, str(e), to_iso(self._clock.now()))
