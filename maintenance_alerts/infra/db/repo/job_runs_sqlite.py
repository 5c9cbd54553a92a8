from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from maintenance_alerts.infra.db.connection import Database


@dataclass(frozen=True)
class JobRun:
    job_name: str
    last_run_date: Optional[str]
    last_run_at: Optional[str]
    last_status: Optional[str]
    last_error: Optional[str]
    run_count: int
    updated_at: str


class JobRunsRepo:
    """Bookkeeping for daily jobs: which local day each job last completed."""

    def __init__(self, db: Database) -> None:
        self._db = db

    async def get(self, job_name: str) -> Optional[JobRun]:
        row = await self._db.fetchone("SELECT * FROM job_runs WHERE job_name = ?;", (job_name,))
        if not row:
            return None
        return JobRun(
            job_name=row["job_name"],
            last_run_date=row["last_run_date"],
            last_run_at=row["last_run_at"],
            last_status=row["last_status"],
            last_error=row["last_error"],
            run_count=int(row["run_count"] or 0),
            updated_at=row["updated_at"],
        )

    async def mark_run_ok(self, job_name: str, run_date: str, now_iso: str) -> None:
        await self._db.execute(
            """
            INSERT INTO job_runs(job_name, last_run_date, last_run_at, last_status, last_error, run_count, updated_at)
            VALUES (?, ?, ?, 'ok', NULL, 1, ?)
            ON CONFLICT(job_name) DO UPDATE SET
              last_run_date = excluded.last_run_date,
              last_run_at = excluded.last_run_at,
              last_status = 'ok',
              last_error = NULL,
              run_count = job_runs.run_count + 1,
              updated_at = excluded.updated_at;
            """,
            (job_name, run_date, now_iso, now_iso),
        )

    async def mark_run_failed(self, job_name: str, error: str, now_iso: str) -> None:
        # last_run_date stays put so the job is retried
        await self._db.execute(
            """
            INSERT INTO job_runs(job_name, last_run_date, last_run_at, last_status, last_error, run_count, updated_at)
            VALUES (?, NULL, ?, 'failed', ?, 0, ?)
            ON CONFLICT(job_name) DO UPDATE SET
              last_run_at = excluded.last_run_at,
              last_status = 'failed',
              last_error = excluded.last_error,
              updated_at = excluded.updated_at;
            """,
            (job_name, now_iso, error, now_iso),
        )
