from __future__ import annotations

from typing import Optional, Sequence

from maintenance_alerts.domain.notifications.ports import TaskRepository
from maintenance_alerts.domain.tasks.models import OPEN_STATUSES, ClientRef, InstrumentRef, MaintenanceTask
from maintenance_alerts.infra.db.connection import Database


class TasksSqliteRepo(TaskRepository):
    def __init__(self, db: Database) -> None:
        self._db = db

    async def create_instrument(
        self, instrument_id: str, maker: Optional[str], type_: Optional[str], serial_number: Optional[str]
    ) -> None:
        await self._db.execute(
            "INSERT INTO instruments(id, maker, type, serial_number) VALUES (?, ?, ?, ?);",
            (instrument_id, maker, type_, serial_number),
        )

    async def create_client(
        self, client_id: str, first_name: Optional[str], last_name: Optional[str], email: Optional[str]
    ) -> None:
        await self._db.execute(
            "INSERT INTO clients(id, first_name, last_name, email) VALUES (?, ?, ?, ?);",
            (client_id, first_name, last_name, email),
        )

    async def create_task(
        self,
        task: MaintenanceTask,
        received_date: str,
        now_iso: str,
        instrument_id: Optional[str] = None,
        client_id: Optional[str] = None,
    ) -> None:
        await self._db.execute(
            """
            INSERT INTO maintenance_tasks(
              id, instrument_id, client_id, owner_user_id,
              task_type, title, status, priority,
              received_date, due_date, personal_due_date, scheduled_date, completed_date,
              created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?);
            """,
            (
                task.id,
                instrument_id,
                client_id,
                task.owner_user_id,
                task.task_type or "maintenance",
                task.title,
                task.status,
                task.priority,
                received_date,
                task.due_date,
                task.personal_due_date,
                task.scheduled_date,
                task.completed_date,
                now_iso,
                now_iso,
            ),
        )

    async def list_open_tasks(self, user_id: str) -> Sequence[MaintenanceTask]:
        placeholders = ", ".join("?" for _ in OPEN_STATUSES)
        rows = await self._db.fetchall(
            f"""
            SELECT t.*,
                   i.id AS i_id, i.maker AS i_maker, i.type AS i_type, i.serial_number AS i_serial,
                   c.id AS c_id, c.first_name AS c_first, c.last_name AS c_last, c.email AS c_email
            FROM maintenance_tasks t
            LEFT JOIN instruments i ON i.id = t.instrument_id
            LEFT JOIN clients c ON c.id = t.client_id
            WHERE t.status IN ({placeholders})
              AND t.completed_date IS NULL
              AND (t.owner_user_id IS NULL OR t.owner_user_id = ?)
            ORDER BY t.created_at ASC, t.id ASC;
            """,
            (*OPEN_STATUSES, user_id),
        )
        return [self._row_to_task(r) for r in rows]

    def _row_to_task(self, row) -> MaintenanceTask:
        instrument = None
        if row["i_id"] is not None:
            instrument = InstrumentRef(maker=row["i_maker"], type=row["i_type"], serial_number=row["i_serial"])
        client = None
        if row["c_id"] is not None:
            client = ClientRef(first_name=row["c_first"], last_name=row["c_last"], email=row["c_email"])
        return MaintenanceTask(
            id=row["id"],
            title=row["title"],
            status=row["status"],
            task_type=row["task_type"],
            priority=row["priority"],
            received_date=row["received_date"],
            due_date=row["due_date"],
            personal_due_date=row["personal_due_date"],
            scheduled_date=row["scheduled_date"],
            completed_date=row["completed_date"],
            owner_user_id=row["owner_user_id"],
            instrument=instrument,
            client=client,
        )
