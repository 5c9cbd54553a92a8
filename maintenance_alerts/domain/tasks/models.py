from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

TaskStatus = Literal["pending", "in_progress", "completed", "cancelled"]
TaskType = Literal["repair", "rehair", "maintenance", "inspection", "setup", "adjustment", "restoration"]
TaskPriority = Literal["low", "medium", "high", "urgent"]

TASK_STATUSES: tuple[str, ...] = ("pending", "in_progress", "completed", "cancelled")
OPEN_STATUSES: tuple[str, ...] = ("pending", "in_progress")
CLOSED_STATUSES: tuple[str, ...] = ("completed", "cancelled")

# first non-empty wins
DUE_DATE_FIELDS: tuple[str, ...] = ("due_date", "personal_due_date", "scheduled_date")


def normalize_status(value: object) -> TaskStatus:
    """Whitelist task status; anything unrecognised is treated as pending."""
    s = str(value if value is not None else "").strip().lower()
    if s in TASK_STATUSES:
        return s  # type: ignore[return-value]
    return "pending"


@dataclass(frozen=True)
class InstrumentRef:
    maker: Optional[str] = None
    type: Optional[str] = None
    serial_number: Optional[str] = None


@dataclass(frozen=True)
class ClientRef:
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None


@dataclass(frozen=True)
class MaintenanceTask:
    id: str
    title: str
    status: str = "pending"
    task_type: Optional[str] = None
    priority: str = "medium"
    received_date: Optional[str] = None  # advisory only
    due_date: Optional[str] = None  # YYYY-MM-DD, requested by client
    personal_due_date: Optional[str] = None  # YYYY-MM-DD, own target
    scheduled_date: Optional[str] = None  # YYYY-MM-DD, booked work day
    completed_date: Optional[str] = None
    owner_user_id: Optional[str] = None  # None = shared with every subscriber
    instrument: Optional[InstrumentRef] = None
    client: Optional[ClientRef] = None

    @property
    def is_closed(self) -> bool:
        return normalize_status(self.status) in CLOSED_STATUSES
