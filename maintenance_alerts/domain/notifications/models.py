from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, Optional

from maintenance_alerts.domain.tasks.models import MaintenanceTask

NotificationKind = Literal["overdue", "today", "upcoming"]
DeliveryStatus = Literal["sent", "logged"]
UserRunStatus = Literal["sent", "logged", "failed", "skipped"]

DEFAULT_NOTIFICATION_TIME = "09:00"
DEFAULT_DAYS_BEFORE_DUE: tuple[int, ...] = (3, 1)


@dataclass(frozen=True)
class NotificationSettings:
    user_id: str
    enabled: bool = True
    email_notifications: bool = True
    notification_time: str = DEFAULT_NOTIFICATION_TIME
    days_before_due: tuple[int, ...] = DEFAULT_DAYS_BEFORE_DUE
    last_notification_sent_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def wants_email(self) -> bool:
        return self.enabled and self.email_notifications


@dataclass(frozen=True)
class TaskNotification:
    task: MaintenanceTask
    kind: NotificationKind
    days: int


@dataclass(frozen=True)
class Digest:
    user_id: str
    overdue: tuple[TaskNotification, ...] = ()
    today: tuple[TaskNotification, ...] = ()
    upcoming: tuple[TaskNotification, ...] = ()

    @property
    def count(self) -> int:
        return len(self.overdue) + len(self.today) + len(self.upcoming)

    @property
    def is_empty(self) -> bool:
        return self.count == 0


@dataclass(frozen=True)
class EmailMessage:
    subject: str
    html: str
    text: str


@dataclass(frozen=True)
class UserRunResult:
    user_id: str
    status: UserRunStatus
    email: Optional[str] = None
    notification_count: int = 0
    error_kind: Optional[str] = None
    error: Optional[str] = None


@dataclass
class RunReport:
    started_at: datetime
    subscribers: int = 0
    results: list[UserRunResult] = field(default_factory=list)

    def count(self, status: UserRunStatus) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def sent(self) -> int:
        return self.count("sent")

    @property
    def failed(self) -> int:
        return self.count("failed")

    def summary(self) -> str:
        return (
            f"subscribers={self.subscribers} sent={self.sent} logged={self.count('logged')} "
            f"failed={self.failed} skipped={self.count('skipped')}"
        )
