from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, Sequence

from maintenance_alerts.domain.notifications.models import DeliveryStatus, EmailMessage, NotificationSettings
from maintenance_alerts.domain.tasks.models import MaintenanceTask


class Clock(ABC):
    @abstractmethod
    def now(self) -> datetime: ...


class TaskRepository(ABC):
    @abstractmethod
    async def list_open_tasks(self, user_id: str) -> Sequence[MaintenanceTask]:
        """Pending/in-progress tasks without a completed date that `user_id` may see."""


class NotificationSettingsRepository(ABC):
    @abstractmethod
    async def list_subscribed(self) -> Sequence[NotificationSettings]: ...

    @abstractmethod
    async def get(self, user_id: str) -> Optional[NotificationSettings]: ...

    @abstractmethod
    async def upsert(self, settings: NotificationSettings, now_iso: str) -> NotificationSettings: ...

    @abstractmethod
    async def mark_sent(self, user_id: str, sent_at_iso: str) -> None: ...


class UserDirectory(ABC):
    @abstractmethod
    async def get_email(self, user_id: str) -> Optional[str]: ...


class EmailSender(ABC):
    @abstractmethod
    async def send(self, to: str, message: EmailMessage) -> DeliveryStatus: ...
