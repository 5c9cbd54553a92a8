from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional, Sequence

from maintenance_alerts.domain.notifications.models import Digest, NotificationSettings, TaskNotification
from maintenance_alerts.domain.tasks.dates import due_date_source
from maintenance_alerts.domain.tasks.models import MaintenanceTask
from maintenance_alerts.domain.tasks.status import classify

logger = logging.getLogger(__name__)


def task_visible_to(task: MaintenanceTask, user_id: str) -> bool:
    """Owned tasks go to their owner only; unowned tasks are shared."""
    return task.owner_user_id is None or task.owner_user_id == user_id


def notification_for(
    task: MaintenanceTask,
    now: datetime,
    days_before_due: Sequence[int],
) -> Optional[TaskNotification]:
    # unbounded window here; days_before_due decides which upcoming days count
    st = classify(task, now, upcoming_window=None)
    if st.status != "normal":
        logger.debug(f"Task {task.id}: {st.status} ({st.days}d) from {due_date_source(task)}")
    if st.status == "overdue":
        return TaskNotification(task=task, kind="overdue", days=st.days)
    if st.status == "today":
        return TaskNotification(task=task, kind="today", days=0)
    if st.status == "upcoming" and st.days in days_before_due:
        return TaskNotification(task=task, kind="upcoming", days=st.days)
    return None


def build_digest(settings: NotificationSettings, tasks: Iterable[MaintenanceTask], now: datetime) -> Digest:
    overdue: list[TaskNotification] = []
    today: list[TaskNotification] = []
    upcoming: list[TaskNotification] = []

    for task in tasks:
        if not task_visible_to(task, settings.user_id):
            continue
        n = notification_for(task, now, settings.days_before_due)
        if n is None:
            continue
        if n.kind == "overdue":
            overdue.append(n)
        elif n.kind == "today":
            today.append(n)
        else:
            upcoming.append(n)

    # sorts are stable, ties keep input order
    overdue.sort(key=lambda n: n.days, reverse=True)
    upcoming.sort(key=lambda n: n.days)

    return Digest(
        user_id=settings.user_id,
        overdue=tuple(overdue),
        today=tuple(today),
        upcoming=tuple(upcoming),
    )


def build_digests(
    settings_list: Iterable[NotificationSettings],
    tasks: Sequence[MaintenanceTask],
    now: datetime,
) -> dict[str, Digest]:
    """Digests for every subscribed user that has something to report."""
    out: dict[str, Digest] = {}
    for settings in settings_list:
        if not settings.wants_email:
            continue
        digest = build_digest(settings, tasks, now)
        if not digest.is_empty:
            out[settings.user_id] = digest
    return out
