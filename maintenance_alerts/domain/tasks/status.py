from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Literal, Optional

from maintenance_alerts.domain.common.time import ensure_aware
from maintenance_alerts.domain.tasks.dates import resolve_due_date
from maintenance_alerts.domain.tasks.models import MaintenanceTask

DateStatusKind = Literal["overdue", "today", "upcoming", "normal"]

DEFAULT_UPCOMING_WINDOW = 3


@dataclass(frozen=True)
class DateStatus:
    status: DateStatusKind
    days: int  # magnitude; direction follows from status


NORMAL = DateStatus(status="normal", days=0)


def end_of_day(day: date, now: datetime) -> datetime:
    return datetime.combine(day, time.max, tzinfo=now.tzinfo)


def calendar_days_between(start: date, end: date) -> int:
    """Signed whole-day difference end - start."""
    return (end - start).days


def classify(
    task: MaintenanceTask,
    now: datetime,
    upcoming_window: Optional[int] = DEFAULT_UPCOMING_WINDOW,
) -> DateStatus:
    """
    Classify a task's due date relative to `now`.

    `now` must be timezone-aware; its timezone is the user's frame for both
    "today" and parsing any timestamp-shaped due dates. `upcoming_window=None`
    treats every future day as upcoming.
    """
    ensure_aware(now)
    if task.is_closed:
        return NORMAL

    due = resolve_due_date(task, now.tzinfo)
    if due is None:
        return NORMAL

    today = now.date()
    diff = calendar_days_between(today, due)

    # due today is not overdue until the day has fully elapsed
    if now > end_of_day(due, now):
        return DateStatus(status="overdue", days=abs(diff))
    if diff == 0:
        return DateStatus(status="today", days=0)
    if diff > 0 and (upcoming_window is None or diff <= upcoming_window):
        return DateStatus(status="upcoming", days=diff)
    return DateStatus(status="normal", days=abs(diff))
