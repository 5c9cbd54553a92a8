"""
Calendar-day handling for task dates.

Task dates are stored as date-only strings (YYYY-MM-DD). Reading them through a
datetime parser pins them to UTC midnight, which lands on the previous day for
anyone west of Greenwich. Everything here works on `datetime.date` values so the
day a user typed is the day they get back.
"""
from __future__ import annotations

import re
from datetime import date, datetime, tzinfo
from typing import Optional

from maintenance_alerts.domain.tasks.models import DUE_DATE_FIELDS, MaintenanceTask

DATE_ONLY_PATTERN = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")


def parse_task_date_local(value: Optional[str], tz: Optional[tzinfo] = None) -> Optional[date]:
    """
    Parse a task date string into a calendar day.

    Args:
        value: 'YYYY-MM-DD' or an ISO 8601 timestamp
        tz: reference timezone for timestamps (ignored for date-only strings)

    Returns:
        The calendar day, or None when the value is empty or unparsable.
    """
    # only plain ASCII, unpadded strings are dates
    if not value or not value.isascii() or value != value.strip():
        return None

    if DATE_ONLY_PATTERN.match(value):
        y, m, d = (int(p) for p in value.split("-"))
        try:
            return date(y, m, d)
        except ValueError:
            return None

    try:
        moment = datetime.fromisoformat(value)
    except ValueError:
        return None

    if moment.tzinfo is None:
        # naive timestamp: already local wall time
        return moment.date()
    if tz is not None:
        moment = moment.astimezone(tz)
    return moment.date()


def to_local_ymd(value: Optional[str], tz: Optional[tzinfo] = None) -> Optional[str]:
    """Stable YYYY-MM-DD day key for grouping and range checks."""
    parsed = parse_task_date_local(value, tz)
    return parsed.isoformat() if parsed else None


def due_date_source(task: MaintenanceTask) -> Optional[str]:
    """Name of the field that holds the authoritative due date, if any."""
    for field in DUE_DATE_FIELDS:
        raw = getattr(task, field, None)
        if raw and str(raw).strip():
            return field
    return None


def resolve_due_date(task: MaintenanceTask, tz: Optional[tzinfo] = None) -> Optional[date]:
    """
    Pick the task's due day: due_date > personal_due_date > scheduled_date.

    A malformed value in the winning field means "no date". The lower-priority
    fields are not consulted in that case.
    """
    field = due_date_source(task)
    if field is None:
        return None
    return parse_task_date_local(getattr(task, field), tz)
