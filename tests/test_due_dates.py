"""
Tests for calendar-day parsing of task dates and due-date resolution.

Run with: python -m pytest tests/test_due_dates.py -v
"""
from __future__ import annotations

from datetime import date
from zoneinfo import ZoneInfo

from maintenance_alerts.domain.tasks.dates import (
    due_date_source,
    parse_task_date_local,
    resolve_due_date,
    to_local_ymd,
)

from _support import make_task

# UTC-11 through UTC+14
ZONES = [
    "Pacific/Pago_Pago",
    "America/Los_Angeles",
    "America/New_York",
    "UTC",
    "Europe/Helsinki",
    "Asia/Seoul",
    "Pacific/Auckland",
    "Pacific/Kiritimati",
]


# ----- parse_task_date_local -----


def test_date_only_keeps_components_in_every_timezone():
    """YYYY-MM-DD gives back exactly that day no matter the reference timezone."""
    for raw in ("2025-01-10", "2024-02-29", "2025-12-31", "2025-03-09", "2025-11-02"):
        expected = date.fromisoformat(raw)
        for name in ZONES:
            assert parse_task_date_local(raw, ZoneInfo(name)) == expected, (raw, name)
        assert parse_task_date_local(raw) == expected


def test_timestamp_with_offset_uses_reference_timezone_day():
    """An aware timestamp lands on the calendar day of the reference timezone."""
    raw = "2025-01-10T23:30:00+00:00"
    assert parse_task_date_local(raw, ZoneInfo("Asia/Seoul")) == date(2025, 1, 11)
    assert parse_task_date_local(raw, ZoneInfo("America/Los_Angeles")) == date(2025, 1, 10)
    assert parse_task_date_local(raw, ZoneInfo("UTC")) == date(2025, 1, 10)


def test_timestamp_with_z_suffix():
    assert parse_task_date_local("2025-06-01T02:00:00Z", ZoneInfo("America/New_York")) == date(2025, 5, 31)


def test_naive_timestamp_is_local_wall_time():
    """No offset: the written day is the day."""
    assert parse_task_date_local("2025-01-10T23:59:00", ZoneInfo("Asia/Seoul")) == date(2025, 1, 10)


def test_unparsable_values_return_none():
    for raw in (
        None,
        "",
        "   ",
        "tomorrow",
        "2025-13-01",
        "2025-02-30",
        "10/01/2025",
        "٢٠٢٥-٠١-١٠",
        "２０２５-０１-１０",
        " 2025-01-10\n",
    ):
        assert parse_task_date_local(raw, ZoneInfo("UTC")) is None, raw


def test_to_local_ymd():
    assert to_local_ymd("2025-01-10") == "2025-01-10"
    assert to_local_ymd("2025-01-10T23:30:00+00:00", ZoneInfo("Asia/Seoul")) == "2025-01-11"
    assert to_local_ymd("garbage") is None


# ----- resolve_due_date -----


def test_resolver_priority_personal_before_scheduled():
    """due_date unset: personal_due_date beats scheduled_date."""
    task = make_task(due_date=None, personal_due_date="2025-01-10", scheduled_date="2025-01-01")
    assert resolve_due_date(task) == date(2025, 1, 10)
    assert due_date_source(task) == "personal_due_date"


def test_resolver_due_date_wins():
    task = make_task(due_date="2025-02-01", personal_due_date="2025-01-10", scheduled_date="2025-01-01")
    assert resolve_due_date(task) == date(2025, 2, 1)
    assert due_date_source(task) == "due_date"


def test_resolver_falls_through_empty_strings():
    task = make_task(due_date="", personal_due_date="  ", scheduled_date="2025-01-01")
    assert resolve_due_date(task) == date(2025, 1, 1)
    assert due_date_source(task) == "scheduled_date"


def test_resolver_no_dates():
    task = make_task()
    assert resolve_due_date(task) is None
    assert due_date_source(task) is None


def test_resolver_malformed_primary_does_not_cascade():
    """A broken due_date means no date at all, even if personal_due_date is fine."""
    task = make_task(due_date="2025-02-30", personal_due_date="2025-01-10")
    assert due_date_source(task) == "due_date"
    assert resolve_due_date(task) is None
