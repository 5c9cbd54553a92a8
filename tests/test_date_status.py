"""
Tests for due-date status classification (overdue / today / upcoming / normal).

Run with: python -m pytest tests/test_date_status.py -v
"""
from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from maintenance_alerts.domain.tasks.status import DateStatus, classify

from _support import make_task

NY = ZoneInfo("America/New_York")


def at(*args) -> datetime:
    return datetime(*args, tzinfo=NY)


def test_last_second_of_due_day_is_today():
    """23:59:59 on the due day is still 'today', not overdue."""
    task = make_task(due_date="2025-01-10")
    assert classify(task, at(2025, 1, 10, 23, 59, 59)) == DateStatus("today", 0)


def test_first_second_after_due_day_is_overdue():
    task = make_task(due_date="2025-01-10")
    assert classify(task, at(2025, 1, 11, 0, 0, 1)) == DateStatus("overdue", 1)


def test_overdue_days_count_calendar_days():
    task = make_task(due_date="2025-01-01")
    assert classify(task, at(2025, 1, 11, 8, 0)) == DateStatus("overdue", 10)


def test_upcoming_within_window():
    task = make_task(due_date="2025-01-10")
    assert classify(task, at(2025, 1, 8, 0, 0), upcoming_window=3) == DateStatus("upcoming", 2)


def test_upcoming_window_edge():
    task = make_task(due_date="2025-01-11")
    assert classify(task, at(2025, 1, 8, 12, 0)) == DateStatus("upcoming", 3)
    assert classify(task, at(2025, 1, 7, 12, 0)) == DateStatus("normal", 4)


def test_unbounded_window():
    task = make_task(due_date="2025-02-10")
    assert classify(task, at(2025, 1, 10, 12, 0), upcoming_window=None) == DateStatus("upcoming", 31)


def test_far_future_is_normal_with_magnitude():
    task = make_task(due_date="2025-01-30")
    assert classify(task, at(2025, 1, 10, 12, 0)) == DateStatus("normal", 20)


def test_completed_and_cancelled_never_alert():
    for status in ("completed", "cancelled", "COMPLETED"):
        task = make_task(status=status, due_date="2024-01-01")
        assert classify(task, at(2025, 1, 10, 12, 0)) == DateStatus("normal", 0), status


def test_unknown_status_treated_as_pending():
    task = make_task(status="on_hold", due_date="2025-01-09")
    assert classify(task, at(2025, 1, 10, 12, 0)) == DateStatus("overdue", 1)


def test_missing_or_malformed_due_date_is_normal():
    now = at(2025, 1, 10, 12, 0)
    assert classify(make_task(), now) == DateStatus("normal", 0)
    assert classify(make_task(due_date="not-a-date", scheduled_date="2025-01-01"), now) == DateStatus("normal", 0)


def test_non_ascii_digits_are_not_a_due_date():
    """Arabic-Indic or fullwidth digits look like yesterday but are not a date."""
    now = at(2025, 1, 10, 12, 0)
    assert classify(make_task(due_date="٢٠٢٥-٠١-٠٩"), now) == DateStatus("normal", 0)
    assert classify(make_task(due_date="２０２５-０１-０９"), now) == DateStatus("normal", 0)


def test_priority_fields_feed_classification():
    task = make_task(personal_due_date="2025-01-10", scheduled_date="2025-01-01")
    assert classify(task, at(2025, 1, 10, 9, 0)) == DateStatus("today", 0)


def test_dst_spring_forward_counts_whole_days():
    """New York skips 02:00 on 2025-03-09; the day count must not drift."""
    task = make_task(due_date="2025-03-10")
    assert classify(task, at(2025, 3, 8, 23, 30)) == DateStatus("upcoming", 2)
    task = make_task(due_date="2025-03-08")
    assert classify(task, at(2025, 3, 10, 0, 30)) == DateStatus("overdue", 2)


def test_dst_fall_back_counts_whole_days():
    task = make_task(due_date="2025-11-03")
    assert classify(task, at(2025, 11, 1, 23, 0)) == DateStatus("upcoming", 2)


def test_now_in_other_timezone_defines_today():
    """The same instant is a different day in Seoul and New York."""
    task = make_task(due_date="2025-01-11")
    instant_seoul = datetime(2025, 1, 11, 9, 0, tzinfo=ZoneInfo("Asia/Seoul"))
    assert classify(task, instant_seoul) == DateStatus("today", 0)
    assert classify(task, instant_seoul.astimezone(NY)) == DateStatus("upcoming", 1)


def test_naive_now_rejected():
    with pytest.raises(ValueError):
        classify(make_task(due_date="2025-01-10"), datetime(2025, 1, 10, 12, 0))
