"""
Tests for digest e-mail rendering.
"""
from __future__ import annotations

from maintenance_alerts.domain.notifications.email import build_subject, format_instrument, render_digest_email
from maintenance_alerts.domain.notifications.models import Digest, TaskNotification
from maintenance_alerts.domain.tasks.models import InstrumentRef

from _support import make_task


def note(kind: str, days: int = 0, **task_kwargs) -> TaskNotification:
    return TaskNotification(task=make_task(**task_kwargs), kind=kind, days=days)


def test_subject_prefers_overdue_then_today_then_upcoming():
    assert build_subject(Digest("u", overdue=(note("overdue", 2),), today=(note("today"),))) == (
        "[Urgent] 1 overdue task need your attention"
    )
    assert build_subject(Digest("u", overdue=(note("overdue", 2), note("overdue", 1)))) == (
        "[Urgent] 2 overdue tasks need your attention"
    )
    assert build_subject(Digest("u", today=(note("today"),), upcoming=(note("upcoming", 1),))) == "Today: 1 task due"
    assert build_subject(Digest("u", upcoming=(note("upcoming", 1), note("upcoming", 3)))) == (
        "Reminder: 2 upcoming tasks"
    )


def test_format_instrument():
    assert format_instrument(InstrumentRef(maker="Vuillaume", type="Violin", serial_number="1234")) == (
        "Vuillaume Violin #1234"
    )
    assert format_instrument(InstrumentRef(type="Bow")) == "Bow"
    assert format_instrument(InstrumentRef()) == "Unknown instrument"


def test_html_escapes_user_text_and_lists_sections():
    digest = Digest(
        "u",
        overdue=(note("overdue", 3, title="<script>alert(1)</script>", task_type="repair"),),
        upcoming=(note("upcoming", 1, title="Rehair & clean", instrument=InstrumentRef(maker="O'Neil")),),
    )
    msg = render_digest_email(digest, "https://shop.example.com/")
    assert "<script>" not in msg.html
    assert "&lt;script&gt;" in msg.html
    assert "Rehair &amp; clean" in msg.html
    assert "O&#x27;Neil" in msg.html
    assert "3 days overdue" in msg.html
    assert "Due in 1 day<" in msg.html
    assert "Overdue Tasks (1)" in msg.html
    assert "Upcoming Tasks (1)" in msg.html
    assert "Due Today" not in msg.html
    assert "https://shop.example.com/calendar" in msg.html
    assert "https://shop.example.com/settings" in msg.html


def test_plain_text_body():
    digest = Digest("u", today=(note("today", title="Setup", task_type="setup"),))
    msg = render_digest_email(digest, "http://localhost:3000")
    assert "Due Today (1)" in msg.text
    assert "- Setup (setup)" in msg.text
    assert "View calendar: http://localhost:3000/calendar" in msg.text


def test_item_names_the_field_its_due_day_came_from():
    digest = Digest(
        "u",
        overdue=(note("overdue", 2, title="Crack repair", due_date="2025-01-08", personal_due_date="2025-01-20"),),
        upcoming=(
            note("upcoming", 2, title="Rehair", personal_due_date="2025-01-12", scheduled_date="2025-01-11"),
            note("upcoming", 3, title="Setup", scheduled_date="2025-01-13"),
        ),
    )
    msg = render_digest_email(digest, "http://localhost:3000")
    assert "<small>Due date: 2025-01-08</small>" in msg.html
    assert "<small>Target date: 2025-01-12</small>" in msg.html
    assert "<small>Scheduled: 2025-01-13</small>" in msg.html
    assert "- Rehair (Target date: 2025-01-12, Due in 2 days)" in msg.text
    assert "- Setup (Scheduled: 2025-01-13, Due in 3 days)" in msg.text


def test_item_without_readable_due_day_has_no_date_line():
    msg = render_digest_email(Digest("u", today=(note("today", title="Odd", due_date="soon"),)), "http://x")
    assert "Due date" not in msg.html
    assert "- Odd" in msg.text
