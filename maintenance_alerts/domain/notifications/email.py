"""
Digest e-mail content: subject line, HTML body and a plain-text alternative.
"""
from __future__ import annotations

import html
from typing import Optional

from maintenance_alerts.domain.notifications.models import Digest, EmailMessage, TaskNotification
from maintenance_alerts.domain.tasks.dates import due_date_source, parse_task_date_local
from maintenance_alerts.domain.tasks.models import InstrumentRef, MaintenanceTask

DUE_DATE_LABELS = {
    "due_date": "Due date",
    "personal_due_date": "Target date",
    "scheduled_date": "Scheduled",
}


def _plural(n: int, word: str) -> str:
    return f"{n} {word}{'s' if n != 1 else ''}"


def escape_html(text: Optional[str]) -> str:
    if not text:
        return ""
    return html.escape(text, quote=True)


def format_instrument(instrument: InstrumentRef) -> str:
    parts = []
    if instrument.maker:
        parts.append(instrument.maker)
    if instrument.type:
        parts.append(instrument.type)
    if instrument.serial_number:
        parts.append(f"#{instrument.serial_number}")
    return " ".join(parts) if parts else "Unknown instrument"


def build_subject(digest: Digest) -> str:
    if digest.overdue:
        return f"[Urgent] {_plural(len(digest.overdue), 'overdue task')} need your attention"
    if digest.today:
        return f"Today: {_plural(len(digest.today), 'task')} due"
    return f"Reminder: {_plural(len(digest.upcoming), 'upcoming task')}"


def day_phrase(n: TaskNotification) -> Optional[str]:
    if n.kind == "overdue":
        return f"{_plural(n.days, 'day')} overdue"
    if n.kind == "upcoming":
        return f"Due in {_plural(n.days, 'day')}"
    return None


def due_label(task: MaintenanceTask) -> Optional[str]:
    """Due day prefixed with the name of the field it came from, e.g. "Target date: 2025-01-12"."""
    source = due_date_source(task)
    if source is None:
        return None
    day = parse_task_date_local(getattr(task, source))
    if day is None:
        return None
    return f"{DUE_DATE_LABELS[source]}: {day.isoformat()}"


# (heading, background, accent)
_SECTIONS = {
    "overdue": ("Overdue Tasks", "#fee", "#dc3545"),
    "today": ("Due Today", "#fff3cd", "#856404"),
    "upcoming": ("Upcoming Tasks", "#d1ecf1", "#0c5460"),
}


def _html_item(n: TaskNotification, accent: str) -> str:
    task = n.task
    lines = [f"<strong>{escape_html(task.title)}</strong>"]
    if task.instrument:
        lines.append(f"<br><small>Instrument: {escape_html(format_instrument(task.instrument))}</small>")
    if task.task_type:
        lines.append(f"<br><small>Type: {escape_html(task.task_type)}</small>")
    label = due_label(task)
    if label:
        lines.append(f"<br><small>{label}</small>")
    phrase = day_phrase(n)
    if phrase:
        color = f' style="color: {accent};"' if n.kind == "overdue" else ""
        lines.append(f"<br><small{color}>{phrase}</small>")
    return '<li style="margin-bottom: 10px;">' + "".join(lines) + "</li>"


def _html_section(kind: str, items: tuple[TaskNotification, ...]) -> str:
    if not items:
        return ""
    heading, bg, accent = _SECTIONS[kind]
    body = "".join(_html_item(n, accent) for n in items)
    return (
        f'<div style="background-color: {bg}; border-left: 4px solid {accent}; padding: 15px; '
        f'margin-bottom: 20px; border-radius: 4px;">'
        f'<h2 style="margin: 0 0 10px 0; color: {accent};">{heading} ({len(items)})</h2>'
        f'<ul style="margin: 0; padding-left: 20px;">{body}</ul>'
        f"</div>"
    )


def _text_section(kind: str, items: tuple[TaskNotification, ...]) -> list[str]:
    if not items:
        return []
    heading = _SECTIONS[kind][0]
    out = [f"{heading} ({len(items)})"]
    for n in items:
        line = f"- {n.task.title}"
        extras = []
        if n.task.instrument:
            extras.append(format_instrument(n.task.instrument))
        if n.task.task_type:
            extras.append(n.task.task_type)
        label = due_label(n.task)
        if label:
            extras.append(label)
        phrase = day_phrase(n)
        if phrase:
            extras.append(phrase)
        if extras:
            line += f" ({', '.join(extras)})"
        out.append(line)
    out.append("")
    return out


def render_digest_email(digest: Digest, app_url: str) -> EmailMessage:
    subject = build_subject(digest)
    base = app_url.rstrip("/")
    sections = "".join(
        _html_section(kind, items)
        for kind, items in (("overdue", digest.overdue), ("today", digest.today), ("upcoming", digest.upcoming))
    )
    body = f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{escape_html(subject)}</title>
</head>
<body style="font-family: -apple-system, 'Segoe UI', Roboto, Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
  <div style="background-color: #f8f9fa; padding: 20px; border-radius: 8px; margin-bottom: 20px;">
    <h1 style="margin: 0; color: #1a1a1a;">Task Notifications</h1>
    <p style="margin: 10px 0 0 0; color: #666;">Your maintenance task reminders</p>
  </div>
  {sections}
  <div style="margin-top: 30px; padding-top: 20px; border-top: 1px solid #ddd; text-align: center;">
    <a href="{escape_html(base)}/calendar" style="display: inline-block; background-color: #007bff; color: white; padding: 12px 24px; text-decoration: none; border-radius: 4px; font-weight: bold;">View Calendar</a>
  </div>
  <div style="margin-top: 20px; padding-top: 20px; border-top: 1px solid #ddd; font-size: 12px; color: #666; text-align: center;">
    <p>You're receiving this email because you have email notifications enabled in your settings.</p>
    <p><a href="{escape_html(base)}/settings" style="color: #007bff;">Manage notification settings</a></p>
  </div>
</body>
</html>"""

    text_lines = ["Task Notifications", ""]
    text_lines += _text_section("overdue", digest.overdue)
    text_lines += _text_section("today", digest.today)
    text_lines += _text_section("upcoming", digest.upcoming)
    text_lines.append(f"View calendar: {base}/calendar")
    text_lines.append(f"Manage notification settings: {base}/settings")

    return EmailMessage(subject=subject, html=body, text="\n".join(text_lines))
