"""Plain-text renderings of lists, calendars, the inbox and reminders."""
from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional

from .calendar import CalendarCell, HourSlot
from .items.types import Event, Task
from .messages.store import MessagePage
from .notifications import ItemAlerts, relative_date_label

WEEKDAY_HEADER = "Sun Mon Tue Wed Thu Fri Sat"


def format_task_rows(tasks: Iterable[Task]) -> str:
    """Return a human-friendly summary table string."""

    lines = ["ID | Title | Status | Priority | Due | Tags"]
    for task in tasks:
        due = f"{task.due_date:%Y-%m-%d}" if task.due_date else "-"
        if task.due_date and task.due_time:
            due = f"{due} {task.due_time}"
        lines.append(
            f"{task.id[:8]} | {task.title} | {task.status} | {task.priority} | "
            f"{due} | {', '.join(task.tags) or '-'}"
        )
    return "\n".join(lines)


def format_event_rows(events: Iterable[Event]) -> str:
    lines = ["ID | Title | Status | Priority | Starts | Ends"]
    for event in events:
        starts = f"{event.start_date:%Y-%m-%d} {event.start_time or ''}".rstrip()
        ends = f"{event.end_date:%Y-%m-%d} {event.end_time or ''}".rstrip()
        lines.append(
            f"{event.id[:8]} | {event.title} | {event.status} | {event.priority} | {starts} | {ends}"
        )
    return "\n".join(lines)


def format_grid(cells: List[CalendarCell]) -> str:
    """Week rows of seven cells: day number, ``*`` for today, item count.

    Days outside the displayed month are shown in brackets.
    """
    lines = [WEEKDAY_HEADER]
    for start in range(0, len(cells), 7):
        row = []
        for cell in cells[start:start + 7]:
            label = f"{cell.day.day:>2}" if cell.in_current_month else f"[{cell.day.day}]"
            marker = "*" if cell.is_today else ""
            count = f"({cell.item_count})" if cell.item_count else ""
            row.append(f"{label}{marker}{count}")
        lines.append(" ".join(f"{text:<3}" for text in row))
    return "\n".join(lines)


def format_day_schedule(day: date, slots: Iterable[HourSlot]) -> str:
    lines = [f"{day:%A, %B %d, %Y}"]
    for slot in slots:
        entries = [f"[task] {task.title}" for task in slot.tasks]
        for event in slot.events:
            span = f"{event.start_time} - {event.end_time}" if event.end_time else event.start_time
            entries.append(f"[event] {event.title} ({span})")
        lines.append(f"{slot.label:>5} | {'; '.join(entries)}")
    return "\n".join(lines)


def format_message_rows(page: MessagePage) -> str:
    lines = ["ID | From | To | Subject | Status | Flags"]
    for message in page.messages:
        flags = "".join(
            flag
            for flag, on in (("U", not message.is_read), ("S", message.is_starred), ("!", message.is_important))
            if on
        )
        lines.append(
            f"{message.id[:8]} | {message.sender} | {', '.join(message.to)} | "
            f"{message.subject or '(no subject)'} | {message.status} | {flags or '-'}"
        )
    lines.append(f"Page {page.page} of {max(page.pages, 1)} ({page.total} messages)")
    return "\n".join(lines)


def format_alerts(overdue: ItemAlerts, upcoming: ItemAlerts, today: Optional[date] = None) -> str:
    if not overdue.total and not upcoming.total:
        return "Nothing overdue or coming up."

    lines = []
    if overdue.total:
        lines.append(f"Overdue ({overdue.total}):")
        lines += [f"  task  {t.title} (due {relative_date_label(t.due_date, today)})" for t in overdue.tasks]
        lines += [f"  event {e.title} (ended {relative_date_label(e.end_date, today)})" for e in overdue.events]
    if upcoming.total:
        lines.append(f"Upcoming ({upcoming.total}):")
        lines += [f"  task  {t.title} (due {relative_date_label(t.due_date, today)})" for t in upcoming.tasks]
        lines += [f"  event {e.title} (starts {relative_date_label(e.start_date, today)})" for e in upcoming.events]
    return "\n".join(lines)
