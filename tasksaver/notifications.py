"""Overdue and upcoming reminders for tasks and events."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Union

from .dates import start_of_day, utcnow
from .items.types import Event, Task

UPCOMING_WINDOW = timedelta(days=1)
COMPLETED = "completed"


@dataclass(slots=True)
class ItemAlerts:
    tasks: List[Task] = field(default_factory=list)
    events: List[Event] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.tasks) + len(self.events)


def _now(now: Optional[datetime]) -> datetime:
    return now if now is not None else utcnow().replace(tzinfo=None)


def check_overdue_items(
    tasks: Iterable[Task],
    events: Iterable[Event],
    now: Optional[datetime] = None,
) -> ItemAlerts:
    """Unfinished tasks whose due day has begun and events that have ended.

    A task due today counts as overdue once the day has started.
    """
    now = _now(now)
    return ItemAlerts(
        tasks=[
            task
            for task in tasks
            if task.due_date is not None
            and start_of_day(task.due_date) < now
            and task.status != COMPLETED
        ],
        events=[
            event for event in events if event.end_date < now and event.status != COMPLETED
        ],
    )


def check_upcoming_items(
    tasks: Iterable[Task],
    events: Iterable[Event],
    now: Optional[datetime] = None,
) -> ItemAlerts:
    """Unfinished tasks due, and events starting, within the next 24 hours."""
    now = _now(now)
    horizon = now + UPCOMING_WINDOW
    return ItemAlerts(
        tasks=[
            task
            for task in tasks
            if task.due_date is not None
            and now <= task.due_date <= horizon
            and task.status != COMPLETED
        ],
        events=[
            event
            for event in events
            if now <= event.start_date <= horizon and event.status != COMPLETED
        ],
    )


def relative_date_label(value: Union[date, datetime], today: Optional[date] = None) -> str:
    """Label a date as Today, Tomorrow, Yesterday or e.g. "Mar 05, 2024"."""
    day = value.date() if isinstance(value, datetime) else value
    today = today or utcnow().date()
    delta = (day - today).days
    if delta == 0:
        return "Today"
    if delta == 1:
        return "Tomorrow"
    if delta == -1:
        return "Yesterday"
    return day.strftime("%b %d, %Y")
