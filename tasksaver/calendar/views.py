"""Bucket tasks and events into month, week and day grids.

Weeks start on Sunday. A task sits on the day its due date falls in; an
event sits on every day its [start, end] interval touches.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable, List, Optional, Union

from ..dates import day_window, end_of_week, parse_hour, start_of_week
from ..items.types import Event, Task

FIRST_HOUR = 6
LAST_HOUR = 22


class ViewType(str, Enum):
    MONTH = "month"
    WEEK = "week"
    DAY = "day"


VIEW_TYPES = [v.value for v in ViewType]


@dataclass(slots=True)
class CalendarView:
    type: str
    current_date: date

    def __post_init__(self) -> None:
        if self.type not in VIEW_TYPES:
            raise ValueError(f"Unknown calendar view '{self.type}'. Use one of: {', '.join(VIEW_TYPES)}")
        if isinstance(self.current_date, datetime):
            self.current_date = self.current_date.date()


@dataclass(slots=True)
class CalendarCell:
    day: date
    tasks: List[Task] = field(default_factory=list)
    events: List[Event] = field(default_factory=list)
    in_current_month: bool = True
    is_today: bool = False

    @property
    def item_count(self) -> int:
        return len(self.tasks) + len(self.events)


@dataclass(slots=True)
class HourSlot:
    hour: int
    tasks: List[Task] = field(default_factory=list)
    events: List[Event] = field(default_factory=list)

    @property
    def label(self) -> str:
        suffix = "AM" if self.hour < 12 else "PM"
        display = self.hour % 12 or 12
        return f"{display} {suffix}"


# =============================================================================
# Day ranges
# =============================================================================

def _month_bounds(day: date) -> tuple[date, date]:
    first = day.replace(day=1)
    next_month = (first + timedelta(days=32)).replace(day=1)
    return first, next_month - timedelta(days=1)


def _days_between(start: date, end: date) -> List[date]:
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


def calendar_days(view: CalendarView) -> List[date]:
    """Days shown by ``view``.

    Month view is padded out to whole Sunday-to-Saturday weeks, so it always
    holds a multiple of seven days.
    """
    if view.type == ViewType.MONTH.value:
        first, last = _month_bounds(view.current_date)
        return _days_between(start_of_week(first), end_of_week(last))
    if view.type == ViewType.WEEK.value:
        return _days_between(start_of_week(view.current_date), end_of_week(view.current_date))
    return [view.current_date]


def navigate(view: CalendarView, step: int) -> CalendarView:
    """Move ``step`` months, weeks or days forward (negative goes back)."""
    current = view.current_date
    if view.type == ViewType.MONTH.value:
        month_index = current.year * 12 + (current.month - 1) + step
        year, month = divmod(month_index, 12)
        first = date(year, month + 1, 1)
        _, last = _month_bounds(first)
        return CalendarView(view.type, first.replace(day=min(current.day, last.day)))
    if view.type == ViewType.WEEK.value:
        return CalendarView(view.type, current + timedelta(weeks=step))
    return CalendarView(view.type, current + timedelta(days=step))


# =============================================================================
# Membership
# =============================================================================

def task_on_day(task: Task, day: date) -> bool:
    if task.due_date is None:
        return False
    start, end = day_window(day)
    return start <= task.due_date <= end


def event_on_day(event: Event, day: date) -> bool:
    start, end = day_window(day)
    return (
        start <= event.start_date <= end
        or start <= event.end_date <= end
        or (event.start_date <= start and event.end_date >= end)
    )


def tasks_for_day(tasks: Iterable[Task], day: date) -> List[Task]:
    return [task for task in tasks if task_on_day(task, day)]


def events_for_day(events: Iterable[Event], day: date) -> List[Event]:
    return [event for event in events if event_on_day(event, day)]


def items_for_day(
    tasks: Iterable[Task],
    events: Iterable[Event],
    day: date,
) -> tuple[List[Task], List[Event]]:
    return tasks_for_day(tasks, day), events_for_day(events, day)


# =============================================================================
# Grids
# =============================================================================

def build_grid(
    view: CalendarView,
    tasks: Iterable[Task],
    events: Iterable[Event],
    today: Optional[Union[date, datetime]] = None,
) -> List[CalendarCell]:
    """One cell per day of ``view``, each holding that day's items."""
    tasks = list(tasks)
    events = list(events)
    if isinstance(today, datetime):
        today = today.date()
    today = today or date.today()

    cells = []
    for day in calendar_days(view):
        day_tasks, day_events = items_for_day(tasks, events, day)
        cells.append(
            CalendarCell(
                day=day,
                tasks=day_tasks,
                events=day_events,
                in_current_month=(
                    day.month == view.current_date.month and day.year == view.current_date.year
                ),
                is_today=day == today,
            )
        )
    return cells


def build_day_schedule(
    day: Union[date, datetime],
    tasks: Iterable[Task],
    events: Iterable[Event],
) -> List[HourSlot]:
    """Hour slots from 06:00 to 22:00 for one day.

    Items are placed by the hour of ``due_time`` (tasks) or ``start_time``
    (events). Items with no time, or a time outside the shown hours, do not
    appear in any slot.
    """
    if isinstance(day, datetime):
        day = day.date()
    day_tasks, day_events = items_for_day(tasks, events, day)

    slots = {hour: HourSlot(hour) for hour in range(FIRST_HOUR, LAST_HOUR + 1)}
    for task in day_tasks:
        slot = slots.get(parse_hour(task.due_time))
        if slot is not None:
            slot.tasks.append(task)
    for event in day_events:
        slot = slots.get(parse_hour(event.start_time))
        if slot is not None:
            slot.events.append(event)
    return list(slots.values())
