"""Calendar views for tasks and events.

Month, week and day grids built from in-memory collections, plus the
hour-by-hour day schedule.
"""
from __future__ import annotations

from .views import (
    FIRST_HOUR,
    LAST_HOUR,
    VIEW_TYPES,
    CalendarCell,
    CalendarView,
    HourSlot,
    ViewType,
    build_day_schedule,
    build_grid,
    calendar_days,
    event_on_day,
    events_for_day,
    items_for_day,
    navigate,
    task_on_day,
    tasks_for_day,
)

__all__ = [
    "FIRST_HOUR",
    "LAST_HOUR",
    "VIEW_TYPES",
    "CalendarCell",
    "CalendarView",
    "HourSlot",
    "ViewType",
    "build_day_schedule",
    "build_grid",
    "calendar_days",
    "event_on_day",
    "events_for_day",
    "items_for_day",
    "navigate",
    "task_on_day",
    "tasks_for_day",
]
