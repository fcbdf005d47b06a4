"""Items package - tasks and events."""
from __future__ import annotations

from .store import (
    add_event_comment,
    add_task_comment,
    create_event,
    create_task,
    delete_event,
    delete_task,
    get_event,
    get_task,
    list_events,
    list_tasks,
    update_event,
    update_task,
)
from .types import (
    EVENT_STATUSES,
    PRIORITIES,
    RECURRENCE_TYPES,
    TASK_STATUSES,
    Comment,
    Event,
    EventStatus,
    Priority,
    Recurrence,
    RecurrenceType,
    Task,
    TaskStatus,
)

__all__ = [
    "EVENT_STATUSES",
    "PRIORITIES",
    "RECURRENCE_TYPES",
    "TASK_STATUSES",
    "Comment",
    "Event",
    "EventStatus",
    "Priority",
    "Recurrence",
    "RecurrenceType",
    "Task",
    "TaskStatus",
    "add_event_comment",
    "add_task_comment",
    "create_event",
    "create_task",
    "delete_event",
    "delete_task",
    "get_event",
    "get_task",
    "list_events",
    "list_tasks",
    "update_event",
    "update_task",
]
