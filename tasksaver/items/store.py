"""Task and event repositories over the document store.

Tasks are owner-scoped: every read and write filters on ``user_id`` so a
foreign id behaves exactly like an unknown one. Events are listed globally
and are addressable by id alone.
"""
from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List, Optional

from ..dates import parse_datetime, utcnow
from ..errors import ValidationError
from ..store import DocumentStore, where
from .types import (
    EVENT_STATUSES,
    PRIORITIES,
    RECURRENCE_TYPES,
    TASK_STATUSES,
    Comment,
    Event,
    Recurrence,
    Task,
)

logger = logging.getLogger(__name__)

TASKS = "tasks"
EVENTS = "events"

# Fields a patch may never touch; comments only grow through add_*_comment.
_PROTECTED = {"id", "user_id", "created_at", "updated_at", "comments"}
_DATE_FIELDS = {"due_date", "start_date", "end_date"}


# =============================================================================
# Field coercion
# =============================================================================

def _check_choice(field_name: str, value: Any, allowed: List[str]) -> None:
    if value not in allowed:
        raise ValidationError(f"{field_name} must be one of: {', '.join(allowed)}")


def _coerce(key: str, value: Any) -> Any:
    if key in _DATE_FIELDS:
        try:
            return parse_datetime(value)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
    if key == "recurrence":
        if isinstance(value, Recurrence) or value is None:
            return value
        if value.get("type") and value["type"] not in RECURRENCE_TYPES:
            raise ValidationError(
                f"recurrence.type must be one of: {', '.join(RECURRENCE_TYPES)}"
            )
        try:
            return Recurrence.from_dict(value)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
    if key == "tags":
        return [str(tag).strip() for tag in value or [] if str(tag).strip()]
    if key == "title":
        title = (value or "").strip()
        if not title:
            raise ValidationError("Title is required")
        return title
    return value


def _apply_patch(item: Task | Event, updates: Dict[str, Any], statuses: List[str]) -> None:
    for key, value in updates.items():
        if key in _PROTECTED or not hasattr(item, key):
            continue
        if key == "priority":
            _check_choice("priority", value, PRIORITIES)
        elif key == "status":
            _check_choice("status", value, statuses)
        setattr(item, key, _coerce(key, value))


def _new_comment(content: str, author: str) -> Comment:
    content = (content or "").strip()
    if not content:
        raise ValidationError("Comment content is required")
    return Comment(id=str(uuid.uuid4()), content=content, author=author)


# =============================================================================
# Tasks
# =============================================================================

def create_task(store: DocumentStore, user_id: str, fields: Dict[str, Any]) -> Task:
    """Create a task owned by ``user_id``.

    ``fields`` uses the snake_case attribute names of :class:`Task`; unknown
    keys are ignored.

    Raises:
        ValidationError: missing title or an out-of-range enum value.
    """
    now = utcnow()
    task = Task(
        id=str(uuid.uuid4()),
        user_id=user_id,
        title=_coerce("title", fields.get("title")),
        created_at=now,
        updated_at=now,
    )
    _apply_patch(task, {k: v for k, v in fields.items() if k != "title"}, TASK_STATUSES)
    store.insert(TASKS, task.to_dict())
    logger.info(f"Created task {task.id} for user {user_id}")
    return task


def get_task(store: DocumentStore, user_id: str, task_id: str) -> Optional[Task]:
    data = store.get(TASKS, task_id)
    if not data or data.get("user_id") != user_id:
        return None
    return Task.from_dict(data)


def list_tasks(store: DocumentStore, user_id: str) -> List[Task]:
    """All of the user's tasks, newest first."""
    docs = store.find(TASKS, [where("user_id", user_id)], order_by="created_at", descending=True)
    return [Task.from_dict(doc) for doc in docs]


def update_task(
    store: DocumentStore,
    user_id: str,
    task_id: str,
    updates: Dict[str, Any],
) -> Optional[Task]:
    """Patch a task. Returns None when the id is unknown or foreign."""
    task = get_task(store, user_id, task_id)
    if task is None:
        return None
    _apply_patch(task, updates, TASK_STATUSES)
    task.updated_at = utcnow()
    store.replace(TASKS, task.id, task.to_dict())
    return task


def delete_task(store: DocumentStore, user_id: str, task_id: str) -> bool:
    if get_task(store, user_id, task_id) is None:
        return False
    deleted = store.delete(TASKS, task_id)
    if deleted:
        logger.info(f"Deleted task {task_id}")
    return deleted


def add_task_comment(
    store: DocumentStore,
    user_id: str,
    task_id: str,
    content: str,
    author: str,
) -> Optional[Task]:
    task = get_task(store, user_id, task_id)
    if task is None:
        return None
    task.comments.append(_new_comment(content, author))
    task.updated_at = utcnow()
    store.replace(TASKS, task.id, task.to_dict())
    return task


# =============================================================================
# Events
# =============================================================================

def create_event(
    store: DocumentStore,
    fields: Dict[str, Any],
    user_id: Optional[str] = None,
) -> Event:
    """Create an event; ``user_id`` is recorded when known but never enforced.

    Raises:
        ValidationError: missing title or start/end date.
    """
    start = _coerce("start_date", fields.get("start_date"))
    end = _coerce("end_date", fields.get("end_date"))
    if start is None or end is None:
        raise ValidationError("Start date and end date are required")

    now = utcnow()
    event = Event(
        id=str(uuid.uuid4()),
        title=_coerce("title", fields.get("title")),
        start_date=start,
        end_date=end,
        created_at=now,
        updated_at=now,
        user_id=user_id,
    )
    rest = {k: v for k, v in fields.items() if k not in ("title", "start_date", "end_date")}
    _apply_patch(event, rest, EVENT_STATUSES)
    store.insert(EVENTS, event.to_dict())
    logger.info(f"Created event {event.id}")
    return event


def get_event(store: DocumentStore, event_id: str) -> Optional[Event]:
    data = store.get(EVENTS, event_id)
    return Event.from_dict(data) if data else None


def list_events(store: DocumentStore) -> List[Event]:
    """Every event in the store, ordered by start date."""
    docs = store.find(EVENTS, order_by="start_date")
    return [Event.from_dict(doc) for doc in docs]


def update_event(
    store: DocumentStore,
    event_id: str,
    updates: Dict[str, Any],
) -> Optional[Event]:
    event = get_event(store, event_id)
    if event is None:
        return None
    _apply_patch(event, updates, EVENT_STATUSES)
    if event.start_date is None or event.end_date is None:
        raise ValidationError("Start date and end date are required")
    event.updated_at = utcnow()
    store.replace(EVENTS, event.id, event.to_dict())
    return event


def delete_event(store: DocumentStore, event_id: str) -> bool:
    deleted = store.delete(EVENTS, event_id)
    if deleted:
        logger.info(f"Deleted event {event_id}")
    return deleted


def add_event_comment(
    store: DocumentStore,
    event_id: str,
    content: str,
    author: str,
) -> Optional[Event]:
    event = get_event(store, event_id)
    if event is None:
        return None
    event.comments.append(_new_comment(content, author))
    event.updated_at = utcnow()
    store.replace(EVENTS, event.id, event.to_dict())
    return event
