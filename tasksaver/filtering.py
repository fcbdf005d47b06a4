"""Filter and sort tasks and events in memory.

All functions return new lists and leave their inputs untouched. Filters
combine with AND across kinds (status, priority, tags, date range, search)
and with OR inside a kind.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, List, Optional, Sequence, TypeVar, Union

from .dates import end_of_day, start_of_day
from .items.types import Event, Task

Item = Union[Task, Event]
T = TypeVar("T", bound=Item)

PRIORITY_RANK = {"high": 3, "medium": 2, "low": 1}
TAG_PATTERN = re.compile(r"#(\w+)")


@dataclass(slots=True)
class DateRange:
    """Inclusive day range; both ends are widened to whole days."""

    start: Union[date, datetime]
    end: Union[date, datetime]

    @property
    def window(self) -> tuple[datetime, datetime]:
        return start_of_day(self.start), end_of_day(self.end)


@dataclass(slots=True)
class FilterOptions:
    status: List[str] = field(default_factory=list)
    priority: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    date_range: Optional[DateRange] = None
    search: Optional[str] = None

    def is_empty(self) -> bool:
        return not (self.status or self.priority or self.tags or self.date_range or self.search)


# =============================================================================
# Predicates
# =============================================================================

def _matches_common(item: Item, options: FilterOptions) -> bool:
    if options.status and item.status not in options.status:
        return False
    if options.priority and item.priority not in options.priority:
        return False
    if options.tags and not any(tag in item.tags for tag in options.tags):
        return False
    if options.search:
        term = options.search.lower()
        haystack = [item.title.lower(), (item.description or "").lower()]
        haystack.extend(tag.lower() for tag in item.tags)
        if not any(term in text for text in haystack):
            return False
    return True


def _task_in_range(task: Task, date_range: DateRange) -> bool:
    if task.due_date is None:
        return False
    start, end = date_range.window
    return start <= start_of_day(task.due_date) <= end


def _event_in_range(event: Event, date_range: DateRange) -> bool:
    start, end = date_range.window
    return not (end_of_day(event.end_date) < start or start_of_day(event.start_date) > end)


def filter_tasks(tasks: Iterable[Task], options: FilterOptions) -> List[Task]:
    """Tasks matching every supplied filter.

    A task without a due date never matches a date-range filter.
    """
    return [
        task
        for task in tasks
        if _matches_common(task, options)
        and (options.date_range is None or _task_in_range(task, options.date_range))
    ]


def filter_events(events: Iterable[Event], options: FilterOptions) -> List[Event]:
    """Events matching every supplied filter; date ranges match on overlap."""
    return [
        event
        for event in events
        if _matches_common(event, options)
        and (options.date_range is None or _event_in_range(event, options.date_range))
    ]


# =============================================================================
# Sorting
# =============================================================================

def sort_by_date(items: Sequence[T]) -> List[T]:
    """Oldest first by due date (tasks) or start date (events); undated last."""
    dated = [item for item in items if item.sort_date is not None]
    undated = [item for item in items if item.sort_date is None]
    return sorted(dated, key=lambda item: item.sort_date) + undated


def sort_by_priority(items: Sequence[T]) -> List[T]:
    """High before medium before low; ties keep their input order."""
    return sorted(items, key=lambda item: -PRIORITY_RANK.get(item.priority, 0))


def sort_by_created(items: Sequence[T]) -> List[T]:
    """Newest first."""
    return sorted(items, key=lambda item: item.created_at, reverse=True)


SORTERS = {
    "date": sort_by_date,
    "priority": sort_by_priority,
    "created": sort_by_created,
}


def extract_tags(text: str) -> List[str]:
    """Hashtags in ``text`` without the leading ``#``."""
    return TAG_PATTERN.findall(text or "")
