"""Task and event records.

Both kinds share tags, priority, recurrence, star/like flags and an
append-only comment list. Storage form is snake_case (``to_dict``); the wire
form is camelCase (``to_api_dict`` / ``from_api_dict``).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from ..dates import isoformat, parse_datetime, parse_timestamp, utcnow


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class EventStatus(str, Enum):
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class RecurrenceType(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"


PRIORITIES = [p.value for p in Priority]
TASK_STATUSES = [s.value for s in TaskStatus]
EVENT_STATUSES = [s.value for s in EventStatus]
RECURRENCE_TYPES = [r.value for r in RecurrenceType]


@dataclass(slots=True)
class Recurrence:
    """Repeat rule. Stored only; repeated instances are never materialized."""

    type: str
    interval: int = 1
    end_date: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "interval": self.interval,
            "end_date": isoformat(self.end_date),
        }

    def to_api_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "interval": self.interval,
            "endDate": isoformat(self.end_date),
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["Recurrence"]:
        if not data or not data.get("type"):
            return None
        return cls(
            type=data["type"],
            interval=int(data.get("interval") or 1),
            end_date=parse_datetime(data.get("end_date", data.get("endDate"))),
        )


@dataclass(slots=True)
class Comment:
    id: str
    content: str
    author: str
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "content": self.content,
            "author": self.author,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    def to_api_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "content": self.content,
            "author": self.author,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Comment":
        return cls(
            id=data.get("id") or "",
            content=data.get("content", ""),
            author=data.get("author", ""),
            created_at=parse_timestamp(data.get("created_at", data.get("createdAt"))) or utcnow(),
            updated_at=parse_timestamp(data.get("updated_at", data.get("updatedAt"))) or utcnow(),
        )


@dataclass(slots=True)
class Task:
    id: str
    user_id: str
    title: str
    created_at: datetime
    updated_at: datetime
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    due_time: Optional[str] = None  # "HH:MM"
    tags: List[str] = field(default_factory=list)
    priority: str = Priority.MEDIUM.value
    status: str = TaskStatus.PENDING.value
    is_recurring: bool = False
    recurrence: Optional[Recurrence] = None
    is_starred: bool = False
    is_liked: bool = False
    comments: List[Comment] = field(default_factory=list)

    kind = "task"

    @property
    def sort_date(self) -> Optional[datetime]:
        return self.due_date

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "description": self.description,
            "due_date": isoformat(self.due_date),
            "due_time": self.due_time,
            "tags": list(self.tags),
            "priority": self.priority,
            "status": self.status,
            "is_recurring": self.is_recurring,
            "recurrence": self.recurrence.to_dict() if self.recurrence else None,
            "is_starred": self.is_starred,
            "is_liked": self.is_liked,
            "comments": [c.to_dict() for c in self.comments],
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        return cls(
            id=data["id"],
            user_id=data.get("user_id", ""),
            title=data["title"],
            description=data.get("description"),
            due_date=parse_datetime(data.get("due_date")),
            due_time=data.get("due_time"),
            tags=list(data.get("tags") or []),
            priority=data.get("priority", Priority.MEDIUM.value),
            status=data.get("status", TaskStatus.PENDING.value),
            is_recurring=data.get("is_recurring", False),
            recurrence=Recurrence.from_dict(data.get("recurrence")),
            is_starred=data.get("is_starred", False),
            is_liked=data.get("is_liked", False),
            comments=[Comment.from_dict(c) for c in data.get("comments") or []],
            created_at=parse_timestamp(data.get("created_at")) or utcnow(),
            updated_at=parse_timestamp(data.get("updated_at")) or utcnow(),
        )

    def to_api_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "title": self.title,
            "description": self.description,
            "dueDate": isoformat(self.due_date),
            "dueTime": self.due_time,
            "tags": list(self.tags),
            "priority": self.priority,
            "status": self.status,
            "isRecurring": self.is_recurring,
            "recurrence": self.recurrence.to_api_dict() if self.recurrence else None,
            "isStarred": self.is_starred,
            "isLiked": self.is_liked,
            "comments": [c.to_api_dict() for c in self.comments],
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }

    @classmethod
    def from_api_dict(cls, data: Dict[str, Any]) -> "Task":
        """Build from the wire form, turning ISO strings into datetimes."""
        return cls(
            id=data["id"],
            user_id=data.get("userId", ""),
            title=data["title"],
            description=data.get("description"),
            due_date=parse_datetime(data.get("dueDate")),
            due_time=data.get("dueTime"),
            tags=list(data.get("tags") or []),
            priority=data.get("priority", Priority.MEDIUM.value),
            status=data.get("status", TaskStatus.PENDING.value),
            is_recurring=data.get("isRecurring", False),
            recurrence=Recurrence.from_dict(data.get("recurrence")),
            is_starred=data.get("isStarred", False),
            is_liked=data.get("isLiked", False),
            comments=[Comment.from_dict(c) for c in data.get("comments") or []],
            created_at=parse_timestamp(data.get("createdAt")) or utcnow(),
            updated_at=parse_timestamp(data.get("updatedAt")) or utcnow(),
        )


@dataclass(slots=True)
class Event:
    id: str
    title: str
    start_date: datetime
    end_date: datetime
    created_at: datetime
    updated_at: datetime
    user_id: Optional[str] = None
    description: Optional[str] = None
    start_time: Optional[str] = None  # "HH:MM"
    end_time: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    priority: str = Priority.MEDIUM.value
    status: str = EventStatus.UPCOMING.value
    is_recurring: bool = False
    recurrence: Optional[Recurrence] = None
    is_starred: bool = False
    is_liked: bool = False
    comments: List[Comment] = field(default_factory=list)

    kind = "event"

    @property
    def sort_date(self) -> Optional[datetime]:
        return self.start_date

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "description": self.description,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "start_time": self.start_time,
            "end_time": self.end_time,
            "tags": list(self.tags),
            "priority": self.priority,
            "status": self.status,
            "is_recurring": self.is_recurring,
            "recurrence": self.recurrence.to_dict() if self.recurrence else None,
            "is_starred": self.is_starred,
            "is_liked": self.is_liked,
            "comments": [c.to_dict() for c in self.comments],
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Event":
        return cls(
            id=data["id"],
            user_id=data.get("user_id"),
            title=data["title"],
            description=data.get("description"),
            start_date=parse_datetime(data["start_date"]),
            end_date=parse_datetime(data["end_date"]),
            start_time=data.get("start_time"),
            end_time=data.get("end_time"),
            tags=list(data.get("tags") or []),
            priority=data.get("priority", Priority.MEDIUM.value),
            status=data.get("status", EventStatus.UPCOMING.value),
            is_recurring=data.get("is_recurring", False),
            recurrence=Recurrence.from_dict(data.get("recurrence")),
            is_starred=data.get("is_starred", False),
            is_liked=data.get("is_liked", False),
            comments=[Comment.from_dict(c) for c in data.get("comments") or []],
            created_at=parse_timestamp(data.get("created_at")) or utcnow(),
            updated_at=parse_timestamp(data.get("updated_at")) or utcnow(),
        )

    def to_api_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "title": self.title,
            "description": self.description,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "startTime": self.start_time,
            "endTime": self.end_time,
            "tags": list(self.tags),
            "priority": self.priority,
            "status": self.status,
            "isRecurring": self.is_recurring,
            "recurrence": self.recurrence.to_api_dict() if self.recurrence else None,
            "isStarred": self.is_starred,
            "isLiked": self.is_liked,
            "comments": [c.to_api_dict() for c in self.comments],
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }

    @classmethod
    def from_api_dict(cls, data: Dict[str, Any]) -> "Event":
        return cls(
            id=data["id"],
            user_id=data.get("userId"),
            title=data["title"],
            description=data.get("description"),
            start_date=parse_datetime(data["startDate"]),
            end_date=parse_datetime(data["endDate"]),
            start_time=data.get("startTime"),
            end_time=data.get("endTime"),
            tags=list(data.get("tags") or []),
            priority=data.get("priority", Priority.MEDIUM.value),
            status=data.get("status", EventStatus.UPCOMING.value),
            is_recurring=data.get("isRecurring", False),
            recurrence=Recurrence.from_dict(data.get("recurrence")),
            is_starred=data.get("isStarred", False),
            is_liked=data.get("isLiked", False),
            comments=[Comment.from_dict(c) for c in data.get("comments") or []],
            created_at=parse_timestamp(data.get("createdAt")) or utcnow(),
            updated_at=parse_timestamp(data.get("updatedAt")) or utcnow(),
        )
