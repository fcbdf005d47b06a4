"""Message records for the inbox."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from ..dates import isoformat, parse_datetime, parse_timestamp, utcnow


class MessageStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    ARCHIVED = "archived"
    DELETED = "deleted"


class MessagePriority(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


MESSAGE_STATUSES = [s.value for s in MessageStatus]
MESSAGE_PRIORITIES = [p.value for p in MessagePriority]


@dataclass(slots=True)
class Attachment:
    """Attachment metadata only; file content lives elsewhere."""

    filename: str
    size: int = 0
    type: str = ""
    url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"filename": self.filename, "size": self.size, "type": self.type, "url": self.url}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Attachment":
        return cls(
            filename=data.get("filename", ""),
            size=int(data.get("size") or 0),
            type=data.get("type", ""),
            url=data.get("url"),
        )


@dataclass(slots=True)
class Message:
    id: str
    user_id: str
    sender: str
    to: List[str]
    created_at: datetime
    updated_at: datetime
    cc: List[str] = field(default_factory=list)
    bcc: List[str] = field(default_factory=list)
    subject: str = ""
    body: str = ""
    is_html: bool = False
    priority: str = MessagePriority.NORMAL.value
    status: str = MessageStatus.DRAFT.value
    is_read: bool = False
    is_starred: bool = False
    is_important: bool = False
    labels: List[str] = field(default_factory=list)
    attachments: List[Attachment] = field(default_factory=list)
    related_task_id: Optional[str] = None
    related_event_id: Optional[str] = None
    thread_id: Optional[str] = None
    sent_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "sender": self.sender,
            "to": list(self.to),
            "cc": list(self.cc),
            "bcc": list(self.bcc),
            "subject": self.subject,
            "body": self.body,
            "is_html": self.is_html,
            "priority": self.priority,
            "status": self.status,
            "is_read": self.is_read,
            "is_starred": self.is_starred,
            "is_important": self.is_important,
            "labels": list(self.labels),
            "attachments": [a.to_dict() for a in self.attachments],
            "related_task_id": self.related_task_id,
            "related_event_id": self.related_event_id,
            "thread_id": self.thread_id,
            "sent_at": isoformat(self.sent_at),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Message":
        return cls(
            id=data["id"],
            user_id=data.get("user_id", ""),
            sender=data.get("sender", ""),
            to=list(data.get("to") or []),
            cc=list(data.get("cc") or []),
            bcc=list(data.get("bcc") or []),
            subject=data.get("subject") or "",
            body=data.get("body") or "",
            is_html=data.get("is_html", False),
            priority=data.get("priority", MessagePriority.NORMAL.value),
            status=data.get("status", MessageStatus.DRAFT.value),
            is_read=data.get("is_read", False),
            is_starred=data.get("is_starred", False),
            is_important=data.get("is_important", False),
            labels=list(data.get("labels") or []),
            attachments=[Attachment.from_dict(a) for a in data.get("attachments") or []],
            related_task_id=data.get("related_task_id"),
            related_event_id=data.get("related_event_id"),
            thread_id=data.get("thread_id"),
            sent_at=parse_datetime(data.get("sent_at")),
            created_at=parse_timestamp(data.get("created_at")) or utcnow(),
            updated_at=parse_timestamp(data.get("updated_at")) or utcnow(),
        )

    def to_api_dict(self) -> Dict[str, Any]:
        """Wire form; the sender travels as ``from``."""
        return {
            "id": self.id,
            "userId": self.user_id,
            "from": self.sender,
            "to": list(self.to),
            "cc": list(self.cc),
            "bcc": list(self.bcc),
            "subject": self.subject,
            "body": self.body,
            "isHtml": self.is_html,
            "priority": self.priority,
            "status": self.status,
            "isRead": self.is_read,
            "isStarred": self.is_starred,
            "isImportant": self.is_important,
            "labels": list(self.labels),
            "attachments": [a.to_dict() for a in self.attachments],
            "relatedTaskId": self.related_task_id,
            "relatedEventId": self.related_event_id,
            "threadId": self.thread_id,
            "sentAt": isoformat(self.sent_at),
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }

    @classmethod
    def from_api_dict(cls, data: Dict[str, Any]) -> "Message":
        return cls(
            id=data["id"],
            user_id=data.get("userId", ""),
            sender=data.get("from", ""),
            to=list(data.get("to") or []),
            cc=list(data.get("cc") or []),
            bcc=list(data.get("bcc") or []),
            subject=data.get("subject") or "",
            body=data.get("body") or "",
            is_html=data.get("isHtml", False),
            priority=data.get("priority", MessagePriority.NORMAL.value),
            status=data.get("status", MessageStatus.DRAFT.value),
            is_read=data.get("isRead", False),
            is_starred=data.get("isStarred", False),
            is_important=data.get("isImportant", False),
            labels=list(data.get("labels") or []),
            attachments=[Attachment.from_dict(a) for a in data.get("attachments") or []],
            related_task_id=data.get("relatedTaskId"),
            related_event_id=data.get("relatedEventId"),
            thread_id=data.get("threadId"),
            sent_at=parse_datetime(data.get("sentAt")),
            created_at=parse_timestamp(data.get("createdAt")) or utcnow(),
            updated_at=parse_timestamp(data.get("updatedAt")) or utcnow(),
        )
