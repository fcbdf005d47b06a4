"""Request models shared by the API routers.

Bodies arrive in camelCase; every model also accepts the snake_case field
names. ``model_dump()`` yields snake_case keys that match the domain record
attributes, so routers hand the dump straight to the repositories.

Usage in routers:
    from api.models import TaskCreateRequest, TaskUpdateRequest
"""
from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

Priority = Literal["low", "medium", "high"]
TaskStatus = Literal["pending", "in-progress", "completed"]
EventStatus = Literal["upcoming", "ongoing", "completed", "cancelled"]
MessagePriority = Literal["low", "normal", "high"]
MessageStatus = Literal["draft", "sent", "archived", "deleted"]

TIME_PATTERN = r"^\d{1,2}:\d{2}$"


class ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def changes(self) -> Dict[str, Any]:
        """Only the fields the caller actually sent."""
        return self.model_dump(exclude_unset=True, exclude={"kind"})


# =============================================================================
# Auth and Profile Models
# =============================================================================

class RegisterRequest(ApiModel):
    """Fields are optional here so a missing one gets the domain's message."""
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(ApiModel):
    email: Optional[str] = None
    password: Optional[str] = None


class PreferencesModel(ApiModel):
    theme: Optional[Literal["light", "dark"]] = None
    notifications: Optional[bool] = None
    email_notifications: Optional[bool] = Field(None, alias="emailNotifications")
    language: Optional[str] = None
    timezone: Optional[str] = None


class ProfileUpdateRequest(ApiModel):
    name: Optional[str] = None
    bio: Optional[str] = None
    avatar: Optional[str] = None
    preferences: Optional[PreferencesModel] = None
    current_password: Optional[str] = Field(None, alias="currentPassword")
    new_password: Optional[str] = Field(None, alias="newPassword")


# =============================================================================
# Task and Event Models
# =============================================================================

class RecurrenceModel(ApiModel):
    type: Literal["daily", "weekly", "monthly", "custom"]
    interval: int = Field(1, ge=1)
    end_date: Optional[str] = Field(None, alias="endDate")


class CommentRequest(ApiModel):
    content: str


class _ItemFields(ApiModel):
    description: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    priority: Priority = "medium"
    is_recurring: bool = Field(False, alias="isRecurring")
    recurrence: Optional[RecurrenceModel] = None
    is_starred: bool = Field(False, alias="isStarred")
    is_liked: bool = Field(False, alias="isLiked")


class TaskCreateRequest(_ItemFields):
    """Request body for creating a task."""
    kind: Literal["task"] = "task"
    title: str
    due_date: Optional[str] = Field(None, alias="dueDate")
    due_time: Optional[str] = Field(None, alias="dueTime", pattern=TIME_PATTERN)
    status: TaskStatus = "pending"


class EventCreateRequest(_ItemFields):
    """Request body for creating an event."""
    kind: Literal["event"] = "event"
    title: str
    start_date: str = Field(..., alias="startDate")
    end_date: str = Field(..., alias="endDate")
    start_time: Optional[str] = Field(None, alias="startTime", pattern=TIME_PATTERN)
    end_time: Optional[str] = Field(None, alias="endTime", pattern=TIME_PATTERN)
    status: EventStatus = "upcoming"


ItemCreateRequest = Annotated[
    Union[TaskCreateRequest, EventCreateRequest],
    Field(discriminator="kind"),
]


class _ItemPatch(ApiModel):
    title: Optional[str] = None
    description: Optional[str] = None
    tags: Optional[List[str]] = None
    priority: Optional[Priority] = None
    is_recurring: Optional[bool] = Field(None, alias="isRecurring")
    recurrence: Optional[RecurrenceModel] = None
    is_starred: Optional[bool] = Field(None, alias="isStarred")
    is_liked: Optional[bool] = Field(None, alias="isLiked")


class TaskUpdateRequest(_ItemPatch):
    due_date: Optional[str] = Field(None, alias="dueDate")
    due_time: Optional[str] = Field(None, alias="dueTime", pattern=TIME_PATTERN)
    status: Optional[TaskStatus] = None


class EventUpdateRequest(_ItemPatch):
    start_date: Optional[str] = Field(None, alias="startDate")
    end_date: Optional[str] = Field(None, alias="endDate")
    start_time: Optional[str] = Field(None, alias="startTime", pattern=TIME_PATTERN)
    end_time: Optional[str] = Field(None, alias="endTime", pattern=TIME_PATTERN)
    status: Optional[EventStatus] = None


# =============================================================================
# Message Models
# =============================================================================

class AttachmentModel(ApiModel):
    filename: str
    size: int = 0
    type: str = ""
    url: Optional[str] = None


class MessageCreateRequest(ApiModel):
    sender: Optional[str] = Field(None, alias="from")
    to: List[str] = Field(default_factory=list)
    cc: List[str] = Field(default_factory=list)
    bcc: List[str] = Field(default_factory=list)
    subject: str = ""
    body: str = ""
    is_html: bool = Field(False, alias="isHtml")
    priority: MessagePriority = "normal"
    status: MessageStatus = "draft"
    is_starred: bool = Field(False, alias="isStarred")
    is_important: bool = Field(False, alias="isImportant")
    labels: List[str] = Field(default_factory=list)
    attachments: List[AttachmentModel] = Field(default_factory=list)
    related_task_id: Optional[str] = Field(None, alias="relatedTaskId")
    related_event_id: Optional[str] = Field(None, alias="relatedEventId")
    thread_id: Optional[str] = Field(None, alias="threadId")


class MessageUpdateRequest(ApiModel):
    to: Optional[List[str]] = None
    cc: Optional[List[str]] = None
    bcc: Optional[List[str]] = None
    subject: Optional[str] = None
    body: Optional[str] = None
    is_html: Optional[bool] = Field(None, alias="isHtml")
    priority: Optional[MessagePriority] = None
    status: Optional[MessageStatus] = None
    is_read: Optional[bool] = Field(None, alias="isRead")
    is_starred: Optional[bool] = Field(None, alias="isStarred")
    is_important: Optional[bool] = Field(None, alias="isImportant")
    labels: Optional[List[str]] = None
    attachments: Optional[List[AttachmentModel]] = None
    related_task_id: Optional[str] = Field(None, alias="relatedTaskId")
    related_event_id: Optional[str] = Field(None, alias="relatedEventId")


class MessageSendRequest(MessageUpdateRequest):
    """Send a stored draft (``id`` given) or a new message."""
    id: Optional[str] = None
    sender: Optional[str] = Field(None, alias="from")
    thread_id: Optional[str] = Field(None, alias="threadId")
