"""Message repository: folders, paging, soft delete and send.

Folders are computed views over ``status`` and the star/important flags;
nothing about a folder is stored on the message itself.
"""
from __future__ import annotations

import logging
import math
import time
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..dates import utcnow
from ..errors import NotFoundError, ValidationError
from ..store import DocumentStore, Filter, where, where_in
from .types import MESSAGE_PRIORITIES, MESSAGE_STATUSES, Attachment, Message, MessageStatus

logger = logging.getLogger(__name__)

COLLECTION = "messages"
DEFAULT_PAGE_SIZE = 50

FOLDERS: Dict[str, Filter] = {
    "inbox": where_in("status", [MessageStatus.SENT.value, MessageStatus.DRAFT.value]),
    "sent": where("status", MessageStatus.SENT.value),
    "drafts": where("status", MessageStatus.DRAFT.value),
    "starred": where("is_starred", True),
    "important": where("is_important", True),
    "archived": where("status", MessageStatus.ARCHIVED.value),
    "trash": where("status", MessageStatus.DELETED.value),
}

_PROTECTED = {"id", "user_id", "created_at", "updated_at"}


@dataclass(slots=True)
class MessagePage:
    messages: List[Message]
    page: int
    limit: int
    total: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    def pagination(self) -> Dict[str, int]:
        return {"page": self.page, "limit": self.limit, "total": self.total, "pages": self.pages}


def folder_filters(
    user_id: str,
    folder: Optional[str] = None,
    status: Optional[str] = None,
) -> List[Filter]:
    """Build the query for a folder view.

    A folder that constrains ``status`` takes precedence over an explicit
    ``status`` argument.

    Raises:
        ValidationError: unknown folder name.
    """
    filters: Dict[str, Filter] = {"user_id": where("user_id", user_id)}
    if status:
        filters["status"] = where("status", status)
    if folder:
        folder_filter = FOLDERS.get(folder)
        if folder_filter is None:
            raise ValidationError(f"Unknown folder '{folder}'. Use one of: {', '.join(FOLDERS)}")
        filters[folder_filter.field] = folder_filter
    return list(filters.values())


def _apply_patch(message: Message, updates: Dict[str, Any]) -> None:
    for key, value in updates.items():
        if key in _PROTECTED or not hasattr(message, key):
            continue
        if key == "status" and value not in MESSAGE_STATUSES:
            raise ValidationError(f"status must be one of: {', '.join(MESSAGE_STATUSES)}")
        if key == "priority" and value not in MESSAGE_PRIORITIES:
            raise ValidationError(f"priority must be one of: {', '.join(MESSAGE_PRIORITIES)}")
        if key == "attachments":
            value = [a if isinstance(a, Attachment) else Attachment.from_dict(a) for a in value or []]
        elif key in ("to", "cc", "bcc", "labels"):
            value = [str(v).strip() for v in value or [] if str(v).strip()]
        setattr(message, key, value)
    if not message.to:
        raise ValidationError("At least one recipient is required")


def _new_thread_id() -> str:
    # Millisecond timestamp, matching the ids existing clients generate
    return str(int(time.time() * 1000))


def list_messages(
    store: DocumentStore,
    user_id: str,
    *,
    folder: Optional[str] = None,
    status: Optional[str] = None,
    limit: int = DEFAULT_PAGE_SIZE,
    page: int = 1,
) -> MessagePage:
    """One page of the user's messages, newest first."""
    if limit < 1 or page < 1:
        raise ValidationError("limit and page must be positive integers")
    filters = folder_filters(user_id, folder, status)
    docs = store.find(
        COLLECTION,
        filters,
        order_by="created_at",
        descending=True,
        offset=(page - 1) * limit,
        limit=limit,
    )
    total = store.count(COLLECTION, filters)
    return MessagePage(
        messages=[Message.from_dict(doc) for doc in docs],
        page=page,
        limit=limit,
        total=total,
    )


def create_message(store: DocumentStore, user_id: str, sender: str, fields: Dict[str, Any]) -> Message:
    """Store a new message (a draft unless ``fields`` says otherwise)."""
    now = utcnow()
    message = Message(
        id=str(uuid.uuid4()),
        user_id=user_id,
        sender=sender,
        to=[],
        created_at=now,
        updated_at=now,
    )
    _apply_patch(message, fields)
    if not message.sender:
        message.sender = sender
    if not message.thread_id:
        message.thread_id = _new_thread_id()
    store.insert(COLLECTION, message.to_dict())
    logger.info(f"Created message {message.id} ({message.status}) for user {user_id}")
    return message


def get_message(
    store: DocumentStore,
    user_id: str,
    message_id: str,
    *,
    mark_read: bool = True,
) -> Optional[Message]:
    """Fetch one message; reading it flips ``is_read`` by default."""
    data = store.get(COLLECTION, message_id)
    if not data or data.get("user_id") != user_id:
        return None
    message = Message.from_dict(data)
    if mark_read and not message.is_read:
        message.is_read = True
        store.replace(COLLECTION, message.id, message.to_dict())
    return message


def update_message(
    store: DocumentStore,
    user_id: str,
    message_id: str,
    updates: Dict[str, Any],
) -> Optional[Message]:
    message = get_message(store, user_id, message_id, mark_read=False)
    if message is None:
        return None
    _apply_patch(message, updates)
    message.updated_at = utcnow()
    store.replace(COLLECTION, message.id, message.to_dict())
    return message


def delete_message(store: DocumentStore, user_id: str, message_id: str) -> Optional[Message]:
    """Move a message to trash. The document itself is kept."""
    message = update_message(store, user_id, message_id, {"status": MessageStatus.DELETED.value})
    if message is not None:
        logger.info(f"Moved message {message_id} to trash")
    return message


def send_message(
    store: DocumentStore,
    user_id: str,
    sender: str,
    fields: Dict[str, Any],
    message_id: Optional[str] = None,
) -> Message:
    """Send a draft (``message_id`` given) or a brand new message.

    Raises:
        NotFoundError: ``message_id`` names no message of this user.
    """
    sending = dict(fields, status=MessageStatus.SENT.value, sent_at=utcnow().replace(tzinfo=None))
    if message_id:
        message = update_message(store, user_id, message_id, sending)
        if message is None:
            raise NotFoundError("Message not found")
    else:
        message = create_message(store, user_id, sender, sending)
    logger.info(f"Sent message {message.id} to {len(message.to)} recipient(s)")
    return message
