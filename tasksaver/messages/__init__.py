"""Messages package - inbox records and folder queries."""
from __future__ import annotations

from .store import (
    DEFAULT_PAGE_SIZE,
    FOLDERS,
    MessagePage,
    create_message,
    delete_message,
    folder_filters,
    get_message,
    list_messages,
    send_message,
    update_message,
)
from .types import (
    MESSAGE_PRIORITIES,
    MESSAGE_STATUSES,
    Attachment,
    Message,
    MessagePriority,
    MessageStatus,
)

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "FOLDERS",
    "MESSAGE_PRIORITIES",
    "MESSAGE_STATUSES",
    "Attachment",
    "Message",
    "MessagePage",
    "MessagePriority",
    "MessageStatus",
    "create_message",
    "delete_message",
    "folder_filters",
    "get_message",
    "list_messages",
    "send_message",
    "update_message",
]
