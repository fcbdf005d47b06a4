"""Messages Router - inbox folders, drafts, send and trash.

Folders are computed from status and flags (see
``tasksaver.messages.FOLDERS``). Deleting moves a message to trash; it stays
retrievable by id.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status

from api.dependencies import get_current_user, get_store
from api.models import MessageCreateRequest, MessageSendRequest, MessageUpdateRequest
from tasksaver.errors import NotFoundError
from tasksaver.messages import (
    DEFAULT_PAGE_SIZE,
    create_message,
    delete_message,
    get_message,
    list_messages,
    send_message,
    update_message,
)
from tasksaver.store import DocumentStore
from tasksaver.users import User

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
def list_user_messages(
    folder: Optional[str] = Query(None, description="inbox, sent, drafts, starred, important, archived or trash"),
    status_filter: Optional[str] = Query(None, alias="status"),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=500),
    page: int = Query(1, ge=1),
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> Dict[str, Any]:
    result = list_messages(store, user.id, folder=folder, status=status_filter, limit=limit, page=page)
    return {
        "success": True,
        "data": [message.to_api_dict() for message in result.messages],
        "pagination": result.pagination(),
    }


@router.post("", status_code=status.HTTP_201_CREATED)
def create_user_message(
    request: MessageCreateRequest,
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> Dict[str, Any]:
    message = create_message(store, user.id, user.email, request.changes())
    return {"success": True, "data": message.to_api_dict()}


@router.post("/send")
def send_user_message(
    request: MessageSendRequest,
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> Dict[str, Any]:
    """Send the draft named by ``id``, or a new message built from the body."""
    fields = request.changes()
    message_id = fields.pop("id", None)
    message = send_message(store, user.id, user.email, fields, message_id)
    return {
        "success": True,
        "data": message.to_api_dict(),
        "message": "Message sent successfully",
    }


@router.get("/{message_id}")
def get_user_message(
    message_id: str,
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> Dict[str, Any]:
    """Fetch one message and mark it read."""
    message = get_message(store, user.id, message_id)
    if message is None:
        raise NotFoundError("Message not found")
    return {"success": True, "data": message.to_api_dict()}


@router.put("/{message_id}")
def update_user_message(
    message_id: str,
    request: MessageUpdateRequest,
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> Dict[str, Any]:
    message = update_message(store, user.id, message_id, request.changes())
    if message is None:
        raise NotFoundError("Message not found")
    return {"success": True, "data": message.to_api_dict()}


@router.delete("/{message_id}")
def trash_user_message(
    message_id: str,
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> Dict[str, Any]:
    if delete_message(store, user.id, message_id) is None:
        raise NotFoundError("Message not found")
    return {"success": True, "message": "Message moved to trash"}
