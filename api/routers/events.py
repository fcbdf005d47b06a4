"""Events Router - event CRUD and the combined item endpoint.

Events are shared: listing returns every event and the id routes are open
to anyone. A valid token, when present, only stamps ``userId`` on new
events.

``items_router`` (mounted at ``/items``) accepts either a task or an event
in one body, told apart by its ``kind`` field.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, status

from api.dependencies import ItemQuery, get_item_query, get_optional_user, get_store
from api.models import CommentRequest, EventCreateRequest, EventUpdateRequest, ItemCreateRequest
from tasksaver.errors import AuthenticationError, NotFoundError
from tasksaver.filtering import filter_events
from tasksaver.items import (
    add_event_comment,
    create_event,
    create_task,
    delete_event,
    get_event,
    list_events,
    update_event,
)
from tasksaver.store import DocumentStore
from tasksaver.users import User

logger = logging.getLogger(__name__)

router = APIRouter()

items_router = APIRouter()

ANONYMOUS_AUTHOR = "Anonymous"


@router.get("")
def list_all_events(
    query: ItemQuery = Depends(get_item_query),
    store: DocumentStore = Depends(get_store),
) -> Dict[str, Any]:
    events = query.apply(list_events(store), filter_events)
    return {"success": True, "data": [event.to_api_dict() for event in events]}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_shared_event(
    request: EventCreateRequest,
    user: Optional[User] = Depends(get_optional_user),
    store: DocumentStore = Depends(get_store),
) -> Dict[str, Any]:
    event = create_event(store, request.changes() | _required(request), user_id=user.id if user else None)
    return {"success": True, "data": event.to_api_dict()}


@router.get("/{event_id}")
def get_shared_event(event_id: str, store: DocumentStore = Depends(get_store)) -> Dict[str, Any]:
    event = get_event(store, event_id)
    if event is None:
        raise NotFoundError("Event not found")
    return {"success": True, "data": event.to_api_dict()}


@router.put("/{event_id}")
def update_shared_event(
    event_id: str,
    request: EventUpdateRequest,
    store: DocumentStore = Depends(get_store),
) -> Dict[str, Any]:
    event = update_event(store, event_id, request.changes())
    if event is None:
        raise NotFoundError("Event not found")
    return {"success": True, "data": event.to_api_dict()}


@router.delete("/{event_id}")
def delete_shared_event(event_id: str, store: DocumentStore = Depends(get_store)) -> Dict[str, Any]:
    if not delete_event(store, event_id):
        raise NotFoundError("Event not found")
    return {"success": True, "message": "Event deleted successfully"}


@router.post("/{event_id}/comments", status_code=status.HTTP_201_CREATED)
def comment_on_event(
    event_id: str,
    request: CommentRequest,
    user: Optional[User] = Depends(get_optional_user),
    store: DocumentStore = Depends(get_store),
) -> Dict[str, Any]:
    author = user.name if user else ANONYMOUS_AUTHOR
    event = add_event_comment(store, event_id, request.content, author)
    if event is None:
        raise NotFoundError("Event not found")
    return {"success": True, "data": event.to_api_dict()}


def _required(request: EventCreateRequest) -> Dict[str, Any]:
    return {"title": request.title, "start_date": request.start_date, "end_date": request.end_date}


# =============================================================================
# Combined Item Endpoint
# =============================================================================

@items_router.post("", status_code=status.HTTP_201_CREATED)
def create_item(
    request: ItemCreateRequest = Body(...),
    user: Optional[User] = Depends(get_optional_user),
    store: DocumentStore = Depends(get_store),
) -> Dict[str, Any]:
    """Create a task or an event; tasks need a signed-in user."""
    if isinstance(request, EventCreateRequest):
        event = create_event(store, request.changes() | _required(request), user_id=user.id if user else None)
        return {"success": True, "kind": "event", "data": event.to_api_dict()}

    if user is None:
        raise AuthenticationError("Unauthorized")
    task = create_task(store, user.id, request.changes() | {"title": request.title})
    return {"success": True, "kind": "task", "data": task.to_api_dict()}
