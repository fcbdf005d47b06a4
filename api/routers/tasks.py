"""Tasks Router - task CRUD for the signed-in user.

Every route is owner-scoped: a task id that belongs to someone else is
reported exactly like an unknown id (404).
"""
from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from api.dependencies import ItemQuery, get_current_user, get_item_query, get_store
from api.models import CommentRequest, TaskCreateRequest, TaskUpdateRequest
from tasksaver.errors import NotFoundError
from tasksaver.filtering import filter_tasks
from tasksaver.items import (
    add_task_comment,
    create_task,
    delete_task,
    get_task,
    list_tasks,
    update_task,
)
from tasksaver.store import DocumentStore
from tasksaver.users import User

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
def list_user_tasks(
    query: ItemQuery = Depends(get_item_query),
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> Dict[str, Any]:
    """The caller's tasks, newest first unless ``sort`` says otherwise."""
    tasks = query.apply(list_tasks(store, user.id), filter_tasks)
    return {"success": True, "data": [task.to_api_dict() for task in tasks]}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_user_task(
    request: TaskCreateRequest,
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> Dict[str, Any]:
    task = create_task(store, user.id, request.changes() | {"title": request.title})
    return {"success": True, "data": task.to_api_dict()}


@router.get("/{task_id}")
def get_user_task(
    task_id: str,
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> Dict[str, Any]:
    task = get_task(store, user.id, task_id)
    if task is None:
        raise NotFoundError("Task not found")
    return {"success": True, "data": task.to_api_dict()}


@router.put("/{task_id}")
def update_user_task(
    task_id: str,
    request: TaskUpdateRequest,
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> Dict[str, Any]:
    task = update_task(store, user.id, task_id, request.changes())
    if task is None:
        raise NotFoundError("Task not found")
    return {"success": True, "data": task.to_api_dict()}


@router.delete("/{task_id}")
def delete_user_task(
    task_id: str,
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> Dict[str, Any]:
    if not delete_task(store, user.id, task_id):
        raise NotFoundError("Task not found")
    return {"success": True, "message": "Task deleted successfully"}


@router.post("/{task_id}/comments", status_code=status.HTTP_201_CREATED)
def comment_on_task(
    task_id: str,
    request: CommentRequest,
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> Dict[str, Any]:
    task = add_task_comment(store, user.id, task_id, request.content, user.name)
    if task is None:
        raise NotFoundError("Task not found")
    return {"success": True, "data": task.to_api_dict()}
