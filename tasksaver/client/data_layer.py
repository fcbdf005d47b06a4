"""Data sources used by the CLI views.

Two strategies share one interface: :class:`RemoteDataSource` talks to the
API and keeps a :class:`LocalCache` copy for offline reads, while
:class:`LocalDataSource` keeps everything on this machine. The strategy is
picked once per process by :func:`build_data_source`.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any, Dict, List, Optional

from ..config import Settings
from ..errors import NotFoundError
from ..items import store as items
from ..items.types import Event, Task
from ..messages import store as messages
from ..messages.store import DEFAULT_PAGE_SIZE, MessagePage
from ..messages.types import Message
from ..store import DocumentStore, FileStore
from .api_client import ApiClient, ApiError
from .local_cache import LocalCache

logger = logging.getLogger(__name__)

LOCAL_USER_ID = "local"
LOCAL_SENDER = "me@localhost"


@dataclass(slots=True)
class LoadResult:
    tasks: List[Task] = field(default_factory=list)
    events: List[Event] = field(default_factory=list)
    from_cache: bool = False
    warning: Optional[str] = None


class DataSource:
    """Operations the views need, independent of where data lives."""

    mode = "abstract"

    def load_all(self) -> LoadResult:
        raise NotImplementedError

    def create_task(self, fields: Dict[str, Any]) -> Task:
        raise NotImplementedError

    def update_task(self, task_id: str, updates: Dict[str, Any]) -> Task:
        raise NotImplementedError

    def delete_task(self, task_id: str) -> None:
        raise NotImplementedError

    def create_event(self, fields: Dict[str, Any]) -> Event:
        raise NotImplementedError

    def update_event(self, event_id: str, updates: Dict[str, Any]) -> Event:
        raise NotImplementedError

    def delete_event(self, event_id: str) -> None:
        raise NotImplementedError

    def list_messages(
        self,
        *,
        folder: Optional[str] = None,
        status: Optional[str] = None,
        limit: int = DEFAULT_PAGE_SIZE,
        page: int = 1,
    ) -> MessagePage:
        raise NotImplementedError

    def get_message(self, message_id: str) -> Message:
        raise NotImplementedError

    def save_draft(self, fields: Dict[str, Any]) -> Message:
        raise NotImplementedError

    def send_message(self, fields: Dict[str, Any], message_id: Optional[str] = None) -> Message:
        raise NotImplementedError

    def delete_message(self, message_id: str) -> None:
        raise NotImplementedError


# =============================================================================
# API-backed
# =============================================================================

class RemoteDataSource(DataSource):
    """API first; reads fall back to the local copy when allowed.

    With ``fallback_policy="cache"`` a failed :meth:`load_all` returns the
    last cached collections (or empty ones) and records a warning. With
    ``"raise"`` the :class:`ApiError` propagates. A 401 always propagates,
    and mutations never fall back.
    """

    mode = "api"

    def __init__(self, api: ApiClient, cache: LocalCache, fallback_policy: str = "cache") -> None:
        self.api = api
        self.cache = cache
        self.fallback_policy = fallback_policy
        self.last_load_from_cache = False

    def load_all(self) -> LoadResult:
        try:
            tasks = self.api.list_tasks()
            events = self.api.list_events()
        except ApiError as exc:
            # 401 means the session was rejected, not that the server is down
            if self.fallback_policy == "raise" or exc.status == 401:
                raise
            self.last_load_from_cache = True
            warning = f"Could not reach the server ({exc.message}); showing saved data."
            logger.warning(warning)
            return LoadResult(
                tasks=[Task.from_api_dict(t) for t in self.cache.load("tasks")],
                events=[Event.from_api_dict(e) for e in self.cache.load("events")],
                from_cache=True,
                warning=warning,
            )

        self.last_load_from_cache = False
        self.cache.save("tasks", [t.to_api_dict() for t in tasks])
        self.cache.save("events", [e.to_api_dict() for e in events])
        return LoadResult(tasks=tasks, events=events)

    def create_task(self, fields: Dict[str, Any]) -> Task:
        task = self.api.create_task(fields)
        self.cache.upsert("tasks", task.to_api_dict())
        return task

    def update_task(self, task_id: str, updates: Dict[str, Any]) -> Task:
        task = self.api.update_task(task_id, updates)
        self.cache.upsert("tasks", task.to_api_dict())
        return task

    def delete_task(self, task_id: str) -> None:
        self.api.delete_task(task_id)
        self.cache.remove("tasks", task_id)

    def create_event(self, fields: Dict[str, Any]) -> Event:
        event = self.api.create_event(fields)
        self.cache.upsert("events", event.to_api_dict())
        return event

    def update_event(self, event_id: str, updates: Dict[str, Any]) -> Event:
        event = self.api.update_event(event_id, updates)
        self.cache.upsert("events", event.to_api_dict())
        return event

    def delete_event(self, event_id: str) -> None:
        self.api.delete_event(event_id)
        self.cache.remove("events", event_id)

    def list_messages(
        self,
        *,
        folder: Optional[str] = None,
        status: Optional[str] = None,
        limit: int = DEFAULT_PAGE_SIZE,
        page: int = 1,
    ) -> MessagePage:
        found, pagination = self.api.list_messages(folder=folder, status=status, limit=limit, page=page)
        return MessagePage(
            messages=found,
            page=pagination.get("page", page),
            limit=pagination.get("limit", limit),
            total=pagination.get("total", len(found)),
        )

    def get_message(self, message_id: str) -> Message:
        return self.api.get_message(message_id)

    def save_draft(self, fields: Dict[str, Any]) -> Message:
        message = self.api.create_message(dict(fields, status="draft"))
        self.cache.upsert("messages", message.to_api_dict())
        return message

    def send_message(self, fields: Dict[str, Any], message_id: Optional[str] = None) -> Message:
        message = self.api.send_message(fields, message_id)
        self.cache.upsert("messages", message.to_api_dict())
        return message

    def delete_message(self, message_id: str) -> None:
        self.api.delete_message(message_id)
        self.cache.remove("messages", message_id)


# =============================================================================
# Local-only
# =============================================================================

class LocalDataSource(DataSource):
    """Everything kept in a document store on this machine."""

    mode = "local"

    def __init__(self, store: DocumentStore, user_id: str = LOCAL_USER_ID) -> None:
        self.store = store
        self.user_id = user_id

    def load_all(self) -> LoadResult:
        return LoadResult(
            tasks=items.list_tasks(self.store, self.user_id),
            events=items.list_events(self.store),
        )

    def create_task(self, fields: Dict[str, Any]) -> Task:
        return items.create_task(self.store, self.user_id, fields)

    def update_task(self, task_id: str, updates: Dict[str, Any]) -> Task:
        task = items.update_task(self.store, self.user_id, task_id, updates)
        if task is None:
            raise NotFoundError("Task not found")
        return task

    def delete_task(self, task_id: str) -> None:
        if not items.delete_task(self.store, self.user_id, task_id):
            raise NotFoundError("Task not found")

    def create_event(self, fields: Dict[str, Any]) -> Event:
        return items.create_event(self.store, fields, user_id=self.user_id)

    def update_event(self, event_id: str, updates: Dict[str, Any]) -> Event:
        event = items.update_event(self.store, event_id, updates)
        if event is None:
            raise NotFoundError("Event not found")
        return event

    def delete_event(self, event_id: str) -> None:
        if not items.delete_event(self.store, event_id):
            raise NotFoundError("Event not found")

    def list_messages(
        self,
        *,
        folder: Optional[str] = None,
        status: Optional[str] = None,
        limit: int = DEFAULT_PAGE_SIZE,
        page: int = 1,
    ) -> MessagePage:
        return messages.list_messages(
            self.store, self.user_id, folder=folder, status=status, limit=limit, page=page
        )

    def get_message(self, message_id: str) -> Message:
        message = messages.get_message(self.store, self.user_id, message_id)
        if message is None:
            raise NotFoundError("Message not found")
        return message

    def save_draft(self, fields: Dict[str, Any]) -> Message:
        return messages.create_message(self.store, self.user_id, LOCAL_SENDER, dict(fields, status="draft"))

    def send_message(self, fields: Dict[str, Any], message_id: Optional[str] = None) -> Message:
        return messages.send_message(self.store, self.user_id, LOCAL_SENDER, fields, message_id)

    def delete_message(self, message_id: str) -> None:
        if messages.delete_message(self.store, self.user_id, message_id) is None:
            raise NotFoundError("Message not found")


def build_data_source(settings: Settings, token: Optional[str] = None) -> DataSource:
    """Pick the strategy named by ``settings.data_mode``.

    In API mode the saved session token is used unless ``token`` is given.
    """
    cache = LocalCache(settings.cache_dir)
    if settings.data_mode == "api":
        if token is None:
            session = cache.load_session() or {}
            token = session.get("token")
        api = ApiClient(settings.api_base_url, token=token, timeout=settings.request_timeout)
        return RemoteDataSource(api, cache, settings.fallback_policy)
    return LocalDataSource(FileStore(settings.cache_dir / "local"))
