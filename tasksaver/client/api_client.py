"""Thin REST wrapper for the TaskSaver API."""
from __future__ import annotations

from datetime import date, datetime
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar

import requests

from ..items.types import Event, Task
from ..messages.types import Message

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ApiError(RuntimeError):
    """Raised for any failed API call; ``status`` is None for network errors."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


def _camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part.capitalize() for part in rest)


def to_wire(fields: Dict[str, Any]) -> Dict[str, Any]:
    """snake_case attribute names to the camelCase request body.

    Dates become ISO strings; ``sender`` becomes ``from``.
    """
    payload: Dict[str, Any] = {}
    for key, value in fields.items():
        if isinstance(value, (datetime, date)):
            value = value.isoformat()
        elif isinstance(value, dict):
            value = to_wire(value)
        payload["from" if key == "sender" else _camel(key)] = value
    return payload


def _parse_records(data: Dict[str, Any], parse: Callable[[Dict[str, Any]], T]) -> List[T]:
    """Convert the ``data`` list of an envelope; malformed records raise ApiError."""
    try:
        return [parse(item) for item in data.get("data", [])]
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        logger.warning(f"Malformed record in response: {exc!r}")
        raise ApiError(f"Unexpected response: malformed record ({exc!r})") from exc


class ApiClient:
    """Talks to ``/api`` with a bearer token once logged in.

    No retries: a failed call raises :class:`ApiError` once.
    """

    def __init__(
        self,
        base_url: str,
        *,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------
    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.request(
                method,
                url,
                params={k: v for k, v in (params or {}).items() if v is not None} or None,
                json=body,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning(f"{method} {path} failed: {exc}")
            raise ApiError(f"Unable to reach the TaskSaver server: {exc}") from exc

        try:
            data = resp.json() if resp.content else {}
        except ValueError:
            raise ApiError(f"Unexpected response (HTTP {resp.status_code})", resp.status_code) from None

        if not isinstance(data, dict):
            raise ApiError(f"Unexpected response (HTTP {resp.status_code})", resp.status_code)
        if not resp.ok or not data.get("success", True):
            message = data.get("error") or f"Request failed (HTTP {resp.status_code})"
            raise ApiError(message, resp.status_code)
        return data

    # ------------------------------------------------------------------
    # Auth and profile
    # ------------------------------------------------------------------
    def register(self, name: str, email: str, password: str) -> Dict[str, Any]:
        data = self._request(
            "POST", "/auth/register", body={"name": name, "email": email, "password": password}
        )
        return data["user"]

    def login(self, email: str, password: str) -> Dict[str, Any]:
        """Log in and keep the returned token for later calls."""
        data = self._request("POST", "/auth/login", body={"email": email, "password": password})
        self.token = data.get("token")
        return data["user"]

    def logout(self) -> None:
        self._request("POST", "/auth/logout")
        self.token = None

    def get_profile(self) -> Dict[str, Any]:
        return self._request("GET", "/profile")["user"]

    def update_profile(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", "/profile", body=to_wire(fields))["user"]

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------
    def list_tasks(self, params: Optional[Dict[str, Any]] = None) -> List[Task]:
        data = self._request("GET", "/tasks", params=params)
        return _parse_records(data, Task.from_api_dict)

    def create_task(self, fields: Dict[str, Any]) -> Task:
        data = self._request("POST", "/tasks", body=to_wire(fields))
        return Task.from_api_dict(data["data"])

    def update_task(self, task_id: str, fields: Dict[str, Any]) -> Task:
        data = self._request("PUT", f"/tasks/{task_id}", body=to_wire(fields))
        return Task.from_api_dict(data["data"])

    def delete_task(self, task_id: str) -> None:
        self._request("DELETE", f"/tasks/{task_id}")

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    def list_events(self, params: Optional[Dict[str, Any]] = None) -> List[Event]:
        data = self._request("GET", "/events", params=params)
        return _parse_records(data, Event.from_api_dict)

    def create_event(self, fields: Dict[str, Any]) -> Event:
        data = self._request("POST", "/events", body=to_wire(fields))
        return Event.from_api_dict(data["data"])

    def update_event(self, event_id: str, fields: Dict[str, Any]) -> Event:
        data = self._request("PUT", f"/events/{event_id}", body=to_wire(fields))
        return Event.from_api_dict(data["data"])

    def delete_event(self, event_id: str) -> None:
        self._request("DELETE", f"/events/{event_id}")

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------
    def list_messages(
        self,
        *,
        folder: Optional[str] = None,
        status: Optional[str] = None,
        limit: Optional[int] = None,
        page: Optional[int] = None,
    ) -> Tuple[List[Message], Dict[str, int]]:
        data = self._request(
            "GET",
            "/messages",
            params={"folder": folder, "status": status, "limit": limit, "page": page},
        )
        messages = _parse_records(data, Message.from_api_dict)
        return messages, data.get("pagination", {})

    def get_message(self, message_id: str) -> Message:
        return Message.from_api_dict(self._request("GET", f"/messages/{message_id}")["data"])

    def create_message(self, fields: Dict[str, Any]) -> Message:
        data = self._request("POST", "/messages", body=to_wire(fields))
        return Message.from_api_dict(data["data"])

    def update_message(self, message_id: str, fields: Dict[str, Any]) -> Message:
        data = self._request("PUT", f"/messages/{message_id}", body=to_wire(fields))
        return Message.from_api_dict(data["data"])

    def delete_message(self, message_id: str) -> None:
        self._request("DELETE", f"/messages/{message_id}")

    def send_message(self, fields: Dict[str, Any], message_id: Optional[str] = None) -> Message:
        body = to_wire(fields)
        if message_id:
            body["id"] = message_id
        return Message.from_api_dict(self._request("POST", "/messages/send", body=body)["data"])

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------
    def health(self) -> Dict[str, Any]:
        """Raw health report; an unhealthy server raises ApiError (503)."""
        return self._request("GET", "/health")
