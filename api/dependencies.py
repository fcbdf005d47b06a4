"""Shared dependencies for API routers.

Usage in routers:
    from api.dependencies import get_current_user, get_settings, get_store
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import logging
from typing import Callable, List, Literal, Optional, TypeVar

from fastapi import Depends, Header, Query, Request

from tasksaver.auth import AUTH_COOKIE, decode_token
from tasksaver.config import Settings, load_settings
from tasksaver.dates import parse_datetime
from tasksaver.errors import AuthenticationError, StoreUnavailableError, ValidationError
from tasksaver.filtering import SORTERS, DateRange, FilterOptions
from tasksaver.store import DocumentStore
from tasksaver.users import User, get_user

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# Cached Functions
# =============================================================================

@lru_cache
def get_settings() -> Settings:
    """Get application settings (cached)."""
    return load_settings()


def get_store(request: Request) -> DocumentStore:
    """The document store opened by the app lifespan."""
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise StoreUnavailableError("Database connection failed. Please try again later.")
    return store


# =============================================================================
# Authentication
# =============================================================================

def _extract_token(request: Request, authorization: Optional[str]) -> Optional[str]:
    """Bearer header first (CLI and scripts), then the browser cookie."""
    if authorization and authorization.startswith("Bearer "):
        return authorization.split(" ", 1)[1].strip() or None
    return request.cookies.get(AUTH_COOKIE)


def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
    settings: Settings = Depends(get_settings),
    store: DocumentStore = Depends(get_store),
) -> User:
    """Return the authenticated user.

    Missing, expired and forged tokens all produce the same 401, as does a
    token for an account that no longer exists.
    """
    token = _extract_token(request, authorization)
    if not token:
        raise AuthenticationError("Unauthorized")
    claims = decode_token(token, settings.jwt_secret)
    user = get_user(store, claims["userId"])
    if user is None:
        logger.info(f"Token for unknown user {claims['userId']}")
        raise AuthenticationError("Unauthorized")
    return user


def get_optional_user(
    request: Request,
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
    settings: Settings = Depends(get_settings),
    store: DocumentStore = Depends(get_store),
) -> Optional[User]:
    """Like :func:`get_current_user` but anonymous callers get None."""
    try:
        return get_current_user(request, authorization, settings, store)
    except AuthenticationError:
        return None


# =============================================================================
# List Query Parameters
# =============================================================================

@dataclass(slots=True)
class ItemQuery:
    """Filters and sort order parsed from ``/tasks`` and ``/events`` queries."""

    options: FilterOptions
    sort: Optional[str] = None

    def apply(self, items: List[T], filter_fn: Callable[[List[T], FilterOptions], List[T]]) -> List[T]:
        if not self.options.is_empty():
            items = filter_fn(items, self.options)
        if self.sort:
            items = SORTERS[self.sort](items)
        return items


def get_item_query(
    status: Optional[List[str]] = Query(None),
    priority: Optional[List[str]] = Query(None),
    tag: Optional[List[str]] = Query(None),
    start: Optional[str] = Query(None, description="Range start (YYYY-MM-DD)"),
    end: Optional[str] = Query(None, description="Range end (YYYY-MM-DD)"),
    search: Optional[str] = Query(None),
    sort: Optional[Literal["created", "date", "priority"]] = Query(None),
) -> ItemQuery:
    date_range = None
    if start or end:
        if not (start and end):
            raise ValidationError("start and end must be given together")
        try:
            date_range = DateRange(parse_datetime(start), parse_datetime(end))
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc

    return ItemQuery(
        options=FilterOptions(
            status=status or [],
            priority=priority or [],
            tags=tag or [],
            date_range=date_range,
            search=search or None,
        ),
        sort=sort,
    )
