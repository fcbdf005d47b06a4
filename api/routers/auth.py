"""Auth Router - registration, login and logout.

The session token is returned in the body and also set as an HTTP-only
cookie; browsers use the cookie, the CLI sends it back as a Bearer header.
"""
from __future__ import annotations

from datetime import timedelta
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Response, status

from api.dependencies import get_settings, get_store
from api.models import LoginRequest, RegisterRequest
from tasksaver.auth import AUTH_COOKIE, issue_token
from tasksaver.config import Settings
from tasksaver.store import DocumentStore
from tasksaver.users import authenticate, create_user

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    request: RegisterRequest,
    store: DocumentStore = Depends(get_store),
) -> Dict[str, Any]:
    """Create an account. Registration does not log the user in."""
    user = create_user(store, request.name or "", request.email or "", request.password or "")
    return {
        "success": True,
        "message": "User registered successfully",
        "user": user.to_api_dict(),
    }


@router.post("/login")
def login(
    request: LoginRequest,
    response: Response,
    store: DocumentStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    """Check credentials, issue a token and set the auth cookie."""
    user = authenticate(store, request.email or "", request.password or "")
    token = issue_token(
        user.id,
        user.email,
        user.name,
        settings.jwt_secret,
        timedelta(days=settings.token_ttl_days),
    )
    response.set_cookie(
        AUTH_COOKIE,
        token,
        max_age=settings.token_ttl_seconds,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    logger.info(f"User {user.id} logged in")
    return {
        "success": True,
        "message": "Login successful",
        "user": user.to_api_dict(),
        "token": token,
    }


@router.post("/logout")
def logout(response: Response, settings: Settings = Depends(get_settings)) -> Dict[str, Any]:
    response.delete_cookie(
        AUTH_COOKIE,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    return {"success": True, "message": "Logged out successfully"}
