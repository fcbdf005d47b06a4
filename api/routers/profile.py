"""Profile Router - view and edit the signed-in user."""
from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends

from api.dependencies import get_current_user, get_store
from api.models import ProfileUpdateRequest
from tasksaver.store import DocumentStore
from tasksaver.users import User, update_profile

router = APIRouter()


@router.get("")
def get_profile(user: User = Depends(get_current_user)) -> Dict[str, Any]:
    return {"success": True, "user": user.to_api_dict()}


@router.put("")
def put_profile(
    request: ProfileUpdateRequest,
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> Dict[str, Any]:
    """Update name, bio, avatar and preferences, or change the password.

    Preferences are merged into the stored ones. A password change needs
    both ``currentPassword`` and ``newPassword``.
    """
    preferences = (
        request.preferences.model_dump(exclude_none=True) if request.preferences else None
    )
    updated = update_profile(
        store,
        user,
        name=request.name,
        bio=request.bio,
        avatar=request.avatar,
        preferences=preferences,
        current_password=request.current_password,
        new_password=request.new_password,
    )
    return {
        "success": True,
        "message": "Profile updated successfully",
        "user": updated.to_api_dict(),
    }
