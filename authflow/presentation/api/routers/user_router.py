"""API router for the signed-in user's data."""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Cookie, Depends

from authflow.application.services.auth_service import AuthService
from authflow.core.dependencies import get_auth_service
from authflow.presentation.api.dependencies import SESSION_COOKIE, require_session
from authflow.presentation.api.schemas.user_schemas import serialize_user

router = APIRouter(prefix="/api/user", tags=["user"])


@router.get("/")
def get_user_data(
    user_id: str = Depends(require_session),
    auth_service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    """Get the current user's public profile."""
    user = auth_service.get_user_data(user_id)
    return {"success": True, "message": "User data retrieved.", "user": serialize_user(user)}


@router.get("/check")
def check_authentication(
    token: Optional[str] = Cookie(default=None, alias=SESSION_COOKIE),
    auth_service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    """Report whether the session cookie belongs to a live account."""
    user = auth_service.is_authenticated(token)
    return {"success": True, "message": "User is authenticated.", "user": serialize_user(user)}
