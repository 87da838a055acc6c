from fastapi import Depends, Request, Response

from ...application.services.auth_service import AuthService
from ...core.config import Settings
from ...core.dependencies import get_auth_service

SESSION_COOKIE = "token"


def require_session(
    request: Request,
    auth_service: AuthService = Depends(get_auth_service),
) -> str:
    """Resolve the user id from the session cookie or reject the request."""
    return auth_service.authenticate_token(request.cookies.get(SESSION_COOKIE))


def set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        SESSION_COOKIE,
        token,
        max_age=settings.cookie_max_age,
        httponly=True,
        secure=settings.is_production,
        samesite="none" if settings.is_production else "strict",
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        SESSION_COOKIE,
        httponly=True,
        secure=settings.is_production,
        samesite="none" if settings.is_production else "strict",
    )
