from typing import Any, Dict

from fastapi import APIRouter, Depends, Response, status

from ....application.services.auth_service import AuthService
from ....core.config import Settings
from ....core.dependencies import get_auth_service, get_settings
from ....domain.errors import ValidationError
from ...api.dependencies import clear_session_cookie, require_session, set_session_cookie
from ...api.schemas.auth import (
    LoginPayload,
    RegisterPayload,
    ResetOtpPayload,
    ResetPasswordPayload,
    VerifyEmailPayload,
)
from ...api.schemas.user_schemas import serialize_user

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterPayload,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    user, token = auth_service.register(payload.name, payload.email, payload.password)
    set_session_cookie(response, token, settings)
    return {
        "success": True,
        "message": "User registered successfully.",
        "user": serialize_user(user, include_verified=False),
    }


@router.post("/login")
def login(
    payload: LoginPayload,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    user, token = auth_service.login(payload.email, payload.password)
    set_session_cookie(response, token, settings)
    return {
        "success": True,
        "message": "User logged in successfully.",
        "user": serialize_user(user),
    }


@router.post("/logout")
def logout(response: Response, settings: Settings = Depends(get_settings)) -> Dict[str, Any]:
    clear_session_cookie(response, settings)
    return {"success": True, "message": "Logged out successfully."}


@router.post("/send-verify-otp")
def send_verify_otp(
    user_id: str = Depends(require_session),
    auth_service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    auth_service.send_verify_otp(user_id)
    return {"success": True, "message": "Verification OTP sent to email."}


@router.post("/verify-email")
def verify_email(
    payload: VerifyEmailPayload,
    user_id: str = Depends(require_session),
    auth_service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    user = auth_service.verify_email(user_id, payload.otp)
    return {"success": True, "message": "Email verified successfully.", "user": serialize_user(user)}


# Missing fields on the two password-reset endpoints answer 200 with success=false.
@router.post("/send-reset-otp", status_code=status.HTTP_201_CREATED)
def send_reset_otp(
    payload: ResetOtpPayload,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    try:
        auth_service.send_reset_otp(payload.email)
    except ValidationError as exc:
        response.status_code = status.HTTP_200_OK
        return {"success": False, "message": exc.message}
    return {"success": True, "message": "Reset OTP sent to your email."}


@router.post("/reset-password")
def reset_password(
    payload: ResetPasswordPayload,
    auth_service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    try:
        auth_service.reset_password(payload.email, payload.otp, payload.new_password)
    except ValidationError as exc:
        return {"success": False, "message": exc.message}
    return {"success": True, "message": "Password has been reset successfully."}
