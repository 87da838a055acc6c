"""Public projections of the User entity."""

from typing import Any, Dict

from authflow.domain.models.user import User


def serialize_user(user: User, include_verified: bool = True) -> Dict[str, Any]:
    """User fields safe to return to clients; never the password or OTP state."""
    data: Dict[str, Any] = {
        "id": user.id,
        "name": user.name,
        "email": user.email,
    }
    if include_verified:
        data["isAccountVerified"] = user.is_account_verified
    return data
