from __future__ import annotations

from typing import Optional, Protocol

from ..models import User


class UserRepository(Protocol):
    """Abstract credential store for user accounts and their OTP state."""

    def get_by_id(self, user_id: str) -> Optional[User]:
        ...

    def get_by_email(self, email: str) -> Optional[User]:
        ...

    def create(self, name: str, email: str, password_hash: str, is_account_verified: bool = False) -> User:
        ...

    def set_verify_otp(self, user_id: str, otp: str, expires_at: int) -> None:
        ...

    def consume_verify_otp(self, user_id: str, otp: str) -> bool:
        ...

    def set_reset_otp(self, user_id: str, otp: str, expires_at: int) -> None:
        ...

    def consume_reset_otp(self, user_id: str, otp: str, password_hash: str) -> bool:
        ...

    def close(self) -> None:
        ...
