"""User domain model for credential and OTP authentication."""

from datetime import datetime
from typing import Optional


class User:
    """
    User entity owned by the credential store.

    Attributes:
        id: Opaque unique identifier
        name: Display name
        email: User email address (unique, stored as given)
        password_hash: bcrypt hash of the password
        is_account_verified: Whether the email address has been confirmed
        verify_otp: Pending email-verification code
        verify_otp_expired_at: Expiry of verify_otp in milliseconds since epoch
        reset_otp: Pending password-reset code
        reset_otp_expired_at: Expiry of reset_otp in milliseconds since epoch
        created_at: Account creation timestamp
        updated_at: Last update timestamp
    """

    def __init__(
        self,
        id: str,
        name: str,
        email: str,
        password_hash: str,
        is_account_verified: bool = False,
        verify_otp: Optional[str] = None,
        verify_otp_expired_at: Optional[int] = None,
        reset_otp: Optional[str] = None,
        reset_otp_expired_at: Optional[int] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        self.id = id
        self.name = name
        self.email = email
        self.password_hash = password_hash
        self.is_account_verified = is_account_verified
        self.verify_otp = verify_otp
        self.verify_otp_expired_at = verify_otp_expired_at
        self.reset_otp = reset_otp
        self.reset_otp_expired_at = reset_otp_expired_at
        self.created_at = created_at or datetime.utcnow()
        self.updated_at = updated_at or datetime.utcnow()

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email} verified={self.is_account_verified}>"
