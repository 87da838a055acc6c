from __future__ import annotations

import logging
from typing import Callable, Optional, Tuple

from ...domain.errors import AuthError, ConflictError, NotFoundError, StateError, ValidationError
from ...domain.models import User
from ...domain.ports.persistence import UserRepository
from ...services import otp as otp_codes
from ...services.email_service import EmailService
from ...services.password_hasher import PasswordHasher
from ...services.token_service import TokenService

logger = logging.getLogger(__name__)

OTP_EXPIRED_MESSAGE = "OTP has expired. Please request a new one."
TOKEN_MISSING_MESSAGE = "Unauthorized: Token not found. Please login again."


class AuthService:
    """Coordinates registration, login, email verification and password reset."""

    def __init__(
        self,
        users: UserRepository,
        hasher: PasswordHasher,
        tokens: TokenService,
        email_service: EmailService,
        clock: Callable[[], int] = otp_codes.now_ms,
    ) -> None:
        self._users = users
        self._hasher = hasher
        self._tokens = tokens
        self._email = email_service
        self._clock = clock

    # ------------------------------------------------------------------
    def register(self, name: Optional[str], email: Optional[str], password: Optional[str]) -> Tuple[User, str]:
        if not name or not email or not password:
            raise ValidationError("Please provide name, email, and password.")
        if self._users.get_by_email(email):
            raise ConflictError("User with this email already exists.")

        user = self._users.create(name=name, email=email, password_hash=self._hasher.hash(password))
        token = self._tokens.create_token(user.id)
        logger.info("Registered user %s", user.id)

        # The account stays in place if the welcome mail fails.
        self._email.send_welcome_email(user.email, user.name)
        return user, token

    def login(self, email: Optional[str], password: Optional[str]) -> Tuple[User, str]:
        if not email or not password:
            raise ValidationError("Please provide email, and password.")

        user = self._users.get_by_email(email)
        if not user:
            logger.warning("Login attempt for unknown email")
            raise AuthError("Invalid email")
        if not self._hasher.verify(password, user.password_hash):
            logger.warning("Invalid password for user %s", user.id)
            raise AuthError("Invalid password", status_code=400)

        logger.info("User %s logged in", user.id)
        return user, self._tokens.create_token(user.id)

    # ------------------------------------------------------------------
    def send_verify_otp(self, user_id: str) -> None:
        user = self._require_user(user_id)
        if user.is_account_verified:
            raise StateError("Account is already verified")

        code = otp_codes.generate_otp()
        self._users.set_verify_otp(
            user.id, code, otp_codes.expires_at(self._clock(), otp_codes.VERIFY_OTP_TTL)
        )
        logger.info("Issued verification OTP for user %s", user.id)
        self._email.send_verify_otp_email(user.email, user.name, code)

    def verify_email(self, user_id: str, otp: Optional[str]) -> User:
        if not otp:
            raise ValidationError("OTP is required.")
        user = self._require_user(user_id)

        if otp_codes.is_expired(user.verify_otp_expired_at, self._clock()):
            raise AuthError(OTP_EXPIRED_MESSAGE, status_code=400)
        if not user.verify_otp or user.verify_otp != otp:
            logger.warning("Invalid verification OTP for user %s", user.id)
            raise AuthError("Invalid OTP.", status_code=400)
        if not self._users.consume_verify_otp(user.id, otp):
            raise AuthError("Invalid OTP.", status_code=400)

        logger.info("Verified email for user %s", user.id)
        return self._require_user(user.id)

    # ------------------------------------------------------------------
    def send_reset_otp(self, email: Optional[str]) -> None:
        if not email:
            raise ValidationError("Email is required")
        user = self._users.get_by_email(email)
        if not user:
            raise NotFoundError("User not found.")

        code = otp_codes.generate_otp()
        self._users.set_reset_otp(
            user.id, code, otp_codes.expires_at(self._clock(), otp_codes.RESET_OTP_TTL)
        )
        logger.info("Issued password reset OTP for user %s", user.id)
        self._email.send_reset_otp_email(user.email, user.name, code)

    def reset_password(self, email: Optional[str], otp: Optional[str], new_password: Optional[str]) -> None:
        if not email or not otp or not new_password:
            raise ValidationError("Email, OTP and New password are required.")
        user = self._users.get_by_email(email)
        if not user:
            raise NotFoundError("User not found.")

        if otp_codes.is_expired(user.reset_otp_expired_at, self._clock()):
            raise AuthError(OTP_EXPIRED_MESSAGE, status_code=400)
        if not user.reset_otp or user.reset_otp != otp:
            logger.warning("Invalid password reset OTP for user %s", user.id)
            raise AuthError("Invalid OTP. Please check and try again.", status_code=400)

        if not self._users.consume_reset_otp(user.id, otp, self._hasher.hash(new_password)):
            raise AuthError("Invalid OTP. Please check and try again.", status_code=400)
        logger.info("Password reset for user %s", user.id)

    # ------------------------------------------------------------------
    def get_user_data(self, user_id: str) -> User:
        return self._require_user(user_id)

    def authenticate_token(self, token: Optional[str]) -> str:
        """Return the user id a session token is bound to."""
        if not token:
            raise AuthError(TOKEN_MISSING_MESSAGE)
        return self._tokens.decode(token)

    def is_authenticated(self, token: Optional[str]) -> User:
        return self._require_user(self.authenticate_token(token))

    def _require_user(self, user_id: str) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found.")
        return user
