"""Signing and verification of session tokens."""

import logging
from datetime import datetime, timedelta, timezone

import jwt

from authflow.domain.errors import AuthError

logger = logging.getLogger(__name__)

INVALID_TOKEN_MESSAGE = "Invalid or expired token. Please login again."


class TokenService:
    """Issues and decodes time-limited JWTs bound to a user id."""

    def __init__(
        self,
        secret_key: str,
        expiration_days: int = 7,
        algorithm: str = "HS256",
    ):
        if not secret_key:
            raise RuntimeError("JWT_SECRET is not configured.")
        if secret_key == "change-me":
            logger.warning(
                "JWT_SECRET is using the default value. Configure a strong secret in production."
            )
        self._secret_key = secret_key
        self._algorithm = algorithm
        self.expiration = timedelta(days=expiration_days)

    def create_token(self, user_id: str) -> str:
        now = datetime.now(tz=timezone.utc)
        payload = {"sub": user_id, "iat": now, "exp": now + self.expiration}
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def decode(self, token: str) -> str:
        """
        Verify a token and return the user id it is bound to.

        Raises:
            AuthError: If the token is expired, tampered with or has no subject
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"require": ["sub", "exp"]},
            )
        except jwt.InvalidTokenError as exc:
            logger.warning("Rejected session token: %s", exc)
            raise AuthError(INVALID_TOKEN_MESSAGE) from exc
        return payload["sub"]
