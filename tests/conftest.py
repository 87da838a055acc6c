"""Pytest configuration and fixtures."""

from datetime import timedelta
from typing import List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient

from authflow.application.services.auth_service import AuthService
from authflow.core.app_factory import create_application
from authflow.core.config import Settings
from authflow.domain.errors import EmailDeliveryError
from authflow.infrastructure.repositories.user_repository import SQLiteUserRepository
from authflow.services.email_service import EmailService
from authflow.services.password_hasher import PasswordHasher
from authflow.services.token_service import TokenService

TEST_SECRET = "test-secret"


class RecordingEmailService(EmailService):
    """Captures outgoing mail instead of talking to SMTP."""

    def __init__(self) -> None:
        super().__init__(smtp_host="smtp.test", smtp_username="mailer", from_email="noreply@test")
        self.sent: List[Tuple[str, str, Optional[str]]] = []
        self.fail = False

    def send_welcome_email(self, to_email: str, name: str) -> None:
        self._record("welcome", to_email, None)

    def send_verify_otp_email(self, to_email: str, name: str, otp: str) -> None:
        self._record("verify", to_email, otp)

    def send_reset_otp_email(self, to_email: str, name: str, otp: str) -> None:
        self._record("reset", to_email, otp)

    def last_otp(self, kind: str) -> str:
        for sent_kind, _, otp in reversed(self.sent):
            if sent_kind == kind and otp:
                return otp
        raise AssertionError(f"no {kind} email was sent")

    def _record(self, kind: str, to_email: str, otp: Optional[str]) -> None:
        if self.fail:
            raise EmailDeliveryError()
        self.sent.append((kind, to_email, otp))


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start_ms: int = 1_700_000_000_000) -> None:
        self.now_ms = start_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, delta: timedelta) -> None:
        self.now_ms += int(delta.total_seconds() * 1000)


@pytest.fixture
def mailer():
    return RecordingEmailService()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def repository(tmp_path):
    repo = SQLiteUserRepository(tmp_path / "users.db")
    yield repo
    repo.close()


@pytest.fixture
def hasher():
    # Minimum bcrypt cost keeps the suite fast.
    return PasswordHasher(rounds=4)


@pytest.fixture
def token_service():
    return TokenService(TEST_SECRET)


@pytest.fixture
def auth_service(repository, hasher, token_service, mailer, clock):
    return AuthService(repository, hasher, token_service, mailer, clock=clock)


@pytest.fixture
def settings(tmp_path, monkeypatch):
    monkeypatch.setenv("APP_ENV", "development")
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "app.db"))
    monkeypatch.setenv("JWT_SECRET", TEST_SECRET)
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")
    for key in ("SMTP_HOST", "SMTP_USERNAME", "SMTP_PASSWORD", "SENDER_EMAIL", "CORS_ALLOW_ORIGINS"):
        monkeypatch.delenv(key, raising=False)
    return Settings()


@pytest.fixture
def client(settings, mailer, clock):
    app = create_application(
        settings=settings,
        email_service=mailer,
        auth_service_options={"clock": clock},
    )
    with TestClient(app) as test_client:
        yield test_client
