"""HTTP tests for the auth and user routers."""

from datetime import timedelta

from fastapi.testclient import TestClient

from authflow.core.app_factory import create_application
from authflow.core.config import Settings
from authflow.presentation.api.dependencies import SESSION_COOKIE
from authflow.services.otp import VERIFY_OTP_TTL


def _register(client, name="Ana", email="ana@x.com", password="pw123"):
    return client.post("/api/auth/register", json={"name": name, "email": email, "password": password})


def test_health(client):
    assert client.get("/").json() == {"success": True, "message": "API working"}


def test_end_to_end_flow(client, mailer):
    response = _register(client)
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert set(body["user"]) == {"id", "name", "email"}
    user_id = body["user"]["id"]

    response = client.post("/api/auth/login", json={"email": "ana@x.com", "password": "pw123"})
    assert response.status_code == 200
    assert response.json()["user"]["isAccountVerified"] is False
    assert SESSION_COOKIE in response.cookies

    response = client.post("/api/auth/send-verify-otp")
    assert response.status_code == 200
    assert response.json()["success"] is True

    response = client.post("/api/auth/verify-email", json={"otp": mailer.last_otp("verify")})
    assert response.status_code == 200
    assert response.json()["user"] == {
        "id": user_id,
        "name": "Ana",
        "email": "ana@x.com",
        "isAccountVerified": True,
    }

    response = client.post("/api/auth/send-reset-otp", json={"email": "ana@x.com"})
    assert response.status_code == 201
    assert response.json()["success"] is True

    response = client.post(
        "/api/auth/reset-password",
        json={"email": "ana@x.com", "otp": mailer.last_otp("reset"), "newPassword": "newpw456"},
    )
    assert response.json() == {"success": True, "message": "Password has been reset successfully."}

    old = client.post("/api/auth/login", json={"email": "ana@x.com", "password": "pw123"})
    assert old.status_code == 400
    assert old.json() == {"success": False, "message": "Invalid password"}

    new = client.post("/api/auth/login", json={"email": "ana@x.com", "password": "newpw456"})
    assert new.status_code == 200


def test_register_sets_http_only_cookie(client):
    response = _register(client)
    header = response.headers["set-cookie"].lower()
    assert header.startswith(f"{SESSION_COOKIE}=")
    assert "httponly" in header
    assert "samesite=strict" in header
    assert "secure" not in header
    assert "max-age=604800" in header


def test_production_cookie_is_secure_and_cross_site(settings, mailer, clock, monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    app = create_application(settings=Settings(), email_service=mailer, auth_service_options={"clock": clock})
    with TestClient(app) as client:
        header = _register(client).headers["set-cookie"].lower()
    assert "secure" in header
    assert "samesite=none" in header


def test_duplicate_registration(client):
    _register(client)
    response = _register(client, name="Other")
    assert response.status_code == 409
    assert response.json() == {"success": False, "message": "User with this email already exists."}


def test_register_missing_fields(client):
    response = client.post("/api/auth/register", json={"email": "ana@x.com"})
    assert response.status_code == 400
    assert response.json()["success"] is False


def test_malformed_body_uses_envelope(client):
    response = client.post(
        "/api/auth/login", content="not json", headers={"content-type": "application/json"}
    )
    assert response.status_code == 400
    assert response.json()["success"] is False


def test_login_unknown_email(client):
    response = client.post("/api/auth/login", json={"email": "bob@x.com", "password": "pw"})
    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Invalid email"}


def test_logout_clears_cookie_and_is_idempotent(client):
    _register(client)
    assert client.get("/api/user/").status_code == 200

    for _ in range(2):
        response = client.post("/api/auth/logout")
        assert response.status_code == 200
        assert response.json()["success"] is True

    assert client.get("/api/user/").status_code == 401


def test_protected_routes_require_cookie(client):
    for method, path in (
        ("post", "/api/auth/send-verify-otp"),
        ("post", "/api/auth/verify-email"),
        ("get", "/api/user/"),
    ):
        response = getattr(client, method)(path)
        assert response.status_code == 401
        assert response.json() == {
            "success": False,
            "message": "Unauthorized: Token not found. Please login again.",
        }


def test_tampered_cookie_is_rejected(client):
    _register(client)
    token = client.cookies[SESSION_COOKIE]
    client.cookies.clear()
    client.cookies.set(SESSION_COOKIE, token[:-4] + ("AAAA" if not token.endswith("AAAA") else "BBBB"))

    response = client.get("/api/user/")
    assert response.status_code == 401
    assert "Invalid or expired token" in response.json()["message"]


def test_user_data_and_check(client):
    user_id = _register(client).json()["user"]["id"]

    data = client.get("/api/user/").json()
    assert data["success"] is True
    assert data["user"] == {"id": user_id, "name": "Ana", "email": "ana@x.com", "isAccountVerified": False}

    check = client.get("/api/user/check").json()
    assert check["success"] is True
    assert check["user"]["id"] == user_id


def test_check_without_cookie(client):
    response = client.get("/api/user/check")
    assert response.status_code == 401
    assert response.json()["success"] is False


def test_verify_email_expired_and_invalid_messages(client, mailer, clock):
    _register(client)
    client.post("/api/auth/send-verify-otp")

    response = client.post("/api/auth/verify-email", json={"otp": "000000"})
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid OTP."

    clock.advance(VERIFY_OTP_TTL + timedelta(seconds=1))
    response = client.post("/api/auth/verify-email", json={"otp": mailer.last_otp("verify")})
    assert response.status_code == 400
    assert response.json()["message"] == "OTP has expired. Please request a new one."


def test_verify_email_missing_otp(client):
    _register(client)
    response = client.post("/api/auth/verify-email", json={})
    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "OTP is required."}


def test_send_verify_otp_when_already_verified(client, mailer):
    _register(client)
    client.post("/api/auth/send-verify-otp")
    client.post("/api/auth/verify-email", json={"otp": mailer.last_otp("verify")})

    response = client.post("/api/auth/send-verify-otp")
    assert response.status_code == 400
    assert response.json()["message"] == "Account is already verified"


def test_reset_endpoints_soft_fail_on_missing_fields(client):
    response = client.post("/api/auth/send-reset-otp", json={})
    assert response.status_code == 200
    assert response.json() == {"success": False, "message": "Email is required"}

    response = client.post("/api/auth/reset-password", json={"email": "ana@x.com"})
    assert response.status_code == 200
    assert response.json() == {"success": False, "message": "Email, OTP and New password are required."}


def test_reset_for_unknown_email(client):
    response = client.post("/api/auth/send-reset-otp", json={"email": "nobody@x.com"})
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "User not found."}


def test_mail_failure_is_server_error(client, mailer):
    mailer.fail = True
    response = _register(client)
    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Server error. Please try again later."}

    # No rollback: the account exists and can log in.
    mailer.fail = False
    assert client.post("/api/auth/login", json={"email": "ana@x.com", "password": "pw123"}).status_code == 200


def test_long_passwords_register_reset_and_login(client, mailer):
    long_password = "a" * 80
    assert _register(client, password=long_password).status_code == 201
    response = client.post("/api/auth/login", json={"email": "ana@x.com", "password": long_password})
    assert response.status_code == 200

    client.post("/api/auth/send-reset-otp", json={"email": "ana@x.com"})
    new_password = "b" * 80
    response = client.post(
        "/api/auth/reset-password",
        json={"email": "ana@x.com", "otp": mailer.last_otp("reset"), "newPassword": new_password},
    )
    assert response.status_code == 200
    assert response.json()["success"] is True

    assert client.post("/api/auth/login", json={"email": "ana@x.com", "password": new_password}).status_code == 200
    assert client.post("/api/auth/login", json={"email": "ana@x.com", "password": long_password}).status_code == 400
