"""Tests for email OTP login, the session cookie, and health."""

import pytest

from app.config import settings
from app.core import security
from app.models.user import UserRole
from app.services import auth_service


# ---------------------------------------------------------------------------
# Service helpers
# ---------------------------------------------------------------------------


def test_normalize_and_validate_email():
    assert auth_service.normalize_email("  Jane@Example.COM ") == "jane@example.com"
    assert auth_service.is_valid_email("jane@example.com")
    assert not auth_service.is_valid_email("jane@example")
    assert not auth_service.is_valid_email("jane example@x.com")


@pytest.mark.asyncio
async def test_issue_and_verify_otp(mock_redis):
    otp = await auth_service.issue_otp("jane@example.com", mock_redis)

    key, ttl, stored = mock_redis.setex.call_args.args
    assert key == "otp:jane@example.com"
    assert ttl == settings.OTP_EXPIRE_SECONDS
    assert stored == otp
    assert len(otp) == settings.OTP_LENGTH and otp.isdigit()

    mock_redis.get.return_value = otp
    assert await auth_service.verify_otp("jane@example.com", otp, mock_redis) is True
    mock_redis.delete.assert_awaited_once_with("otp:jane@example.com")


@pytest.mark.asyncio
async def test_wrong_otp_keeps_stored_code(mock_redis):
    mock_redis.get.return_value = "111111"

    assert await auth_service.verify_otp("jane@example.com", "222222", mock_redis) is False
    mock_redis.delete.assert_not_awaited()


@pytest.mark.asyncio
async def test_rate_limit_window_set_on_first_request(mock_redis):
    assert await auth_service.check_otp_rate_limit("jane@example.com", mock_redis)
    mock_redis.expire.assert_awaited_once_with("otp_limit:jane@example.com", 3600)


@pytest.mark.asyncio
async def test_rate_limit_exceeded(mock_redis):
    mock_redis.incr.return_value = settings.OTP_MAX_REQUESTS_PER_HOUR + 1

    assert await auth_service.check_otp_rate_limit("jane@example.com", mock_redis) is False
    mock_redis.expire.assert_not_awaited()


@pytest.mark.asyncio
async def test_new_user_gets_admin_role_from_settings(mock_db, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_EMAILS", ["Boss@Example.com"])

    user = await auth_service.get_or_create_user("boss@example.com", mock_db)

    assert user.role == UserRole.ADMIN
    assert user.is_verified is False
    mock_db.add.assert_called_once_with(user)


@pytest.mark.asyncio
async def test_mark_verified_only_once(mock_db, make_user):
    user = make_user(is_verified=False)

    assert await auth_service.mark_verified(user, mock_db) is True
    assert await auth_service.mark_verified(user, mock_db) is False


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_login_sends_otp(client, mock_redis, email_tasks):
    response = await client.post("/api/auth/login", json={"email": " Jane@Example.com"})

    assert response.status_code == 200
    assert response.json()["success"] is True
    otp = mock_redis.setex.call_args.args[2]
    email_tasks["verification"].delay.assert_called_once_with("jane@example.com", otp)


@pytest.mark.asyncio
async def test_login_requires_email(client):
    response = await client.post("/api/auth/login", json={})
    assert response.status_code == 400
    assert response.json()["detail"] == "Email is required"


@pytest.mark.asyncio
async def test_login_rejects_bad_email(client):
    response = await client.post("/api/auth/login", json={"email": "not-an-email"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid email format"


@pytest.mark.asyncio
async def test_login_rate_limited(client, mock_redis, email_tasks):
    mock_redis.incr.return_value = settings.OTP_MAX_REQUESTS_PER_HOUR + 1

    response = await client.post("/api/auth/login", json={"email": "jane@example.com"})

    assert response.status_code == 429
    mock_redis.setex.assert_not_awaited()
    email_tasks["verification"].delay.assert_not_called()


@pytest.mark.asyncio
async def test_verify_sets_cookie_and_welcomes_new_user(
    client, mock_db, mock_redis, make_result, make_user, email_tasks,
):
    user = make_user(is_verified=False)
    mock_redis.get.return_value = "123456"
    mock_db.execute.return_value = make_result(one=user)

    response = await client.post(
        "/api/auth/verify", json={"email": "jane@example.com", "otp": "123456"},
    )

    assert response.status_code == 200
    assert user.is_verified is True
    email_tasks["welcome"].delay.assert_called_once_with("jane@example.com")

    token = response.cookies.get(settings.SESSION_COOKIE_NAME)
    payload = security.decode_session_token(token)
    assert payload["email"] == "jane@example.com"
    assert payload["isVerified"] is True


@pytest.mark.asyncio
async def test_verify_returning_user_gets_no_welcome(
    client, mock_db, mock_redis, make_result, make_user, email_tasks,
):
    mock_redis.get.return_value = "123456"
    mock_db.execute.return_value = make_result(one=make_user())

    response = await client.post(
        "/api/auth/verify", json={"email": "jane@example.com", "otp": "123456"},
    )

    assert response.status_code == 200
    email_tasks["welcome"].delay.assert_not_called()


@pytest.mark.asyncio
async def test_verify_bad_otp(client, mock_redis):
    mock_redis.get.return_value = "123456"

    response = await client.post(
        "/api/auth/verify", json={"email": "jane@example.com", "otp": "000000"},
    )

    assert response.status_code == 401
    assert settings.SESSION_COOKIE_NAME not in response.cookies


@pytest.mark.asyncio
async def test_verify_missing_fields(client):
    response = await client.post("/api/auth/verify", json={"email": "jane@example.com"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_current_user(client, make_user, login_as):
    login_as(make_user())

    response = await client.get("/api/auth/user")

    assert response.status_code == 200
    assert response.json() == {"email": "jane@example.com", "isVerified": True, "role": "user"}


@pytest.mark.asyncio
async def test_current_user_without_cookie(client):
    response = await client.get("/api/auth/user")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_current_user_with_tampered_cookie(client):
    client.cookies.set(settings.SESSION_COOKIE_NAME, "not-a-jwt")

    response = await client.get("/api/auth/user")

    assert response.status_code == 401
    assert response.json()["code"] == "authentication_error"


@pytest.mark.asyncio
async def test_logout_clears_cookie(client):
    response = await client.post("/api/auth/logout")

    assert response.status_code == 200
    assert f"{settings.SESSION_COOKIE_NAME}=" in response.headers["set-cookie"]
    assert "Max-Age=0" in response.headers["set-cookie"]


@pytest.mark.asyncio
async def test_health_check(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
