"""
Core security module — session JWTs, the auth cookie, and OTP codes.

Sessions are HS256 JWTs signed with JWT_SECRET and carried in an HTTP-only
cookie. A missing JWT_SECRET is a configuration error, raised at the first
attempt to sign or verify a token.
"""

import logging
import secrets
import string
from datetime import datetime, timedelta, timezone

import jwt
from fastapi import Response

from app.config import settings
from app.core.exceptions import AuthenticationError, ConfigurationError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Key handling
# ---------------------------------------------------------------------------

_secret_override: str | None = None


def configure_secret(secret: str | None) -> None:
    """Override the JWT secret at runtime (used in tests)."""
    global _secret_override
    _secret_override = secret


def _signing_secret() -> str:
    secret = _secret_override if _secret_override is not None else settings.JWT_SECRET
    if not secret:
        raise ConfigurationError("JWT_SECRET is not set")
    return secret


# ---------------------------------------------------------------------------
# Session tokens
# ---------------------------------------------------------------------------


def create_session_token(email: str, is_verified: bool, role: str = "user") -> str:
    """Create a session JWT carrying the user's email, verification flag and role."""
    now = datetime.now(timezone.utc)
    payload = {
        "email": email,
        "isVerified": is_verified,
        "role": role,
        "iat": now,
        "exp": now + timedelta(seconds=settings.SESSION_EXPIRE_SECONDS),
    }
    return jwt.encode(payload, _signing_secret(), algorithm=settings.JWT_ALGORITHM)


def decode_session_token(token: str) -> dict:
    """
    Decode and return the session payload.

    Raises AuthenticationError on expiry or any other invalid-token error.
    """
    try:
        return jwt.decode(token, _signing_secret(), algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Session has expired")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid session")


# ---------------------------------------------------------------------------
# Cookie helpers
# ---------------------------------------------------------------------------


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_EXPIRE_SECONDS,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


def clear_session_cookie(response: Response) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value="",
        max_age=0,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


# ---------------------------------------------------------------------------
# OTP
# ---------------------------------------------------------------------------


def generate_otp(length: int | None = None) -> str:
    """Return a random numeric code of ``length`` digits (OTP_LENGTH by default)."""
    length = length or settings.OTP_LENGTH
    return "".join(secrets.choice(string.digits) for _ in range(length))
