"""
Authentication service — email OTP login.

OTPs live in Redis under ``otp:{email}`` for OTP_EXPIRE_SECONDS and are
deleted once used. Requests are limited to OTP_MAX_REQUESTS_PER_HOUR per
email. Session tokens themselves are handled by ``app.core.security``.
"""

import logging
import re

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.security import generate_otp
from app.models.user import User

logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_RE.match(email))


# ---------------------------------------------------------------------------
# OTP storage
# ---------------------------------------------------------------------------


async def issue_otp(email: str, redis) -> str:
    """Generate an OTP, store it with a TTL, and return it."""
    otp = generate_otp()
    await redis.setex(f"otp:{email}", settings.OTP_EXPIRE_SECONDS, otp)
    return otp


async def verify_otp(email: str, otp: str, redis) -> bool:
    """Check *otp* against the stored code. Deletes the key on success."""
    key = f"otp:{email}"
    stored = await redis.get(key)
    if stored is None or stored != otp:
        return False
    await redis.delete(key)
    return True


async def check_otp_rate_limit(email: str, redis) -> bool:
    """
    Count an OTP request against the hourly limit.

    Returns True if within limit, False if exceeded.
    """
    key = f"otp_limit:{email}"
    count = await redis.incr(key)
    if count == 1:
        await redis.expire(key, 3600)
    return count <= settings.OTP_MAX_REQUESTS_PER_HOUR


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


async def get_user_by_email(email: str, db: AsyncSession) -> User | None:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_or_create_user(email: str, db: AsyncSession) -> User:
    """
    Return the user for *email*, creating it on first login.

    The role is re-derived from ADMIN_EMAILS each time so admin changes take
    effect at the next login.
    """
    user = await get_user_by_email(email, db)
    if user is None:
        user = User(email=email, role=User.role_for_email(email))
        db.add(user)
        await db.flush()
        logger.info("User created: %s", email)
    else:
        user.role = User.role_for_email(email)
    return user


async def mark_verified(user: User, db: AsyncSession) -> bool:
    """Flag the user as verified. Returns True the first time only."""
    if user.is_verified:
        return False
    user.is_verified = True
    await db.flush()
    return True
