"""
Authentication endpoints — email OTP login and the session cookie.

Login flow:
  1. POST /login  — create/update the user, email a one-time code
  2. POST /verify — check the code, mark the email verified, set the cookie

Session:
  3. POST /logout — clear the cookie
  4. GET  /user   — who the cookie belongs to
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_session_user
from app.config import settings
from app.core.security import clear_session_cookie, create_session_token, set_session_cookie
from app.database import get_db
from app.redis_client import get_redis
from app.schemas.auth import LoginRequest, SessionUser, SuccessResponse, VerifyRequest
from app.services import auth_service
from app.tasks.email_tasks import send_verification_email, send_welcome_email

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=SuccessResponse)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db),
    redis=Depends(get_redis),
):
    """
    Start an email login.

    1. Validate the email address
    2. Rate-limit OTP requests (OTP_MAX_REQUESTS_PER_HOUR per email)
    3. Create the user on first login
    4. Store a fresh OTP in Redis and queue the email
    """
    email = auth_service.normalize_email(payload.email)
    if not email:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email is required",
        )
    if not auth_service.is_valid_email(email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid email format",
        )

    if not await auth_service.check_otp_rate_limit(email, redis):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many OTP requests. Try again later.",
        )

    await auth_service.get_or_create_user(email, db)
    otp = await auth_service.issue_otp(email, redis)

    if not settings.is_production:
        logger.info("OTP for %s: %s", email, otp)
    send_verification_email.delay(email, otp)

    return SuccessResponse(message="OTP sent to your email")


@router.post("/verify", response_model=SuccessResponse)
async def verify(
    payload: VerifyRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
    redis=Depends(get_redis),
):
    """Check the OTP and start a session."""
    email = auth_service.normalize_email(payload.email)
    otp = payload.otp.strip()
    if not email or not otp:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email and OTP are required",
        )

    if not await auth_service.verify_otp(email, otp, redis):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired OTP",
        )

    user = await auth_service.get_user_by_email(email, db)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired OTP",
        )

    if await auth_service.mark_verified(user, db):
        send_welcome_email.delay(email)

    token = create_session_token(user.email, user.is_verified, user.role.value)
    set_session_cookie(response, token)

    logger.info("User %s signed in", email)
    return SuccessResponse(message="Email verified")


@router.post("/logout", response_model=SuccessResponse)
async def logout(response: Response):
    clear_session_cookie(response)
    return SuccessResponse(message="Logged out")


@router.get("/user", response_model=SessionUser)
async def current_user(session: SessionUser = Depends(get_session_user)):
    return session
