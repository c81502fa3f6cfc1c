"""
Reusable FastAPI dependencies for sessions, roles, and services.

Dependencies:
  - get_session_user      — decodes the session cookie (401 if missing/invalid)
  - get_current_user      — loads the User behind the session
  - require_verified_user — rejects sessions whose email is not verified
  - require_admin         — rejects non-admins (403)
  - get_*_service         — service instances wired to the DB, Redis and
                            exchange client dependencies
"""

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import PermissionDeniedError
from app.core.security import decode_session_token
from app.database import get_db
from app.models.user import User
from app.redis_client import get_redis
from app.schemas.auth import SessionUser
from app.services.catalog_service import CatalogService
from app.services.config_service import ConfigService
from app.services.customer_service import CustomerService
from app.services.exchange_client import ExchangeClient, get_exchange_client
from app.services.kyc_service import KYCService
from app.services.quote_service import QuoteService


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


async def get_session_user(request: Request) -> SessionUser:
    """
    Read the ``auth-token`` cookie and return what the session says.

    Raises 401 if the cookie is missing; an invalid or expired token raises
    ``AuthenticationError`` (also 401).
    """
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    payload = decode_session_token(token)
    return SessionUser(
        email=payload["email"],
        is_verified=payload.get("isVerified", False),
        role=payload.get("role", "user"),
    )


async def get_current_user(
    session: SessionUser = Depends(get_session_user),
    db: AsyncSession = Depends(get_db),
) -> User:
    result = await db.execute(select(User).where(User.email == session.email))
    user = result.scalar_one_or_none()
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


async def require_verified_user(user: User = Depends(get_current_user)) -> User:
    if not user.is_verified:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Email address has not been verified",
        )
    return user


async def require_admin(user: User = Depends(require_verified_user)) -> User:
    if not user.is_admin:
        raise PermissionDeniedError("Admin access required")
    return user


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------


def get_quote_service(
    client: ExchangeClient = Depends(get_exchange_client),
    redis=Depends(get_redis),
) -> QuoteService:
    return QuoteService(client, redis)


def get_config_service(
    client: ExchangeClient = Depends(get_exchange_client),
    redis=Depends(get_redis),
) -> ConfigService:
    return ConfigService(client, redis)


def get_catalog_service(db: AsyncSession = Depends(get_db)) -> CatalogService:
    return CatalogService(db)


def get_customer_service(
    client: ExchangeClient = Depends(get_exchange_client),
    db: AsyncSession = Depends(get_db),
) -> CustomerService:
    return CustomerService(client, db)


def get_kyc_service(
    client: ExchangeClient = Depends(get_exchange_client),
    db: AsyncSession = Depends(get_db),
) -> KYCService:
    return KYCService(client, db)
