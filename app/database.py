"""
Async SQLAlchemy setup for the CryptoRamp store.

Holds users, the asset / payment-method catalog edited from the admin
console, and transaction statuses written by exchange webhooks.
"""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from app.config import settings

engine = create_async_engine(
    settings.DATABASE_URL,
    pool_size=settings.DATABASE_POOL_SIZE,
    pool_pre_ping=True,
    echo=settings.DEBUG and not settings.is_production,
)

async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class Base(DeclarativeBase):
    """Declarative base shared by every CryptoRamp table."""


async def get_db() -> AsyncSession:
    """Yield a session per request; commit on success, roll back on error."""
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def enum_values(enum_cls) -> list[str]:
    """Store enum members by value ("pending") rather than by name ("PENDING")."""
    return [member.value for member in enum_cls]
