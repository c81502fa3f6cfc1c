"""
Shared async Redis client.

Backs OTP codes and their rate limits, the exchange configuration cache,
and short-lived quote storage.
"""

import redis.asyncio as aioredis

from app.config import settings

redis = aioredis.from_url(
    settings.REDIS_URL,
    decode_responses=True,
    ssl=settings.REDIS_SSL,
)


async def get_redis() -> aioredis.Redis:
    """FastAPI dependency returning the shared client."""
    return redis
