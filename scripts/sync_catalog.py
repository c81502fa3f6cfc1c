"""
Catalog seeder — fetches the exchange configuration and inserts catalog
rows (countries, payment methods, crypto assets) that do not exist yet.

Usage:
    python scripts/sync_catalog.py

Idempotent: existing rows, including admin toggles, are left unchanged.
"""

import asyncio

from app.database import async_session
from app.redis_client import redis
from app.services.catalog_service import CatalogService
from app.services.config_service import ConfigService
from app.services.exchange_client import close_exchange_client, get_exchange_client


async def sync() -> None:
    config = await ConfigService(get_exchange_client(), redis).refresh_config()

    async with async_session() as session:
        added = await CatalogService(session).sync_from_config(config)
        await session.commit()

    print("\n  Catalog sync complete!")
    for table, count in added.items():
        print(f"    {table}: {count} added")

    await close_exchange_client()
    await redis.aclose()


if __name__ == "__main__":
    asyncio.run(sync())
