"""
Exchange configuration cache.

The provider's ``allConfigs`` document (countries, payment methods, fiat
exchange rates, crypto assets) changes rarely, so it is cached in Redis
for CONFIG_CACHE_TTL_SECONDS. ``refresh_config`` is the explicit
invalidation: it always refetches and overwrites the cache.
"""

import json
import logging

from app.config import settings
from app.schemas.config import ConfigResponse, Country, CryptoCurrency, PaymentMethod
from app.services.exchange_client import ExchangeClient

logger = logging.getLogger(__name__)

ALL_CONFIGS_PATH = "/v1/external/allConfigs"
CONFIG_CACHE_KEY = "exchange_config:all"


class ConfigService:
    """Cached access to the provider configuration."""

    def __init__(self, client: ExchangeClient, redis):
        self.client = client
        self.redis = redis

    async def get_config(self) -> ConfigResponse:
        """Return the cached configuration, fetching it when the cache is empty."""
        cached = await self.redis.get(CONFIG_CACHE_KEY)
        if cached is not None:
            return ConfigResponse.model_validate(json.loads(cached))
        return await self.refresh_config()

    async def refresh_config(self) -> ConfigResponse:
        """Fetch the configuration upstream and overwrite the cache."""
        data = await self.client.request("GET", ALL_CONFIGS_PATH)
        config = ConfigResponse.model_validate(data)

        await self.redis.setex(
            CONFIG_CACHE_KEY,
            settings.CONFIG_CACHE_TTL_SECONDS,
            config.model_dump_json(by_alias=True),
        )
        logger.info(
            "Exchange config cached: %d countries, %d payment methods, %d crypto assets",
            len(config.countries), len(config.payments), len(config.crypto),
        )
        return config

    async def get_supported_countries(self) -> list[Country]:
        return (await self.get_config()).countries

    async def get_supported_cryptocurrencies(self) -> list[CryptoCurrency]:
        return (await self.get_config()).crypto

    async def get_payment_methods_for_country(self, country_code: str) -> list[PaymentMethod]:
        config = await self.get_config()
        return [p for p in config.payments if country_code in p.available_countries]
