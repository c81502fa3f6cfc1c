"""
Catalog service — the curated list of countries, payment methods and
crypto assets the widget offers.

Rows are seeded from the provider configuration (``sync_from_config``)
and curated in the admin console. Listings only show what has the
matching direction flag enabled.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, ValidationError
from app.models.catalog import Country, CryptoAsset, PaymentMethod
from app.schemas.catalog import (
    CountryOption,
    CryptoLimit,
    CryptoOption,
    PaymentMethodOption,
)
from app.schemas.config import ConfigResponse

logger = logging.getLogger(__name__)

OPERATIONS = ("onramp", "offramp")


def _check_operation(operation: str) -> None:
    if operation not in OPERATIONS:
        raise ValidationError(f"Unknown operation: {operation}. Expected onramp or offramp")


def _unique(values) -> list:
    """Order-preserving de-duplication."""
    return list(dict.fromkeys(values))


def _crypto_option(asset: CryptoAsset, limits: list[dict]) -> CryptoOption:
    return CryptoOption(
        id=asset.id,
        network=asset.network,
        chain=asset.chain,
        payment_methods=_unique(limit["id"] for limit in limits),
        supported_fiat_currencies=_unique(limit["currency"] for limit in limits),
        limits=[
            CryptoLimit(
                payment_method=limit["id"],
                currency=limit["currency"],
                min=_as_str(limit.get("min")),
                max=_as_str(limit.get("max")),
                min_crypto=_as_str(limit.get("minCrypto")),
                max_crypto=_as_str(limit.get("maxCrypto")),
            )
            for limit in limits
        ],
    )


def _as_str(value) -> str | None:
    return None if value is None else str(value)


class CatalogService:
    """Catalog reads for the widget and writes for the admin console."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ------------------------------------------------------------------
    # Crypto assets
    # ------------------------------------------------------------------

    async def get_cryptos(
        self,
        operation: str,
        payment_method: str | None = None,
        currency: str | None = None,
    ) -> list[CryptoOption]:
        """
        Assets enabled for *operation*.

        With a payment method or currency filter, each asset's limits are
        narrowed to that direction and filter, and assets left without any
        limit are dropped.
        """
        _check_operation(operation)
        flag = (
            CryptoAsset.on_ramp_supported if operation == "onramp"
            else CryptoAsset.off_ramp_supported
        )
        result = await self.db.execute(select(CryptoAsset).where(flag.is_(True)))
        assets = list(result.scalars().all())

        if not payment_method and not currency:
            return [_crypto_option(a, list(a.payment_limits or [])) for a in assets]

        options = []
        for asset in assets:
            limits = [
                limit for limit in (asset.payment_limits or [])
                if limit.get("methodType") == operation
                and (not payment_method or limit.get("id") == payment_method)
                and (not currency or limit.get("currency") == currency)
            ]
            if limits:
                options.append(_crypto_option(asset, limits))
        return options

    async def get_onramp_cryptos(self, payment_method=None, currency=None) -> list[CryptoOption]:
        return await self.get_cryptos("onramp", payment_method, currency)

    async def get_offramp_cryptos(self, payment_method=None, currency=None) -> list[CryptoOption]:
        return await self.get_cryptos("offramp", payment_method, currency)

    async def _get_crypto(self, crypto_id: str) -> CryptoAsset:
        result = await self.db.execute(select(CryptoAsset).where(CryptoAsset.id == crypto_id))
        asset = result.scalar_one_or_none()
        if asset is None:
            raise NotFoundError(f"Crypto asset with ID {crypto_id} not found")
        return asset

    # ------------------------------------------------------------------
    # Payment methods
    # ------------------------------------------------------------------

    async def get_payment_methods(
        self,
        operation: str = "onramp",
        country: str | None = None,
        include_countries: bool = False,
    ) -> list[PaymentMethodOption]:
        _check_operation(operation)
        flag = (
            PaymentMethod.on_ramp_supported if operation == "onramp"
            else PaymentMethod.off_ramp_supported
        )
        query = select(PaymentMethod).where(flag.is_(True))
        if country:
            query = query.where(PaymentMethod.available_countries.contains([country]))

        result = await self.db.execute(query)
        return [
            PaymentMethodOption(
                id=m.id,
                on_ramp_supported=m.on_ramp_supported,
                off_ramp_supported=m.off_ramp_supported,
                available_fiat_currencies=list(m.available_fiat_currencies or []),
                available_countries=list(m.available_countries or []) if include_countries else None,
            )
            for m in result.scalars().all()
        ]

    async def _get_payment_method(self, method_id: str) -> PaymentMethod:
        result = await self.db.execute(select(PaymentMethod).where(PaymentMethod.id == method_id))
        method = result.scalar_one_or_none()
        if method is None:
            raise NotFoundError(f"Payment method with ID {method_id} not found")
        return method

    # ------------------------------------------------------------------
    # Countries
    # ------------------------------------------------------------------

    async def get_countries(
        self,
        payment_method: str | None = None,
        operation: str | None = None,
    ) -> list[CountryOption]:
        """
        All countries, or only those a payment method serves.

        Raises NotFoundError for an unknown payment method and
        ValidationError if it does not support *operation*.
        """
        allowed: set[str] | None = None
        if payment_method:
            method = await self._get_payment_method(payment_method)
            if operation:
                _check_operation(operation)
                if not method.supports(operation):
                    raise ValidationError(
                        f"Payment method {payment_method} does not support {operation}"
                    )
            allowed = set(method.available_countries or [])

        result = await self.db.execute(select(Country))
        return [
            CountryOption(id=c.id, states=c.states)
            for c in result.scalars().all()
            if allowed is None or c.id in allowed
        ]

    # ------------------------------------------------------------------
    # Admin console
    # ------------------------------------------------------------------

    async def update_crypto_status(self, crypto_id: str, operation: str, enabled: bool) -> str:
        _check_operation(operation)
        asset = await self._get_crypto(crypto_id)
        if operation == "onramp":
            asset.on_ramp_supported = enabled
        else:
            asset.off_ramp_supported = enabled
        await self.db.flush()

        logger.info("Crypto %s %s -> %s", crypto_id, operation, enabled)
        return f"Successfully {'enabled' if enabled else 'disabled'} {operation} for {crypto_id}"

    async def update_payment_method_status(self, method_id: str, operation: str, enabled: bool) -> str:
        _check_operation(operation)
        method = await self._get_payment_method(method_id)
        if operation == "onramp":
            method.on_ramp_supported = enabled
        else:
            method.off_ramp_supported = enabled
        await self.db.flush()

        logger.info("Payment method %s %s -> %s", method_id, operation, enabled)
        return f"Successfully {'enabled' if enabled else 'disabled'} {operation} for {method_id}"

    @staticmethod
    def _apply_list_update(current: list | None, values: list[str], action: str) -> list[str]:
        current = list(current or [])
        if action == "add":
            return _unique(current + values)
        if action == "remove":
            return [v for v in current if v not in values]
        raise ValidationError(f"Unknown action: {action}. Expected add or remove")

    async def update_payment_method_countries(
        self, method_id: str, countries: list[str], action: str,
    ) -> str:
        method = await self._get_payment_method(method_id)
        method.available_countries = self._apply_list_update(
            method.available_countries, countries, action,
        )
        await self.db.flush()
        return f"Successfully {'added' if action == 'add' else 'removed'} countries for {method_id}"

    async def update_payment_method_currencies(
        self, method_id: str, currencies: list[str], action: str,
    ) -> str:
        method = await self._get_payment_method(method_id)
        method.available_fiat_currencies = self._apply_list_update(
            method.available_fiat_currencies, currencies, action,
        )
        await self.db.flush()
        return f"Successfully {'added' if action == 'add' else 'removed'} currencies for {method_id}"

    # ------------------------------------------------------------------
    # Seeding
    # ------------------------------------------------------------------

    async def sync_from_config(self, config: ConfigResponse) -> dict[str, int]:
        """
        Insert catalog rows for provider ids not seen before.

        Existing rows are left alone so admin curation survives a refresh.
        Returns the number of rows added per table.
        """
        known_countries = set((await self.db.execute(select(Country.id))).scalars().all())
        known_methods = set((await self.db.execute(select(PaymentMethod.id))).scalars().all())
        known_crypto = set((await self.db.execute(select(CryptoAsset.id))).scalars().all())

        added = {"countries": 0, "payment_methods": 0, "crypto_assets": 0}

        for country in config.countries:
            if country.id not in known_countries:
                self.db.add(Country(id=country.id, states=country.states))
                added["countries"] += 1

        for method in config.payments:
            if method.id not in known_methods:
                self.db.add(PaymentMethod(
                    id=method.id,
                    on_ramp_supported=method.on_ramp_supported,
                    off_ramp_supported=method.off_ramp_supported,
                    available_fiat_currencies=list(method.available_fiat_currencies),
                    available_countries=list(method.available_countries),
                ))
                added["payment_methods"] += 1

        for crypto in config.crypto:
            if crypto.id not in known_crypto:
                self.db.add(CryptoAsset(
                    id=crypto.id,
                    on_ramp_supported=crypto.on_ramp_supported,
                    off_ramp_supported=crypto.off_ramp_supported,
                    address=crypto.address,
                    network=crypto.network,
                    chain=crypto.chain,
                    payment_limits=[
                        limit.model_dump(by_alias=True, exclude_none=True)
                        for limit in crypto.payment_limits
                    ],
                ))
                added["crypto_assets"] += 1

        await self.db.flush()
        logger.info("Catalog sync added %s", added)
        return added
