"""
Catalog models — countries, payment methods and crypto assets.

Seeded from the exchange provider's configuration and then curated from
the admin console (direction toggles, country and currency lists).
Ids are the provider's string ids ("SEPA", "USDT-BEP20", "DE", ...).
"""

from sqlalchemy import Boolean, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Country(Base):
    __tablename__ = "countries"

    id: Mapped[str] = mapped_column(String(8), primary_key=True)
    states: Mapped[list | None] = mapped_column(JSONB, nullable=True)


class PaymentMethod(Base):
    __tablename__ = "payment_methods"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    on_ramp_supported: Mapped[bool] = mapped_column(Boolean, default=False)
    off_ramp_supported: Mapped[bool] = mapped_column(Boolean, default=False)
    available_fiat_currencies: Mapped[list] = mapped_column(JSONB, default=list)
    available_countries: Mapped[list] = mapped_column(JSONB, default=list)

    def supports(self, operation: str) -> bool:
        """``operation`` is "onramp" or "offramp"."""
        if operation == "onramp":
            return bool(self.on_ramp_supported)
        if operation == "offramp":
            return bool(self.off_ramp_supported)
        raise ValueError(f"Unknown operation: {operation}")


class CryptoAsset(Base):
    __tablename__ = "crypto_assets"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    on_ramp_supported: Mapped[bool] = mapped_column(Boolean, default=False)
    off_ramp_supported: Mapped[bool] = mapped_column(Boolean, default=False)
    address: Mapped[str | None] = mapped_column(String(128))
    network: Mapped[str | None] = mapped_column(String(64))
    chain: Mapped[str | None] = mapped_column(String(64))
    # [{id, currency, min, max, minCrypto, maxCrypto, methodType}]
    payment_limits: Mapped[list] = mapped_column(JSONB, default=list)
