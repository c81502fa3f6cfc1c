"""
Pydantic schemas for the exchange provider configuration
(``GET /v1/external/allConfigs``).
"""

from typing import Any

from pydantic import field_validator

from app.schemas.base import CamelModel


class Country(CamelModel):
    id: str
    states: list[Any] | None = None


class PaymentMethod(CamelModel):
    id: str
    off_ramp_supported: bool = False
    on_ramp_supported: bool = False
    available_fiat_currencies: list[str] = []
    available_countries: list[str] = []


class PaymentLimit(CamelModel):
    id: str
    currency: str
    min: str | None = None
    max: str | None = None
    min_crypto: str | None = None
    max_crypto: str | None = None
    method_type: str | None = None

    @field_validator("min", "max", "min_crypto", "max_crypto", mode="before")
    @classmethod
    def number_as_string(cls, v: Any) -> str | None:
        return None if v is None else str(v)


class CryptoCurrency(CamelModel):
    id: str
    off_ramp_supported: bool = False
    on_ramp_supported: bool = False
    address: str | None = None
    network: str | None = None
    chain: str | None = None
    payment_limits: list[PaymentLimit] = []


class ConfigResponse(CamelModel):
    countries: list[Country] = []
    payments: list[PaymentMethod] = []
    fiat_exchange_rates: dict[str, Any] = {}
    crypto: list[CryptoCurrency] = []
