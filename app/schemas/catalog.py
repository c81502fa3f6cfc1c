"""
Pydantic schemas for catalog listings and admin console updates.
"""

from typing import Any, Literal

from pydantic import Field

from app.schemas.base import CamelModel

Operation = Literal["onramp", "offramp"]


# ---------------------------------------------------------------------------
# Listings
# ---------------------------------------------------------------------------


class CryptoLimit(CamelModel):
    payment_method: str
    currency: str
    min: str | None = None
    max: str | None = None
    min_crypto: str | None = None
    max_crypto: str | None = None


class CryptoOption(CamelModel):
    id: str
    network: str | None = None
    chain: str | None = None
    payment_methods: list[str]
    supported_fiat_currencies: list[str]
    limits: list[CryptoLimit]


class CryptoListResponse(CamelModel):
    success: bool = True
    count: int
    cryptos: list[CryptoOption]


class PaymentMethodOption(CamelModel):
    id: str
    on_ramp_supported: bool
    off_ramp_supported: bool
    available_fiat_currencies: list[str]
    available_countries: list[str] | None = None


class PaymentMethodListResponse(CamelModel):
    success: bool = True
    count: int
    payment_methods: list[PaymentMethodOption]


class CountryOption(CamelModel):
    id: str
    states: list[Any] | None = None


class CountryListResponse(CamelModel):
    success: bool = True
    count: int
    countries: list[CountryOption]


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------


class StatusToggleRequest(CamelModel):
    type: Operation
    enabled: bool


class ListUpdateRequest(CamelModel):
    values: list[str] = Field(..., min_length=1, examples=[["DE", "FR"]])
    action: Literal["add", "remove"]


class AdminActionResponse(CamelModel):
    success: bool = True
    message: str
