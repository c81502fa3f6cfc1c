"""
Pydantic schemas for quote requests and provider quotes.
"""

from typing import Any

from pydantic import Field, field_validator

from app.schemas.base import CamelModel


class QuoteRequest(CamelModel):
    """
    Quote form submission.

    Exactly one of ``from_amount`` / ``to_amount`` drives the calculation;
    the other is sent upstream as an empty string. Amounts are decimal
    strings, as the provider expects.
    """
    from_amount: str = Field("", examples=["50"])
    to_amount: str = Field("", examples=[""])
    from_currency: str = Field("", examples=["USD"])
    to_currency: str = Field("", examples=["USDT-BEP20"])
    payment_method_type: str = Field("", examples=["CARD"])
    chain: str | None = Field(None, examples=["BSC"])

    @field_validator("from_amount", "to_amount", mode="before")
    @classmethod
    def amount_as_string(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v).strip()


class Fee(CamelModel):
    type: str
    amount: str
    currency: str


class Quote(CamelModel):
    """Priced, time-limited offer returned by the provider."""
    quote_id: str
    from_currency: str
    to_currency: str
    from_amount: str
    to_amount: str
    payment_method_type: str | None = None
    rate: str
    fees: list[Fee] = []
    chain: str | None = None
    expiration: str | None = None
    metadata: dict[str, Any] = {}

    @field_validator("from_amount", "to_amount", "rate", mode="before")
    @classmethod
    def number_as_string(cls, v: Any) -> str:
        return "" if v is None else str(v)
