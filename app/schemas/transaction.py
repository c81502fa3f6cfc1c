"""
Pydantic schemas for exchange webhooks and transaction status reads.
"""

import enum
from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from app.schemas.base import CamelModel


# ---------------------------------------------------------------------------
# Webhooks
# ---------------------------------------------------------------------------


class WebhookPayload(CamelModel):
    """Envelope shared by every provider webhook."""
    event_type: str
    status: str = ""
    reference_id: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class OnrampWebhookMetadata(CamelModel):
    crypto_amount: str | None = None
    crypto_currency: str | None = None
    destination_wallet: str | None = None
    fiat_account_id: str | None = None
    fiat_amount_sent: str | None = None
    fiat_currency: str | None = None
    network_id: str | None = None
    payment_method: str | None = None
    tap_on_fee_amount: str | None = None
    tap_on_fee_currency: str | None = None
    tx_hash: str | None = None
    fail_reason: str | None = None
    customer_id: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def number_as_string(cls, v: Any) -> Any:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


class TransactionRead(CamelModel):
    reference_id: str
    status: str
    step: int
    transaction_type: str
    order_quote_id: str | None = None
    crypto_amount: str | None = None
    crypto_currency: str | None = None
    fiat_amount: str | None = None
    fiat_currency: str | None = None
    destination_wallet: str | None = None
    network_id: str | None = None
    payment_method: str | None = None
    fee_amount: str | None = None
    fee_currency: str | None = None
    tx_hash: str | None = None
    fail_reason: str | None = None
    created_at: datetime
    updated_at: datetime
    completed_at: datetime | None = None

    @field_validator("status", "transaction_type", mode="before")
    @classmethod
    def enum_value(cls, v: Any) -> Any:
        return v.value if isinstance(v, enum.Enum) else v


class LinkQuoteRequest(CamelModel):
    quote_id: str = Field(..., min_length=1)


class TransactionResponse(CamelModel):
    success: bool = True
    transaction: TransactionRead


class TransactionListResponse(CamelModel):
    success: bool = True
    count: int
    transactions: list[TransactionRead]
