"""
Pydantic schemas for exchange customers, fiat accounts and KYC.
"""

import re
from typing import Any

from pydantic import Field, field_validator

from app.schemas.base import CamelModel

# Basic IBAN shape: country, check digits, bank code, account
_IBAN_RE = re.compile(r"^[A-Z]{2}[0-9]{2}[A-Z0-9]{4}[0-9]{7}([A-Z0-9]?){0,16}$")


# ---------------------------------------------------------------------------
# Customer
# ---------------------------------------------------------------------------


class CreateCustomerRequest(CamelModel):
    phone_number: str = Field(..., min_length=5, max_length=20, examples=["+4915112345678"])


class CreateCustomerResponse(CamelModel):
    success: bool = True
    message: str
    customer_id: str


# ---------------------------------------------------------------------------
# Fiat accounts
# ---------------------------------------------------------------------------


class SEPAAccountRequest(CamelModel):
    account_number: str = Field(..., examples=["DE89370400440532013000"])
    recipient_full_address: str = Field(..., min_length=1, examples=["Hauptstr. 1, Berlin"])
    recipient_address_country: str = Field(..., examples=["DE"])

    @field_validator("account_number")
    @classmethod
    def validate_iban(cls, v: str) -> str:
        iban = re.sub(r"\s", "", v).upper()
        if not _IBAN_RE.match(iban):
            raise ValueError("Please enter a valid IBAN number.")
        return iban

    @field_validator("recipient_address_country")
    @classmethod
    def validate_country(cls, v: str) -> str:
        if not re.match(r"^[A-Z]{2}$", v):
            raise ValueError("Please enter a valid 2-letter country code (e.g., BE, DE, FR).")
        return v


class FiatAccount(CamelModel):
    fiat_account_id: str
    created_at: str | None = None
    account_details: dict[str, Any] = {}

    @property
    def display_name(self) -> str:
        kind = self.account_details.get("type")
        if kind == "SEPA":
            return "SEPA Bank Account"
        if kind == "CARD":
            return f"{self.account_details.get('cardType', '')} Card ****{self.account_details.get('lastFour', '')}"
        return "Unknown Account"


class FiatAccountListResponse(CamelModel):
    success: bool = True
    count: int
    fiat_accounts: list[FiatAccount]


class CreateFiatAccountResponse(CamelModel):
    success: bool = True
    message: str
    fiat_account_id: str


# ---------------------------------------------------------------------------
# KYC
# ---------------------------------------------------------------------------


class KYCStatusRead(CamelModel):
    kyc_status: str
    kyc_level: str | None = None
    status_reason: str | None = None
    customer_id: str | None = None


class KYCRefreshRequest(CamelModel):
    for_level: int | None = Field(None, ge=1, le=3)


class KYCRefreshResponse(CamelModel):
    success: bool = True
    message: str
    kyc_level: str | None = None
    kyc_status: str | None = None


class KYCStartRequest(CamelModel):
    level: int = Field(1, ge=1, le=3)


class KYCStartResponse(CamelModel):
    success: bool = True
    url: str
    submission_id: str
