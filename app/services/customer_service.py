"""
Customer service — exchange customer profiles and their fiat accounts.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ValidationError
from app.models.user import User
from app.schemas.customer import FiatAccount, SEPAAccountRequest
from app.services.exchange_client import ExchangeClient, require_field

logger = logging.getLogger(__name__)

CUSTOMERS_PATH = "/v1/external/customers"


def fiat_accounts_path(customer_id: str) -> str:
    return f"{CUSTOMERS_PATH}/{customer_id}/fiatAccounts"


class CustomerService:
    """Creates the provider customer for a user and manages payout accounts."""

    def __init__(self, client: ExchangeClient, db: AsyncSession):
        self.client = client
        self.db = db

    async def create_customer(self, user: User, phone_number: str) -> str:
        """Register *user* with the provider and store the returned customer id."""
        if user.customer_id:
            raise ValidationError("Customer profile already exists")

        data = await self.client.request(
            "POST",
            CUSTOMERS_PATH,
            {"email": user.email, "phoneNumber": phone_number, "type": "INDIVIDUAL"},
        )
        user.customer_id = require_field(data, "customerId", CUSTOMERS_PATH)
        await self.db.flush()

        logger.info("Customer %s created for %s", user.customer_id, user.email)
        return user.customer_id

    @staticmethod
    def _require_customer(user: User) -> str:
        if not user.customer_id:
            raise ValidationError(
                "Customer profile not found. Please create a customer profile first."
            )
        return user.customer_id

    async def list_fiat_accounts(self, user: User) -> list[FiatAccount]:
        customer_id = self._require_customer(user)
        data = await self.client.request("GET", fiat_accounts_path(customer_id))
        return [FiatAccount.model_validate(a) for a in data.get("fiatAccounts") or []]

    async def create_sepa_account(self, user: User, account: SEPAAccountRequest) -> str:
        """Add a SEPA payout account; returns the provider's fiatAccountId."""
        customer_id = self._require_customer(user)
        path = fiat_accounts_path(customer_id)
        data = await self.client.request(
            "POST",
            path,
            {
                "customerId": customer_id,
                "type": "SEPA",
                "fiatAccountFields": account.model_dump(by_alias=True),
            },
        )
        fiat_account_id = require_field(data, "fiatAccountId", path)
        logger.info("SEPA account %s added for customer %s", fiat_account_id, customer_id)
        return fiat_account_id
