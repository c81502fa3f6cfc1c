"""
Quote requester — validates and normalizes quote forms, fetches priced
quotes from the exchange provider, and keeps them in Redis until they
expire so they can be looked up by id.
"""

import json
import logging
from datetime import datetime, timezone

from app.config import settings
from app.core.exceptions import NotFoundError, ValidationError
from app.schemas.quote import Quote, QuoteRequest
from app.services.exchange_client import ExchangeClient

logger = logging.getLogger(__name__)

QUOTES_PATH = "/v1/external/quotes"
QUOTE_KEY_PREFIX = "quote:"

# Used when the provider's expiration is missing or unparseable
DEFAULT_QUOTE_TTL_SECONDS = 60


def normalize_quote_request(request: QuoteRequest, priority: str | None = None) -> QuoteRequest:
    """
    Return a copy of *request* with at most one amount populated.

    When both amounts are set, ``priority`` ("from" or "to", defaulting to
    QUOTE_AMOUNT_PRIORITY) picks the one that drives the calculation and
    the other is cleared.
    """
    priority = priority or settings.QUOTE_AMOUNT_PRIORITY
    if priority not in ("from", "to"):
        raise ValueError(f"Unknown amount priority: {priority}")

    cleaned = request.model_copy()
    if cleaned.from_amount and cleaned.to_amount:
        if priority == "from":
            cleaned.to_amount = ""
        else:
            cleaned.from_amount = ""
    return cleaned


def _seconds_until(expiration: str | None) -> int:
    if not expiration:
        return DEFAULT_QUOTE_TTL_SECONDS
    try:
        expires_at = datetime.fromisoformat(expiration.replace("Z", "+00:00"))
    except ValueError:
        return DEFAULT_QUOTE_TTL_SECONDS
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    remaining = int((expires_at - datetime.now(timezone.utc)).total_seconds())
    return max(remaining, 1)


class QuoteService:
    """Creates provider quotes and serves cached ones by id."""

    def __init__(self, client: ExchangeClient, redis):
        self.client = client
        self.redis = redis

    @staticmethod
    def validate(request: QuoteRequest) -> None:
        if not request.from_amount and not request.to_amount:
            raise ValidationError("Either fromAmount or toAmount must be provided")
        if not request.from_currency or not request.to_currency:
            raise ValidationError("Both fromCurrency and toCurrency are required")
        if not request.payment_method_type:
            raise ValidationError("Payment method is required")

    async def create_quote(self, request: QuoteRequest) -> Quote:
        """
        Validate, normalize and send a quote request upstream.

        Provider errors propagate as ``ExchangeAPIError`` (message carries
        the provider's ``errorMessage``) or ``ExchangeUnavailableError``.
        """
        self.validate(request)
        cleaned = normalize_quote_request(request)
        payload = cleaned.model_dump(by_alias=True, exclude_none=True)

        data = await self.client.request("POST", QUOTES_PATH, payload)
        quote = Quote.model_validate(data)

        await self.redis.setex(
            f"{QUOTE_KEY_PREFIX}{quote.quote_id}",
            _seconds_until(quote.expiration),
            quote.model_dump_json(by_alias=True),
        )
        logger.info(
            "Quote %s: %s %s -> %s %s @ %s",
            quote.quote_id, quote.from_amount, quote.from_currency,
            quote.to_amount, quote.to_currency, quote.rate,
        )
        return quote

    async def create_onramp_quote(self, request: QuoteRequest) -> Quote:
        """Buy quote: the fiat ``from_amount`` always drives the calculation."""
        return await self.create_quote(request.model_copy(update={"to_amount": ""}))

    async def create_offramp_quote(self, request: QuoteRequest) -> Quote:
        """Sell quote: the crypto ``from_amount`` always drives the calculation."""
        return await self.create_quote(request.model_copy(update={"to_amount": ""}))

    async def get_quote(self, quote_id: str) -> Quote:
        cached = await self.redis.get(f"{QUOTE_KEY_PREFIX}{quote_id}")
        if cached is None:
            raise NotFoundError("Quote not found")
        return Quote.model_validate(json.loads(cached))
