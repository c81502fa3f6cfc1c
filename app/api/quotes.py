"""
Quote endpoints — priced offers from the exchange provider.

Upstream failures surface through the application error handlers:
provider 4xx answers become 400 carrying the provider's message, provider
5xx answers and network failures become 502.
"""

from fastapi import APIRouter, Depends

from app.api.deps import get_quote_service
from app.schemas.quote import Quote, QuoteRequest
from app.services.quote_service import QuoteService

router = APIRouter()


@router.post("", response_model=Quote)
async def create_quote(
    payload: QuoteRequest,
    service: QuoteService = Depends(get_quote_service),
):
    """
    Request a quote.

    Needs at least one amount and both currencies. When both amounts are
    sent, QUOTE_AMOUNT_PRIORITY decides which one is kept.
    """
    return await service.create_quote(payload)


@router.post("/onramp", response_model=Quote)
async def create_onramp_quote(
    payload: QuoteRequest,
    service: QuoteService = Depends(get_quote_service),
):
    """Buy quote driven by the fiat amount."""
    return await service.create_onramp_quote(payload)


@router.post("/offramp", response_model=Quote)
async def create_offramp_quote(
    payload: QuoteRequest,
    service: QuoteService = Depends(get_quote_service),
):
    """Sell quote driven by the crypto amount."""
    return await service.create_offramp_quote(payload)


@router.get("/{quote_id}", response_model=Quote)
async def get_quote(
    quote_id: str,
    service: QuoteService = Depends(get_quote_service),
):
    return await service.get_quote(quote_id)
