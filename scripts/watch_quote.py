"""
Live quote watcher — requests a quote and keeps it fresh on the countdown,
printing each new price.

Usage:
    python scripts/watch_quote.py 50 USD USDT-BEP20 CARD

Stop with Ctrl+C.
"""

import asyncio
import logging
import sys

from app.redis_client import redis
from app.schemas.quote import Quote, QuoteRequest
from app.services.exchange_client import close_exchange_client, get_exchange_client
from app.services.quote_refresh import QuoteRefresher
from app.services.quote_service import QuoteService


def _print_quote(quote: Quote) -> None:
    print(
        f"  {quote.from_amount} {quote.from_currency} -> "
        f"{quote.to_amount} {quote.to_currency} @ {quote.rate} (quote {quote.quote_id})"
    )


async def watch(amount: str, from_currency: str, to_currency: str, method: str) -> None:
    service = QuoteService(get_exchange_client(), redis)
    request = QuoteRequest(
        from_amount=amount,
        from_currency=from_currency,
        to_currency=to_currency,
        payment_method_type=method,
    )

    refresher = QuoteRefresher(lambda: service.create_quote(request), on_quote=_print_quote)
    try:
        async with refresher:
            await refresher.refresh_now()
            # Runs until interrupted; failed refreshes are logged by the refresher
            await asyncio.Event().wait()
    finally:
        await close_exchange_client()
        await redis.aclose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    if len(sys.argv) < 5:
        print(__doc__)
        sys.exit(1)
    try:
        asyncio.run(watch(*sys.argv[1:5]))
    except KeyboardInterrupt:
        pass
