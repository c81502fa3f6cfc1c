"""
Quote auto-refresh — a cooperative one-second countdown that re-requests a
quote when it reaches zero.

``CountdownTimer`` holds the tick arithmetic; ``QuoteRefresher`` drives it
from an asyncio task. Starting at N seconds, the fetch fires on the N-th
tick and the countdown resets to N. A manual refresh fetches immediately
and restarts the countdown; ``cancel`` stops the task so no stale fetch
fires after the inputs change or the session ends.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable

from app.config import settings

logger = logging.getLogger(__name__)


class CountdownTimer:
    """Seconds-remaining counter that wraps back to its start value."""

    def __init__(self, seconds: int):
        if seconds < 1:
            raise ValueError("Countdown must start at 1 second or more")
        self.seconds = seconds
        self.remaining = seconds

    def reset(self) -> None:
        self.remaining = self.seconds

    def tick(self) -> bool:
        """Advance one second. Returns True when the countdown expires (and resets)."""
        if self.remaining <= 1:
            self.remaining = self.seconds
            return True
        self.remaining -= 1
        return False


class QuoteRefresher:
    """
    Re-runs ``fetch`` every ``seconds`` seconds until cancelled.

    ``fetch`` is an async callable returning the new quote. Failures are
    kept in ``last_error`` and the countdown carries on; the next expiry or
    a manual refresh tries again.
    """

    def __init__(
        self,
        fetch: Callable[[], Awaitable[Any]],
        seconds: int | None = None,
        on_quote: Callable[[Any], None] | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._fetch = fetch
        self._on_quote = on_quote
        self._sleep = sleep
        self.timer = CountdownTimer(seconds or settings.QUOTE_REFRESH_SECONDS)
        self._task: asyncio.Task | None = None
        self._in_flight = False
        self._generation = 0
        self.latest: Any = None
        self.last_error: Exception | None = None

    # --- State ---

    @property
    def remaining(self) -> int:
        return self.timer.remaining

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def loading(self) -> bool:
        return self._in_flight

    # --- Control ---

    def start(self) -> None:
        """(Re)start the countdown from the full interval."""
        self.cancel()
        self.timer.reset()
        self._task = asyncio.create_task(self._run(self._generation))

    # Inputs changed: same as a fresh start
    restart = start

    def cancel(self) -> None:
        """
        Stop the countdown. A fetch already in flight still completes, but
        its quote is dropped and the countdown is not restarted.
        """
        self._generation += 1
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def refresh_now(self) -> Any:
        """
        Fetch immediately and restart the countdown.

        Ignored (returns None) while another fetch is in flight, or if
        ``cancel`` is called before the fetch completes.
        """
        if self._in_flight:
            return None
        self.cancel()
        generation = self._generation
        result = await self._fire(generation)
        if generation != self._generation:
            return None
        self.start()
        return result

    # --- Internals ---

    async def _run(self, generation: int) -> None:
        while True:
            await self._sleep(1)
            if self.timer.tick():
                await self._fire(generation)

    async def _fire(self, generation: int) -> Any:
        if self._in_flight:
            return None
        self._in_flight = True
        try:
            quote = await self._fetch()
        except Exception as exc:
            self.last_error = exc
            logger.warning("Quote refresh failed: %s", exc)
            return None
        finally:
            self._in_flight = False

        if generation != self._generation:
            logger.debug("Dropping quote fetched before cancel")
            return None

        self.last_error = None
        self.latest = quote
        if self._on_quote is not None:
            try:
                self._on_quote(quote)
            except Exception:
                logger.exception("Quote callback failed")
        return quote

    async def __aenter__(self) -> "QuoteRefresher":
        self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.cancel()
