"""
Exchange provider API client.

Every call is signed (see ``app.core.signature``) and carries the
``api-key`` header. Non-2xx answers become ``ExchangeAPIError`` with the
provider's structured error fields when the body has them; transport
failures become ``ExchangeUnavailableError``. There is no retry policy:
callers decide whether to try again.

Handlers receive the client through the ``get_exchange_client``
dependency; tests replace it through ``app.dependency_overrides``.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from app.config import settings
from app.core.exceptions import (
    ConfigurationError,
    ExchangeAPIError,
    ExchangeUnavailableError,
)
from app.core.signature import generate_signature

logger = logging.getLogger(__name__)


class ExchangeClient:
    """Signed JSON client for the provider's ``/v1/external`` API."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        api_secret: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._api_secret = api_secret
        self._http = httpx.AsyncClient(
            base_url=self._base_url, timeout=timeout, transport=transport,
        )

    def _headers(self, method: str, path: str) -> dict[str, str]:
        if not self._api_key:
            raise ConfigurationError("EXCHANGE_API_KEY is not set")
        return {
            "Content-Type": "application/json",
            "api-key": self._api_key,
            "signature": generate_signature(method, path, secret=self._api_secret),
        }

    async def request(
        self,
        method: str,
        path: str,
        payload: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
    ) -> Any:
        """
        Send a signed request and return the decoded JSON body.

        ``path`` is the path the signature covers, e.g. ``/v1/external/quotes``;
        query ``params`` are not signed. The payload is only sent for non-GET
        requests.
        """
        method = method.upper()
        headers = self._headers(method, path)
        body = payload if method != "GET" and payload is not None else None

        try:
            resp = await self._http.request(
                method, path, json=body, params=params, headers=headers,
            )
        except httpx.RequestError as exc:
            logger.error("Exchange request %s %s failed: %s", method, path, exc)
            raise ExchangeUnavailableError("Exchange provider is unreachable") from exc

        if resp.is_success:
            return resp.json()

        raise self._error_from_response(method, path, resp)

    @staticmethod
    def _error_from_response(method: str, path: str, resp: httpx.Response) -> ExchangeAPIError:
        message = f"API request failed: {resp.reason_phrase}"
        try:
            data = resp.json()
        except ValueError:
            data = None

        if not isinstance(data, dict):
            logger.error("Exchange %s %s -> %s (no JSON error body)", method, path, resp.status_code)
            return ExchangeAPIError(message, upstream_status=resp.status_code)

        error_message = data.get("errorMessage")
        if error_message:
            message = f"API request failed: {error_message}"

        logger.error(
            "Exchange %s %s -> %s code=%s message=%s",
            method, path, resp.status_code, data.get("errorCode"), error_message,
        )
        return ExchangeAPIError(
            message,
            upstream_status=resp.status_code,
            error_code=data.get("errorCode"),
            error_message=error_message,
            error_metadata=data.get("errorMetadata"),
        )

    async def aclose(self) -> None:
        await self._http.aclose()


# ---------------------------------------------------------------------------
# One client per process, built from settings
# ---------------------------------------------------------------------------

_client: ExchangeClient | None = None


def get_exchange_client() -> ExchangeClient:
    """Return the configured exchange client (created on first use)."""
    global _client
    if _client is None:
        _client = ExchangeClient(
            base_url=settings.EXCHANGE_API_BASE_URL,
            api_key=settings.EXCHANGE_API_KEY,
            api_secret=settings.EXCHANGE_API_SECRET_KEY,
            timeout=settings.EXCHANGE_API_TIMEOUT_SECONDS,
        )
    return _client


async def close_exchange_client() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None


def require_field(data: Any, field: str, path: str) -> Any:
    """
    Return ``data[field]`` from a provider answer, or raise ExchangeAPIError
    (502) when the answer is not an object or the field is missing or empty.
    """
    value = data.get(field) if isinstance(data, dict) else None
    if value in (None, ""):
        logger.error("Exchange response from %s is missing %s", path, field)
        raise ExchangeAPIError(
            f"Exchange response is missing {field}",
            upstream_status=200,
        )
    return value
