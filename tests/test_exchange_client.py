"""Tests for the signed exchange provider client."""

import httpx
import pytest

from app.core.exceptions import ConfigurationError, ExchangeAPIError, ExchangeUnavailableError
from app.core.signature import generate_signature
from app.services.exchange_client import ExchangeClient

from conftest import TEST_API_KEY, TEST_API_SECRET


@pytest.mark.asyncio
async def test_request_sends_signed_headers(exchange, exchange_client):
    exchange.on("GET", "/v1/external/allConfigs", body={"countries": []})

    data = await exchange_client.request("GET", "/v1/external/allConfigs")

    assert data == {"countries": []}
    sent = exchange.requests[-1]
    assert sent.headers["api-key"] == TEST_API_KEY
    assert sent.headers["signature"] == generate_signature(
        "GET", "/v1/external/allConfigs", secret=TEST_API_SECRET,
    )
    assert sent.content == b""


@pytest.mark.asyncio
async def test_post_sends_json_body(exchange, exchange_client):
    exchange.on("POST", "/v1/external/customers", body={"customerId": "c-1"})

    await exchange_client.request("POST", "/v1/external/customers", {"type": "INDIVIDUAL"})

    assert exchange.last_json() == {"type": "INDIVIDUAL"}


@pytest.mark.asyncio
async def test_query_params_are_not_signed(exchange, exchange_client):
    exchange.on("POST", "/v1/external/auth-token", body={"authToken": "t"})

    await exchange_client.request("POST", "/v1/external/auth-token", params={"customerId": "c-1"})

    sent = exchange.requests[-1]
    assert sent.url.params["customerId"] == "c-1"
    assert sent.headers["signature"] == generate_signature(
        "POST", "/v1/external/auth-token", secret=TEST_API_SECRET,
    )


@pytest.mark.asyncio
async def test_provider_error_message_is_surfaced(exchange, exchange_client):
    exchange.on(
        "POST", "/v1/external/quotes", status=400,
        body={"errorCode": 1001, "errorMessage": "limit exceeded", "errorMetadata": {"max": "5000"}},
    )

    with pytest.raises(ExchangeAPIError) as exc_info:
        await exchange_client.request("POST", "/v1/external/quotes", {})

    err = exc_info.value
    assert "limit exceeded" in err.message
    assert err.upstream_status == 400
    assert err.error_code == 1001
    assert err.error_metadata == {"max": "5000"}
    assert err.status_code == 400


@pytest.mark.asyncio
async def test_error_without_json_body_uses_reason(exchange, exchange_client):
    exchange.on("GET", "/v1/external/allConfigs", status=503, body=b"down")

    with pytest.raises(ExchangeAPIError) as exc_info:
        await exchange_client.request("GET", "/v1/external/allConfigs")

    assert exc_info.value.message == "API request failed: Service Unavailable"
    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_network_failure_is_unavailable():
    def fail(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = ExchangeClient(
        base_url="https://exchange.test",
        api_key=TEST_API_KEY,
        api_secret=TEST_API_SECRET,
        transport=httpx.MockTransport(fail),
    )
    with pytest.raises(ExchangeUnavailableError):
        await client.request("GET", "/v1/external/allConfigs")
    await client.aclose()


@pytest.mark.asyncio
async def test_missing_api_key_is_configuration_error(exchange):
    client = ExchangeClient(
        base_url="https://exchange.test",
        api_key="",
        api_secret=TEST_API_SECRET,
        transport=httpx.MockTransport(exchange.handler),
    )
    with pytest.raises(ConfigurationError):
        await client.request("GET", "/v1/external/allConfigs")
    assert exchange.requests == []
    await client.aclose()
