"""
Shared test fixtures for CryptoRamp.

Provides the async test client, database session and Redis mocks, a
stubbed exchange provider (httpx.MockTransport), session cookies, and
sample provider payloads.
"""

import json
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.config import settings
from app.core import security
from app.database import get_db
from app.models.user import User, UserRole
from app.redis_client import get_redis
from app.services.exchange_client import ExchangeClient, get_exchange_client

TEST_JWT_SECRET = "test-jwt-secret"
TEST_API_KEY = "test-api-key"
TEST_API_SECRET = "test-api-secret"


# --- Secrets ---


@pytest.fixture(autouse=True)
def session_secret():
    """Sign session cookies with a fixed test secret."""
    security.configure_secret(TEST_JWT_SECRET)
    yield
    security.configure_secret(None)


@pytest.fixture(autouse=True)
def exchange_secret(monkeypatch):
    """Webhook signatures are checked against the exchange API secret."""
    monkeypatch.setattr(settings, "EXCHANGE_API_SECRET_KEY", TEST_API_SECRET)


@pytest.fixture(autouse=True)
def email_tasks(monkeypatch):
    """Keep Celery out of request tests; returns the two mocked tasks."""
    verification = MagicMock()
    welcome = MagicMock()
    monkeypatch.setattr("app.api.auth.send_verification_email", verification)
    monkeypatch.setattr("app.api.auth.send_welcome_email", welcome)
    return {"verification": verification, "welcome": welcome}


# --- Mock Redis ---


@pytest.fixture
def mock_redis():
    """AsyncMock Redis client with common methods."""
    redis = AsyncMock()
    redis.setex = AsyncMock()
    redis.get = AsyncMock(return_value=None)
    redis.delete = AsyncMock()
    redis.incr = AsyncMock(return_value=1)
    redis.expire = AsyncMock()
    return redis


# --- Mock Database Session ---


def _make_result(one=None, many=None) -> MagicMock:
    """A stand-in for the Result returned by ``db.execute``."""
    result = MagicMock()
    result.scalar_one_or_none = MagicMock(return_value=one)
    result.scalars.return_value.all.return_value = list(many or [])
    return result


@pytest.fixture
def make_result():
    """Factory fixture for ``db.execute`` results."""
    return _make_result


@pytest.fixture
def mock_db():
    """AsyncMock database session."""
    db = AsyncMock()
    db.execute = AsyncMock(return_value=_make_result())
    db.flush = AsyncMock()
    db.add = MagicMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    return db


def _make_user(**overrides) -> User:
    defaults = {
        "email": "jane@example.com",
        "is_verified": True,
        "role": UserRole.USER,
    }
    defaults.update(overrides)
    return User(**defaults)


@pytest.fixture
def make_user():
    """Factory fixture for creating User instances."""
    return _make_user


# --- Stub exchange provider ---


class StubExchange:
    """
    Routes ``(METHOD, path)`` to canned ``(status, body)`` answers and
    records every request it sees.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], tuple[int, object]] = {}
        self.requests: list[httpx.Request] = []

    def on(self, method: str, path: str, status: int = 200, body: object = None) -> None:
        self.routes[(method.upper(), path)] = (status, body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, body = self.routes.get(
            (request.method, request.url.path), (404, {"errorMessage": "no stub"}),
        )
        if isinstance(body, (dict, list)):
            return httpx.Response(status, json=body)
        return httpx.Response(status, content=body or b"")

    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def exchange():
    return StubExchange()


@pytest_asyncio.fixture
async def exchange_client(exchange):
    client = ExchangeClient(
        base_url="https://exchange.test",
        api_key=TEST_API_KEY,
        api_secret=TEST_API_SECRET,
        transport=httpx.MockTransport(exchange.handler),
    )
    yield client
    await client.aclose()


# --- Dependency Override Helpers ---


@pytest_asyncio.fixture
async def client(mock_db, mock_redis, exchange_client):
    """
    Async HTTP test client with get_db, get_redis and the exchange client
    overridden to use test doubles.
    """
    from app.main import app

    async def override_get_db():
        yield mock_db

    async def override_get_redis():
        return mock_redis

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = override_get_redis
    app.dependency_overrides[get_exchange_client] = lambda: exchange_client

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def login_as(client, mock_db):
    """
    Put a session cookie for *user* on the client and make the first DB
    lookup return that user. Extra results are returned by later
    ``db.execute`` calls, in order.
    """

    def _login(user: User, *later_results):
        token = security.create_session_token(user.email, user.is_verified, user.role.value)
        client.cookies.set(settings.SESSION_COOKIE_NAME, token)
        mock_db.execute.side_effect = [_make_result(one=user), *later_results]
        return user

    return _login


# --- Sample Data ---


@pytest.fixture
def sample_config():
    """Trimmed ``allConfigs`` document."""
    return {
        "countries": [
            {"id": "DE", "states": None},
            {"id": "US", "states": [{"code": "NY", "name": "New York"}]},
        ],
        "payments": [
            {
                "id": "CARD",
                "onRampSupported": True,
                "offRampSupported": False,
                "availableFiatCurrencies": ["USD", "EUR"],
                "availableCountries": ["DE", "US"],
            },
            {
                "id": "SEPA",
                "onRampSupported": True,
                "offRampSupported": True,
                "availableFiatCurrencies": ["EUR"],
                "availableCountries": ["DE"],
            },
        ],
        "fiatExchangeRates": {"EUR": {"USD": 1.08}},
        "crypto": [
            {
                "id": "USDT-BEP20",
                "onRampSupported": True,
                "offRampSupported": True,
                "network": "BEP20",
                "chain": "BSC",
                "paymentLimits": [
                    {"id": "CARD", "currency": "USD", "min": 20, "max": 5000, "methodType": "onramp"},
                    {"id": "SEPA", "currency": "EUR", "min": "10", "max": "10000", "methodType": "onramp"},
                    {"id": "SEPA", "currency": "EUR", "minCrypto": "15", "maxCrypto": "9000", "methodType": "offramp"},
                ],
            },
        ],
    }


@pytest.fixture
def sample_quote():
    """Provider answer for 50 USD -> USDT-BEP20."""
    return {
        "quoteId": "q-123",
        "fromCurrency": "USD",
        "toCurrency": "USDT-BEP20",
        "fromAmount": "50",
        "toAmount": "48.75",
        "paymentMethodType": "CARD",
        "rate": "0.975",
        "fees": [{"type": "processing", "amount": "1.25", "currency": "USD"}],
        "chain": "BSC",
        "expiration": "2099-01-01T00:00:00Z",
    }
