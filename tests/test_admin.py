"""Tests for the admin console routes."""

import pytest

from app.models.catalog import CryptoAsset, PaymentMethod
from app.models.user import UserRole


@pytest.fixture
def admin(make_user):
    return make_user(email="boss@example.com", role=UserRole.ADMIN)


@pytest.fixture
def card():
    return PaymentMethod(
        id="CARD",
        on_ramp_supported=True,
        off_ramp_supported=False,
        available_fiat_currencies=["USD"],
        available_countries=["US"],
    )


@pytest.mark.asyncio
async def test_non_admin_forbidden(client, make_user, login_as):
    login_as(make_user())

    response = await client.patch(
        "/api/admin/crypto/BTC/status", json={"type": "onramp", "enabled": False},
    )

    assert response.status_code == 403
    assert response.json()["code"] == "permission_denied"


@pytest.mark.asyncio
async def test_anonymous_unauthorized(client):
    response = await client.get("/api/admin/payment-methods")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_list_payment_methods_with_countries(client, make_result, admin, card, login_as):
    login_as(admin, make_result(many=[card]))

    response = await client.get("/api/admin/payment-methods")

    assert response.status_code == 200
    assert response.json()["paymentMethods"][0]["availableCountries"] == ["US"]


@pytest.mark.asyncio
async def test_toggle_crypto(client, make_result, admin, login_as):
    asset = CryptoAsset(id="BTC", on_ramp_supported=True, off_ramp_supported=True)
    login_as(admin, make_result(one=asset))

    response = await client.patch(
        "/api/admin/crypto/BTC/status", json={"type": "offramp", "enabled": False},
    )

    assert response.status_code == 200
    assert response.json()["message"] == "Successfully disabled offramp for BTC"
    assert asset.off_ramp_supported is False
    assert asset.on_ramp_supported is True


@pytest.mark.asyncio
async def test_toggle_unknown_crypto(client, make_result, admin, login_as):
    login_as(admin, make_result())

    response = await client.patch(
        "/api/admin/crypto/DOGE/status", json={"type": "onramp", "enabled": True},
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_toggle_payment_method(client, make_result, admin, card, login_as):
    login_as(admin, make_result(one=card))

    response = await client.patch(
        "/api/admin/payment-methods/CARD/status", json={"type": "offramp", "enabled": True},
    )

    assert response.status_code == 200
    assert card.off_ramp_supported is True


@pytest.mark.asyncio
async def test_toggle_rejects_unknown_direction(client, admin, login_as):
    login_as(admin)

    response = await client.patch(
        "/api/admin/payment-methods/CARD/status", json={"type": "swap", "enabled": True},
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_add_countries(client, make_result, admin, card, login_as):
    login_as(admin, make_result(one=card))

    response = await client.patch(
        "/api/admin/payment-methods/CARD/countries",
        json={"values": ["CA", "US"], "action": "add"},
    )

    assert response.status_code == 200
    assert response.json()["message"] == "Successfully added countries for CARD"
    assert card.available_countries == ["US", "CA"]


@pytest.mark.asyncio
async def test_remove_currencies(client, make_result, admin, card, login_as):
    login_as(admin, make_result(one=card))

    response = await client.patch(
        "/api/admin/payment-methods/CARD/currencies",
        json={"values": ["USD"], "action": "remove"},
    )

    assert response.status_code == 200
    assert card.available_fiat_currencies == []


@pytest.mark.asyncio
async def test_list_update_requires_values(client, admin, login_as):
    login_as(admin)

    response = await client.patch(
        "/api/admin/payment-methods/CARD/countries", json={"values": [], "action": "add"},
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_catalog_sync(client, exchange, make_result, admin, login_as, mock_redis, sample_config):
    exchange.on("GET", "/v1/external/allConfigs", body=sample_config)
    login_as(
        admin,
        make_result(many=["DE", "US"]),
        make_result(many=["CARD"]),
        make_result(many=["USDT-BEP20"]),
    )

    response = await client.post("/api/admin/catalog/sync")

    assert response.status_code == 200
    assert response.json()["message"] == (
        "Added 0 countries, 1 payment methods, 0 crypto assets"
    )
    mock_redis.setex.assert_awaited_once()
