"""
Catalog endpoints for the widget — what can be bought or sold, with
which payment methods, in which countries.
"""

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_catalog_service
from app.schemas.catalog import (
    CountryListResponse,
    CryptoListResponse,
    Operation,
    PaymentMethodListResponse,
)
from app.services.catalog_service import CatalogService

router = APIRouter()


@router.get("/onramp", response_model=CryptoListResponse)
async def onramp_cryptos(
    payment_method: str | None = Query(None, alias="paymentMethod"),
    currency: str | None = None,
    service: CatalogService = Depends(get_catalog_service),
):
    """Assets that can be bought, optionally narrowed by payment method and fiat currency."""
    cryptos = await service.get_onramp_cryptos(payment_method, currency)
    return CryptoListResponse(count=len(cryptos), cryptos=cryptos)


@router.get("/offramp", response_model=CryptoListResponse)
async def offramp_cryptos(
    payment_method: str | None = Query(None, alias="paymentMethod"),
    currency: str | None = None,
    service: CatalogService = Depends(get_catalog_service),
):
    cryptos = await service.get_offramp_cryptos(payment_method, currency)
    return CryptoListResponse(count=len(cryptos), cryptos=cryptos)


@router.get("/payment-methods", response_model=PaymentMethodListResponse)
async def payment_methods(
    type: Operation = "onramp",
    country: str | None = None,
    include_countries: bool = Query(False, alias="includeCountries"),
    service: CatalogService = Depends(get_catalog_service),
):
    methods = await service.get_payment_methods(type, country, include_countries)
    return PaymentMethodListResponse(count=len(methods), payment_methods=methods)


@router.get("/countries", response_model=CountryListResponse)
async def countries(
    payment_method: str | None = Query(None, alias="paymentMethod"),
    operation: Operation | None = None,
    service: CatalogService = Depends(get_catalog_service),
):
    """
    Countries, optionally only those a payment method serves.

    404 for an unknown payment method, 400 if it does not support the
    requested operation.
    """
    result = await service.get_countries(payment_method, operation)
    return CountryListResponse(count=len(result), countries=result)
