"""
Exchange configuration endpoints — the cached ``allConfigs`` document.
"""

from fastapi import APIRouter, Depends

from app.api.deps import get_config_service, get_session_user
from app.schemas.auth import SessionUser
from app.schemas.config import ConfigResponse, Country, CryptoCurrency, PaymentMethod
from app.services.config_service import ConfigService

router = APIRouter()


@router.get("", response_model=ConfigResponse)
async def get_config(service: ConfigService = Depends(get_config_service)):
    """Full provider configuration (served from cache when fresh)."""
    return await service.get_config()


@router.get("/countries", response_model=list[Country])
async def get_countries(service: ConfigService = Depends(get_config_service)):
    return await service.get_supported_countries()


@router.get("/cryptocurrencies", response_model=list[CryptoCurrency])
async def get_cryptocurrencies(service: ConfigService = Depends(get_config_service)):
    return await service.get_supported_cryptocurrencies()


@router.get("/payment-methods/{country_code}", response_model=list[PaymentMethod])
async def get_payment_methods_for_country(
    country_code: str,
    service: ConfigService = Depends(get_config_service),
):
    return await service.get_payment_methods_for_country(country_code.upper())


@router.post("/refresh")
async def refresh_config(
    session: SessionUser = Depends(get_session_user),
    service: ConfigService = Depends(get_config_service),
):
    """Drop the cached configuration and fetch it again. Signed-in users only."""
    config = await service.refresh_config()
    return {"success": True, "config": config.model_dump(by_alias=True)}
