"""
Admin console endpoints — catalog curation.

All routes require a verified session whose email is listed in
ADMIN_EMAILS.
"""

import logging

from fastapi import APIRouter, Depends

from app.api.deps import get_catalog_service, get_config_service, require_admin
from app.models.user import User
from app.schemas.catalog import (
    AdminActionResponse,
    ListUpdateRequest,
    Operation,
    PaymentMethodListResponse,
    StatusToggleRequest,
)
from app.services.catalog_service import CatalogService
from app.services.config_service import ConfigService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/payment-methods", response_model=PaymentMethodListResponse)
async def list_payment_methods(
    type: Operation = "onramp",
    admin: User = Depends(require_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    """Payment methods for one direction, with their country lists."""
    methods = await service.get_payment_methods(type, include_countries=True)
    return PaymentMethodListResponse(count=len(methods), payment_methods=methods)


@router.patch("/crypto/{crypto_id}/status", response_model=AdminActionResponse)
async def update_crypto_status(
    crypto_id: str,
    payload: StatusToggleRequest,
    admin: User = Depends(require_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    message = await service.update_crypto_status(crypto_id, payload.type, payload.enabled)
    logger.info("Admin %s: %s", admin.email, message)
    return AdminActionResponse(message=message)


@router.patch("/payment-methods/{method_id}/status", response_model=AdminActionResponse)
async def update_payment_method_status(
    method_id: str,
    payload: StatusToggleRequest,
    admin: User = Depends(require_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    message = await service.update_payment_method_status(method_id, payload.type, payload.enabled)
    logger.info("Admin %s: %s", admin.email, message)
    return AdminActionResponse(message=message)


@router.patch("/payment-methods/{method_id}/countries", response_model=AdminActionResponse)
async def update_payment_method_countries(
    method_id: str,
    payload: ListUpdateRequest,
    admin: User = Depends(require_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    message = await service.update_payment_method_countries(
        method_id, payload.values, payload.action,
    )
    logger.info("Admin %s: %s", admin.email, message)
    return AdminActionResponse(message=message)


@router.patch("/payment-methods/{method_id}/currencies", response_model=AdminActionResponse)
async def update_payment_method_currencies(
    method_id: str,
    payload: ListUpdateRequest,
    admin: User = Depends(require_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    message = await service.update_payment_method_currencies(
        method_id, payload.values, payload.action,
    )
    logger.info("Admin %s: %s", admin.email, message)
    return AdminActionResponse(message=message)


@router.post("/catalog/sync", response_model=AdminActionResponse)
async def sync_catalog(
    admin: User = Depends(require_admin),
    config_service: ConfigService = Depends(get_config_service),
    catalog_service: CatalogService = Depends(get_catalog_service),
):
    """Refresh the provider configuration and add any new catalog entries."""
    config = await config_service.refresh_config()
    added = await catalog_service.sync_from_config(config)
    return AdminActionResponse(
        message=(
            f"Added {added['countries']} countries, {added['payment_methods']} "
            f"payment methods, {added['crypto_assets']} crypto assets"
        ),
    )
