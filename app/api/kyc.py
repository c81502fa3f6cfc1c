"""
KYC endpoints — stored status, hosted widget, and status refresh.
"""

from fastapi import APIRouter, Depends

from app.api.deps import get_kyc_service, require_verified_user
from app.models.user import User
from app.schemas.customer import (
    KYCRefreshRequest,
    KYCRefreshResponse,
    KYCStartRequest,
    KYCStartResponse,
    KYCStatusRead,
)
from app.services.kyc_service import KYCService

router = APIRouter()


@router.get("/status", response_model=KYCStatusRead)
async def kyc_status(user: User = Depends(require_verified_user)):
    return KYCStatusRead(
        kyc_status=user.kyc_status.value,
        kyc_level=user.kyc_level,
        status_reason=user.kyc_status_reason,
        customer_id=user.customer_id,
    )


@router.post("/widget", response_model=KYCStartResponse)
async def start_kyc(
    payload: KYCStartRequest,
    user: User = Depends(require_verified_user),
    service: KYCService = Depends(get_kyc_service),
):
    """Hosted verification URL for the requested level."""
    result = await service.start_kyc(user, payload.level)
    return KYCStartResponse(url=result["url"], submission_id=result["submissionId"])


@router.post("/refresh", response_model=KYCRefreshResponse)
async def refresh_kyc(
    payload: KYCRefreshRequest | None = None,
    user: User = Depends(require_verified_user),
    service: KYCService = Depends(get_kyc_service),
):
    """Pull the latest submission status from the provider."""
    for_level = payload.for_level if payload else None
    result = await service.refresh_kyc_status(user, for_level)
    return KYCRefreshResponse(
        success=result["success"],
        message=result["message"],
        kyc_level=result.get("kycLevel"),
        kyc_status=result.get("kycStatus"),
    )
