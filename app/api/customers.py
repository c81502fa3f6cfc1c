"""
Customer endpoints — exchange customer profile and payout (fiat) accounts.
"""

from fastapi import APIRouter, Depends, status

from app.api.deps import get_customer_service, require_verified_user
from app.models.user import User
from app.schemas.customer import (
    CreateCustomerRequest,
    CreateCustomerResponse,
    CreateFiatAccountResponse,
    FiatAccountListResponse,
    SEPAAccountRequest,
)
from app.services.customer_service import CustomerService

router = APIRouter()


@router.post("", response_model=CreateCustomerResponse, status_code=status.HTTP_201_CREATED)
async def create_customer(
    payload: CreateCustomerRequest,
    user: User = Depends(require_verified_user),
    service: CustomerService = Depends(get_customer_service),
):
    """Register the signed-in user with the exchange provider."""
    customer_id = await service.create_customer(user, payload.phone_number)
    return CreateCustomerResponse(
        message="Customer profile created successfully",
        customer_id=customer_id,
    )


@router.get("/fiat-accounts", response_model=FiatAccountListResponse)
async def list_fiat_accounts(
    user: User = Depends(require_verified_user),
    service: CustomerService = Depends(get_customer_service),
):
    accounts = await service.list_fiat_accounts(user)
    return FiatAccountListResponse(count=len(accounts), fiat_accounts=accounts)


@router.post(
    "/fiat-accounts",
    response_model=CreateFiatAccountResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_fiat_account(
    payload: SEPAAccountRequest,
    user: User = Depends(require_verified_user),
    service: CustomerService = Depends(get_customer_service),
):
    """Add a SEPA bank account for offramp payouts."""
    fiat_account_id = await service.create_sepa_account(user, payload)
    return CreateFiatAccountResponse(
        message="Bank account added successfully",
        fiat_account_id=fiat_account_id,
    )
