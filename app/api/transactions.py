"""
Transaction status endpoints.

Rows are written by exchange webhooks; these routes only read them (and
let the owner attach the quote a transaction came from).
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_verified_user
from app.database import get_db
from app.models.user import User
from app.schemas.transaction import (
    LinkQuoteRequest,
    TransactionListResponse,
    TransactionRead,
    TransactionResponse,
)
from app.services import transaction_service

router = APIRouter()


@router.get("", response_model=TransactionListResponse)
async def list_transactions(
    user: User = Depends(require_verified_user),
    db: AsyncSession = Depends(get_db),
):
    """The signed-in user's transactions, newest first."""
    txs = await transaction_service.list_for_user(db, user)
    return TransactionListResponse(
        count=len(txs),
        transactions=[TransactionRead.model_validate(tx, from_attributes=True) for tx in txs],
    )


@router.get("/{reference_id}", response_model=TransactionResponse)
async def get_transaction(reference_id: str, db: AsyncSession = Depends(get_db)):
    """Current status of one transaction, by provider reference id."""
    tx = await transaction_service.get_by_reference_id(db, reference_id)
    if tx is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Transaction not found",
        )
    return TransactionResponse(
        transaction=TransactionRead.model_validate(tx, from_attributes=True),
    )


@router.post("/{reference_id}/quote", response_model=TransactionResponse)
async def link_quote(
    reference_id: str,
    payload: LinkQuoteRequest,
    user: User = Depends(require_verified_user),
    db: AsyncSession = Depends(get_db),
):
    tx = await transaction_service.link_to_quote(db, reference_id, payload.quote_id)
    return TransactionResponse(
        transaction=TransactionRead.model_validate(tx, from_attributes=True),
    )
