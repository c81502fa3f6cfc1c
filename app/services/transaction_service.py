"""
Transaction service — webhook-driven transaction status tracking.

ONRAMP webhooks upsert a row per provider reference id. Status only moves
forward (see ``Transaction.can_advance``); a repeated, late or
out-of-order event is acknowledged but leaves the row untouched.
"""

import logging

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, ValidationError
from app.models.transaction import (
    Transaction,
    TransactionStatus,
    TransactionType,
    WEBHOOK_STATUS_MAP,
)
from app.models.user import User
from app.schemas.transaction import OnrampWebhookMetadata, WebhookPayload

logger = logging.getLogger(__name__)


def map_webhook_status(status: str) -> TransactionStatus:
    """Provider status -> local status; unknown values count as pending."""
    return WEBHOOK_STATUS_MAP.get(status, TransactionStatus.PENDING)


def _apply_details(tx: Transaction, meta: OnrampWebhookMetadata) -> None:
    """Copy the amounts and payout details the event carries."""
    fields = {
        "crypto_amount": meta.crypto_amount,
        "crypto_currency": meta.crypto_currency,
        "fiat_amount": meta.fiat_amount_sent,
        "fiat_currency": meta.fiat_currency,
        "destination_wallet": meta.destination_wallet,
        "network_id": meta.network_id,
        "payment_method": meta.payment_method,
        "fee_amount": meta.tap_on_fee_amount,
        "fee_currency": meta.tap_on_fee_currency,
        "tx_hash": meta.tx_hash,
        "fail_reason": meta.fail_reason,
    }
    for name, value in fields.items():
        if value is not None:
            setattr(tx, name, value)


async def get_by_reference_id(db: AsyncSession, reference_id: str) -> Transaction | None:
    result = await db.execute(
        select(Transaction).where(Transaction.reference_id == reference_id)
    )
    return result.scalar_one_or_none()


async def apply_onramp_webhook(
    db: AsyncSession,
    payload: WebhookPayload,
) -> tuple[Transaction, bool]:
    """
    Create or advance the transaction named by ``payload.reference_id``.

    Returns ``(transaction, changed)``; ``changed`` is False for a stale
    event that was ignored.
    """
    if not payload.reference_id:
        raise ValidationError("ONRAMP webhook is missing referenceId")

    new_status = map_webhook_status(payload.status)
    try:
        meta = OnrampWebhookMetadata.model_validate(payload.metadata)
    except PydanticValidationError as exc:
        raise ValidationError(f"Invalid ONRAMP webhook metadata: {exc.error_count()} error(s)") from exc

    tx = await get_by_reference_id(db, payload.reference_id)
    created = tx is None
    if created:
        tx = Transaction(
            reference_id=payload.reference_id,
            transaction_type=TransactionType.ONRAMP,
        )
        db.add(tx)

    advanced = tx.advance_to(new_status)
    if not created and not advanced:
        logger.info(
            "Stale ONRAMP event for %s ignored: %s -> %s",
            tx.reference_id, tx.status.value, new_status.value,
        )
        return tx, False

    _apply_details(tx, meta)

    if meta.customer_id and not tx.customer_id:
        tx.customer_id = meta.customer_id
        result = await db.execute(select(User).where(User.customer_id == meta.customer_id))
        user = result.scalar_one_or_none()
        if user is not None:
            tx.user_id = user.id

    await db.flush()
    logger.info(
        "Transaction %s %s from ONRAMP %s (step %d)",
        tx.reference_id, tx.status.value, payload.status, tx.step,
    )
    return tx, True


async def list_for_user(db: AsyncSession, user: User) -> list[Transaction]:
    """The user's transactions, newest first."""
    condition = Transaction.user_id == user.id
    if user.customer_id:
        condition = or_(condition, Transaction.customer_id == user.customer_id)
    result = await db.execute(
        select(Transaction).where(condition).order_by(Transaction.created_at.desc())
    )
    return list(result.scalars().all())


async def link_to_quote(db: AsyncSession, reference_id: str, quote_id: str) -> Transaction:
    """Record which quote a transaction was placed from."""
    tx = await get_by_reference_id(db, reference_id)
    if tx is None:
        raise NotFoundError("Transaction not found")
    tx.order_quote_id = quote_id
    await db.flush()
    logger.info("Transaction %s linked to quote %s", reference_id, quote_id)
    return tx
