"""
Exchange provider webhook endpoint — transaction and KYC notifications.

The ``signature`` header, when present, is a base64 HMAC-SHA256 of the raw
body with the API secret; a wrong signature is rejected with 401. Unsigned
deliveries are accepted and logged, since the provider does not sign every
event type.
"""

import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.signature import verify_webhook_signature
from app.database import get_db
from app.schemas.transaction import WebhookPayload
from app.services import transaction_service
from app.services.kyc_service import apply_kyc_webhook

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("")
async def receive_webhook(request: Request, db: AsyncSession = Depends(get_db)):
    """
    Handle a provider event.

    1. Parse the JSON body (400 if invalid)
    2. Verify the signature if one was sent (401 if wrong)
    3. Dispatch on ``eventType``: ONRAMP upserts the transaction, KYC
       updates the user; anything else is logged
    """
    body = await request.body()
    try:
        payload = WebhookPayload.model_validate(json.loads(body))
    except (ValueError, PydanticValidationError):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid JSON payload",
        )

    signature = request.headers.get("signature")
    if signature:
        if not verify_webhook_signature(signature, body):
            logger.warning("Invalid webhook signature for %s event", payload.event_type)
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid signature",
            )
    else:
        logger.warning("Unsigned webhook for %s event", payload.event_type)

    logger.info(
        "Webhook %s status=%s reference=%s",
        payload.event_type, payload.status, payload.reference_id,
    )

    if payload.event_type == "ONRAMP":
        tx, changed = await transaction_service.apply_onramp_webhook(db, payload)
        return {"success": True, "status": tx.status.value, "changed": changed}

    if payload.event_type == "KYC":
        await apply_kyc_webhook(db, payload.status, payload.metadata)
    elif payload.event_type in ("OFFRAMP", "KYC_REDIRECT"):
        logger.info("%s webhook received: %s", payload.event_type, payload.status)
    else:
        logger.warning("Unhandled webhook event type %s", payload.event_type)

    return {"success": True}
