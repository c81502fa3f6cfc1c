"""
KYC service — hosted verification widget, status refresh, and KYC webhooks.

Flow:
  1. ``start_kyc``       — get a widget URL for a level, remember the submission
  2. the user completes the provider-hosted widget
  3. ``refresh_kyc_status`` or a KYC webhook updates the stored status/level
"""

from __future__ import annotations

import logging
import re

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import ValidationError
from app.models.user import KYCStatus, User
from app.services.exchange_client import ExchangeClient, require_field

logger = logging.getLogger(__name__)

# Provider submission status -> local status (status refresh endpoint)
SUBMISSION_STATUS_MAP: dict[str, KYCStatus] = {
    "CREATED": KYCStatus.PENDING,
    "SUBMITTED": KYCStatus.PENDING,
    "COMPLETED": KYCStatus.COMPLETED,
    "REJECTED": KYCStatus.FAILED,
    "UPDATE_REQUIRED": KYCStatus.UPDATE_REQUIRED,
}

# Provider status -> local status (KYC webhooks)
WEBHOOK_KYC_STATUS_MAP: dict[str, KYCStatus] = {
    "COMPLETED": KYCStatus.COMPLETED,
    "FAILED": KYCStatus.FAILED,
    "IN_REVIEW": KYCStatus.PENDING,
    "UPDATE_REQUIRED": KYCStatus.UPDATE_REQUIRED,
}

AUTH_TOKEN_PATH = "/v1/external/auth-token"

_LEVEL_PARAM_RE = re.compile(r"ucLevel=Level\+\d+")


def parse_level_number(level_name: str | None) -> int:
    """``"Level 2"`` -> 2; anything unparseable -> 0."""
    if not level_name:
        return 0
    match = re.search(r"\d+", level_name)
    return int(match.group()) if match else 0


class KYCService:
    """KYC operations for one signed-in user."""

    def __init__(self, client: ExchangeClient, db: AsyncSession):
        self.client = client
        self.db = db

    @staticmethod
    def _require_customer(user: User) -> str:
        if not user.customer_id:
            raise ValidationError(
                "Customer profile not found. Please create a customer profile first."
            )
        return user.customer_id

    async def start_kyc(self, user: User, level: int) -> dict:
        """
        Build the hosted widget URL for *level* and record the submission.

        Returns ``{"url", "submissionId"}``.
        """
        customer_id = self._require_customer(user)
        widget_path = f"/v1/external/customers/{customer_id}/kyc/widgetUrl"
        widget = await self.client.request(
            "POST",
            widget_path,
            {
                "SuccessUrl": f"{settings.PUBLIC_BASE_URL}/profile",
                "CancelUrl": f"{settings.PUBLIC_BASE_URL}/profile",
            },
        )
        kyc_url = require_field(widget, "kycUrl", widget_path)
        submission_id = require_field(widget, "submissionId", widget_path)

        auth = await self.client.request(
            "POST", AUTH_TOKEN_PATH, params={"customerId": customer_id},
        )
        token = require_field(auth, "authToken", AUTH_TOKEN_PATH)

        kyc_url = _LEVEL_PARAM_RE.sub(f"ucLevel=Level+{level}", kyc_url)
        separator = "&" if "?" in kyc_url else "?"
        full_url = f"{kyc_url}{separator}ucToken={token}"

        user.kyc_submission_id = submission_id
        user.kyc_status = KYCStatus.PENDING
        await self.db.flush()

        logger.info(
            "KYC widget issued for customer %s (level %d, submission %s)",
            customer_id, level, user.kyc_submission_id,
        )
        return {"url": full_url, "submissionId": user.kyc_submission_id}

    async def refresh_kyc_status(self, user: User, for_level: int | None = None) -> dict:
        """
        Pull the submission status from the provider and store it.

        With *for_level*, a user whose current level is below it is told to
        complete that level first and nothing is stored.
        """
        customer_id = self._require_customer(user)
        if not user.kyc_submission_id:
            raise ValidationError(
                "No KYC submission found. Please complete KYC verification first."
            )

        data = await self.client.request(
            "GET",
            f"/v1/external/customers/{customer_id}/kyc/{user.kyc_submission_id}/status",
        )
        upstream_status = data.get("status", "")
        kyc_status = SUBMISSION_STATUS_MAP.get(upstream_status)
        if kyc_status is None:
            logger.warning("Unknown KYC submission status %r for %s", upstream_status, customer_id)
            kyc_status = KYCStatus.PENDING

        level_name = (
            ((data.get("kyc") or {}).get("current") or {}).get("levelName") or "Level 1"
        )

        if for_level and parse_level_number(level_name) < for_level:
            return {
                "success": False,
                "message": f"You need to complete Level {for_level} verification first.",
            }

        user.kyc_status = kyc_status
        user.kyc_level = level_name
        await self.db.flush()

        logger.info("KYC status for %s: %s (%s)", customer_id, kyc_status.value, level_name)
        return {
            "success": True,
            "message": "KYC status refreshed successfully",
            "kycLevel": level_name,
            "kycStatus": kyc_status.value,
        }


async def apply_kyc_webhook(
    db: AsyncSession,
    status: str,
    metadata: dict,
) -> User | None:
    """
    Update the user named by ``metadata.customerId`` from a KYC webhook.

    Returns None (after logging) when the payload is incomplete or the
    customer is unknown; webhooks are acknowledged either way.
    """
    customer_id = metadata.get("customerId")
    if not customer_id:
        logger.error("KYC webhook without customerId: %s", metadata)
        return None

    result = await db.execute(select(User).where(User.customer_id == customer_id))
    user = result.scalar_one_or_none()
    if user is None:
        logger.error("KYC webhook for unknown customer %s", customer_id)
        return None

    user.kyc_status = WEBHOOK_KYC_STATUS_MAP.get(status, KYCStatus.PENDING)
    levels = metadata.get("kycLevel") or []
    if levels:
        user.kyc_level = levels[0]
    if metadata.get("reason"):
        user.kyc_status_reason = metadata["reason"]
    await db.flush()

    logger.info("KYC webhook: customer %s -> %s", customer_id, user.kyc_status.value)
    return user

