"""
Email service — OTP and welcome emails via SendGrid.

With EMAIL_MOCK=true (the default) nothing leaves the process: the
message is logged and reported as ``mocked``. Set EMAIL_MOCK=false and
SENDGRID_API_KEY to deliver for real.
"""

import logging

import httpx

from app.config import settings

logger = logging.getLogger(__name__)


class EmailService:
    """Delivers transactional emails through the SendGrid v3 API."""

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None):
        self.api_url = settings.SENDGRID_API_URL
        self.api_key = settings.SENDGRID_API_KEY
        self.from_email = settings.SENDGRID_FROM_EMAIL
        self._transport = transport

    async def send(self, to: str, subject: str, text: str) -> dict:
        if settings.EMAIL_MOCK:
            if settings.is_production:
                logger.info("Email (mock) to %s: %s", to, subject)
            else:
                logger.info("Email (mock) to %s: %s\n%s", to, subject, text)
            return {"to": to, "status": "mocked"}

        payload = {
            "personalizations": [{"to": [{"email": to}]}],
            "from": {"email": self.from_email},
            "subject": subject,
            "content": [{"type": "text/plain", "value": text}],
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        try:
            async with httpx.AsyncClient(timeout=30, transport=self._transport) as client:
                resp = await client.post(self.api_url, json=payload, headers=headers)
                resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error("SendGrid rejected email to %s: %s", to, exc.response.status_code)
            return {"to": to, "status": "failed"}
        except httpx.RequestError as exc:
            logger.error("SendGrid request error for %s: %s", to, exc)
            return {"to": to, "status": "failed"}

        logger.info("Email sent to %s: %s", to, subject)
        return {"to": to, "status": "sent"}

    async def send_verification_code(self, email: str, otp: str) -> dict:
        minutes = settings.OTP_EXPIRE_SECONDS // 60
        return await self.send(
            email,
            f"Your {settings.APP_NAME} verification code",
            f"Your verification code is {otp}. It expires in {minutes} minutes.",
        )

    async def send_welcome(self, email: str) -> dict:
        return await self.send(
            email,
            f"Welcome to {settings.APP_NAME}",
            "Your email is verified. You can now buy and sell crypto.",
        )


email_service = EmailService()
