"""
Email Celery tasks — OTP and welcome emails are sent off the request path.
"""

import asyncio
import logging

from app.tasks.celery_app import celery_app
from app.services.email_service import email_service

logger = logging.getLogger(__name__)


@celery_app.task(name="app.tasks.email_tasks.send_verification_email")
def send_verification_email(email: str, otp: str):
    """Deliver a login OTP."""
    loop = asyncio.new_event_loop()
    try:
        result = loop.run_until_complete(email_service.send_verification_code(email, otp))
        logger.info("Verification email to %s: %s", email, result["status"])
        return result
    finally:
        loop.close()


@celery_app.task(name="app.tasks.email_tasks.send_welcome_email")
def send_welcome_email(email: str):
    """Greet a user after their first successful verification."""
    loop = asyncio.new_event_loop()
    try:
        result = loop.run_until_complete(email_service.send_welcome(email))
        logger.info("Welcome email to %s: %s", email, result["status"])
        return result
    finally:
        loop.close()
