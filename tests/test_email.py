"""Tests for the email service and its Celery tasks."""

import json

import httpx
import pytest

from app.config import settings
from app.services.email_service import EmailService
from app.tasks import email_tasks


@pytest.mark.asyncio
async def test_mock_mode_sends_nothing(monkeypatch):
    monkeypatch.setattr(settings, "EMAIL_MOCK", True)
    seen = []
    service = EmailService(transport=httpx.MockTransport(lambda r: seen.append(r)))

    result = await service.send_verification_code("jane@example.com", "123456")

    assert result == {"to": "jane@example.com", "status": "mocked"}
    assert seen == []


@pytest.mark.asyncio
async def test_sendgrid_delivery(monkeypatch):
    monkeypatch.setattr(settings, "EMAIL_MOCK", False)
    monkeypatch.setattr(settings, "SENDGRID_API_KEY", "sg-key")
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(202)

    service = EmailService(transport=httpx.MockTransport(handler))
    result = await service.send_verification_code("jane@example.com", "123456")

    assert result["status"] == "sent"
    assert seen[0].headers["authorization"] == "Bearer sg-key"
    body = json.loads(seen[0].content)
    assert body["personalizations"][0]["to"] == [{"email": "jane@example.com"}]
    assert "123456" in body["content"][0]["value"]


@pytest.mark.asyncio
async def test_sendgrid_rejection_reported(monkeypatch):
    monkeypatch.setattr(settings, "EMAIL_MOCK", False)
    service = EmailService(transport=httpx.MockTransport(lambda r: httpx.Response(401)))

    result = await service.send_welcome("jane@example.com")

    assert result["status"] == "failed"


@pytest.mark.asyncio
async def test_sendgrid_unreachable_reported(monkeypatch):
    monkeypatch.setattr(settings, "EMAIL_MOCK", False)

    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    service = EmailService(transport=httpx.MockTransport(handler))
    result = await service.send_welcome("jane@example.com")

    assert result["status"] == "failed"


def test_verification_task_runs_inline(monkeypatch):
    monkeypatch.setattr(settings, "EMAIL_MOCK", True)

    result = email_tasks.send_verification_email.run("jane@example.com", "123456")

    assert result == {"to": "jane@example.com", "status": "mocked"}


def test_welcome_task_runs_inline(monkeypatch):
    monkeypatch.setattr(settings, "EMAIL_MOCK", True)

    result = email_tasks.send_welcome_email.run("jane@example.com")

    assert result["status"] == "mocked"
