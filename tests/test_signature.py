"""Tests for request and webhook HMAC signatures."""

import base64
import hashlib
import hmac

import pytest

from app.config import settings
from app.core.exceptions import ConfigurationError
from app.core.signature import generate_signature, verify_webhook_signature


def test_signature_is_hex_hmac_of_method_and_path():
    expected = hmac.new(b"s3cret", b"POST/v1/external/quotes", hashlib.sha256).hexdigest()
    assert generate_signature("POST", "/v1/external/quotes", secret="s3cret") == expected


def test_signature_is_deterministic():
    a = generate_signature("GET", "/v1/external/allConfigs", secret="s3cret")
    b = generate_signature("GET", "/v1/external/allConfigs", secret="s3cret")
    assert a == b


def test_method_is_uppercased():
    assert generate_signature("get", "/x", secret="k") == generate_signature("GET", "/x", secret="k")


def test_signature_depends_on_path_and_secret():
    base = generate_signature("GET", "/a", secret="k")
    assert generate_signature("GET", "/b", secret="k") != base
    assert generate_signature("GET", "/a", secret="other") != base


def test_defaults_to_configured_secret():
    assert generate_signature("GET", "/a") == generate_signature(
        "GET", "/a", secret=settings.EXCHANGE_API_SECRET_KEY,
    )


def test_missing_secret_is_configuration_error(monkeypatch):
    monkeypatch.setattr(settings, "EXCHANGE_API_SECRET_KEY", "")
    with pytest.raises(ConfigurationError):
        generate_signature("GET", "/a")


def _webhook_signature(body: bytes, secret: str) -> str:
    return base64.b64encode(hmac.new(secret.encode(), body, hashlib.sha256).digest()).decode()


def test_webhook_signature_accepts_matching_body():
    body = b'{"eventType":"ONRAMP"}'
    assert verify_webhook_signature(_webhook_signature(body, "k"), body, secret="k")


def test_webhook_signature_rejects_tampered_body():
    signature = _webhook_signature(b'{"status":"FAILED"}', "k")
    assert not verify_webhook_signature(signature, b'{"status":"ON_CHAIN_COMPLETED"}', secret="k")
