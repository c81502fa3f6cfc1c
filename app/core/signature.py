"""
HMAC signing for the exchange provider API.

Outgoing requests carry a ``signature`` header: hex HMAC-SHA256 over the
uppercased HTTP method followed by the request path. Incoming webhooks are
signed with base64 HMAC-SHA256 over the raw body, using the same secret.
"""

import base64
import hashlib
import hmac

from app.config import settings
from app.core.exceptions import ConfigurationError


def _secret(secret: str | None) -> bytes:
    value = secret if secret is not None else settings.EXCHANGE_API_SECRET_KEY
    if not value:
        raise ConfigurationError("EXCHANGE_API_SECRET_KEY is not set")
    return value.encode()


def generate_signature(method: str, path: str, secret: str | None = None) -> str:
    """Return the hex HMAC-SHA256 of ``METHOD + path``."""
    message = f"{method.upper()}{path}".encode()
    return hmac.new(_secret(secret), message, hashlib.sha256).hexdigest()


def verify_webhook_signature(
    signature: str, body: bytes, secret: str | None = None
) -> bool:
    """Check a webhook ``signature`` header against the raw request body."""
    expected = base64.b64encode(
        hmac.new(_secret(secret), body, hashlib.sha256).digest()
    ).decode()
    return hmac.compare_digest(expected.encode(), signature.encode())
