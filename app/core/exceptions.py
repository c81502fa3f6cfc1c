"""
Application exception hierarchy.

Every error that can cross a request boundary carries its HTTP status,
a human-readable message, a machine code, and optional details. The
handlers registered in ``app.main`` turn these into JSON error bodies.
"""

from typing import Any

from fastapi import status


class AppError(Exception):
    """Base class for all application errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "internal_error"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"detail": self.message, "code": self.code}
        body.update(self.details)
        return body


class ConfigurationError(AppError):
    """A required secret or setting is missing."""

    code = "configuration_error"


class ValidationError(AppError):
    """Request data is missing or invalid."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "authentication_error"


class PermissionDeniedError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "permission_denied"


class ExchangeAPIError(AppError):
    """
    The exchange provider answered with a non-2xx status.

    ``upstream_status`` keeps the provider's status; the local status is
    400 for provider-side 4xx (the request was rejected) and 502 otherwise.
    ``error_code``, ``error_message`` and ``error_metadata`` mirror the
    provider's structured error body when it sends one.
    """

    code = "exchange_api_error"

    def __init__(
        self,
        message: str,
        upstream_status: int,
        error_code: int | str | None = None,
        error_message: str | None = None,
        error_metadata: Any = None,
    ):
        self.upstream_status = upstream_status
        self.error_code = error_code
        self.error_message = error_message
        self.error_metadata = error_metadata
        super().__init__(
            message,
            details={
                "upstream_status": upstream_status,
                "error_code": error_code,
                "error_metadata": error_metadata,
            },
        )

    @property
    def status_code(self) -> int:  # type: ignore[override]
        if 400 <= self.upstream_status < 500:
            return status.HTTP_400_BAD_REQUEST
        return status.HTTP_502_BAD_GATEWAY


class ExchangeUnavailableError(AppError):
    """The exchange provider could not be reached."""

    status_code = status.HTTP_502_BAD_GATEWAY
    code = "exchange_unavailable"
