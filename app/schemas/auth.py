"""
Pydantic schemas for email/OTP login and the session user.
"""

from pydantic import Field

from app.schemas.base import CamelModel


class LoginRequest(CamelModel):
    email: str = Field("", examples=["jane@example.com"])


class VerifyRequest(CamelModel):
    email: str = Field("", examples=["jane@example.com"])
    otp: str = Field("", examples=["123456"])


class SessionUser(CamelModel):
    """What the session cookie says about the caller."""
    email: str
    is_verified: bool
    role: str = "user"


class SuccessResponse(CamelModel):
    success: bool = True
    message: str | None = None
