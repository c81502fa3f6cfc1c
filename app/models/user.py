"""
User model — an email-identified account on the widget.

- Email + OTP login; ``is_verified`` flips on the first successful OTP
- ``customer_id`` links the account to the exchange provider's customer
- KYC status/level mirror what the provider reports
"""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, String, Enum as SAEnum, event
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.config import settings
from app.database import Base, enum_values


class KYCStatus(str, enum.Enum):
    NONE = "NONE"
    IN_REVIEW = "IN_REVIEW"
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    UPDATE_REQUIRED = "UPDATE_REQUIRED"
    FAILED = "FAILED"


class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    email: Mapped[str] = mapped_column(String(254), unique=True, index=True, nullable=False)
    first_name: Mapped[str | None] = mapped_column(String(100))
    last_name: Mapped[str | None] = mapped_column(String(100))
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False)
    role: Mapped[UserRole] = mapped_column(
        SAEnum(UserRole, name="userrole", values_callable=enum_values), default=UserRole.USER,
    )

    # Exchange provider link
    customer_id: Mapped[str | None] = mapped_column(String(64), unique=True, index=True)

    # KYC
    kyc_status: Mapped[KYCStatus] = mapped_column(
        SAEnum(KYCStatus, name="kycstatus", values_callable=enum_values), default=KYCStatus.NONE,
    )
    kyc_level: Mapped[str | None] = mapped_column(String(50))
    kyc_submission_id: Mapped[str | None] = mapped_column(String(64))
    kyc_status_reason: Mapped[str | None] = mapped_column(String(500))

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @staticmethod
    def role_for_email(email: str) -> UserRole:
        """Admins are configured by email in ADMIN_EMAILS."""
        admins = {e.lower() for e in settings.ADMIN_EMAILS}
        return UserRole.ADMIN if email.lower() in admins else UserRole.USER

    def __repr__(self) -> str:
        return f"<User {self.email} verified={self.is_verified}>"


@event.listens_for(User, "init")
def _set_user_defaults(target, args, kwargs):
    if "id" not in kwargs:
        target.id = uuid.uuid4()
    if "is_verified" not in kwargs:
        target.is_verified = False
    if "role" not in kwargs:
        target.role = UserRole.USER
    if "kyc_status" not in kwargs:
        target.kyc_status = KYCStatus.NONE
    if "created_at" not in kwargs:
        target.created_at = datetime.now(timezone.utc)
    if "updated_at" not in kwargs:
        target.updated_at = datetime.now(timezone.utc)
