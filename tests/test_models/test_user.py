"""Tests for the User model — defaults and admin role assignment."""

from app.config import settings
from app.models.user import KYCStatus, User, UserRole


def test_defaults():
    user = User(email="jane@example.com")
    assert user.id is not None
    assert user.is_verified is False
    assert user.role == UserRole.USER
    assert user.kyc_status == KYCStatus.NONE
    assert not user.is_admin


def test_role_for_listed_email_is_admin(monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_EMAILS", ["Ops@Example.com"])
    assert User.role_for_email("ops@example.com") == UserRole.ADMIN
    assert User.role_for_email("jane@example.com") == UserRole.USER


def test_is_admin():
    assert User(email="ops@example.com", role=UserRole.ADMIN).is_admin
