"""SQLAlchemy ORM models for CryptoRamp."""

from app.models.user import User, KYCStatus, UserRole
from app.models.transaction import Transaction, TransactionStatus, TransactionType
from app.models.catalog import Country, CryptoAsset, PaymentMethod

__all__ = [
    "User", "KYCStatus", "UserRole",
    "Transaction", "TransactionStatus", "TransactionType",
    "Country", "CryptoAsset", "PaymentMethod",
]
