"""
Transaction status model — the local view of an exchange transaction.

Rows are created and advanced by provider webhooks, keyed by the
provider's reference id. The lifecycle only moves forward:

    pending -> payment_received -> trade_completed
            -> withdrawal_initiated -> completed

and any non-terminal state may drop to ``failed``. ``completed`` and
``failed`` are terminal.
"""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, String, Enum as SAEnum, event
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base, enum_values

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class TransactionType(str, enum.Enum):
    ONRAMP = "onramp"
    OFFRAMP = "offramp"


class TransactionStatus(str, enum.Enum):
    PENDING = "pending"
    PAYMENT_RECEIVED = "payment_received"
    TRADE_COMPLETED = "trade_completed"
    WITHDRAWAL_INITIATED = "withdrawal_initiated"
    COMPLETED = "completed"
    FAILED = "failed"


# Position in the forward sequence; failed sits outside it
LIFECYCLE_ORDER: dict[TransactionStatus, int] = {
    TransactionStatus.PENDING: 0,
    TransactionStatus.PAYMENT_RECEIVED: 1,
    TransactionStatus.TRADE_COMPLETED: 2,
    TransactionStatus.WITHDRAWAL_INITIATED: 3,
    TransactionStatus.COMPLETED: 4,
}

TERMINAL_STATUSES = frozenset({TransactionStatus.COMPLETED, TransactionStatus.FAILED})

# Provider webhook status -> local status
WEBHOOK_STATUS_MAP: dict[str, TransactionStatus] = {
    "FIAT_DEPOSIT_RECEIVED": TransactionStatus.PAYMENT_RECEIVED,
    "TRADE_COMPLETED": TransactionStatus.TRADE_COMPLETED,
    "ON_CHAIN_INITIATED": TransactionStatus.WITHDRAWAL_INITIATED,
    "ON_CHAIN_COMPLETED": TransactionStatus.COMPLETED,
    "FAILED": TransactionStatus.FAILED,
}


# ---------------------------------------------------------------------------
# Model
# ---------------------------------------------------------------------------


class Transaction(Base):
    __tablename__ = "transactions"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    reference_id: Mapped[str] = mapped_column(
        String(100), unique=True, index=True, nullable=False,
    )

    # Owners (either may be unknown when the webhook arrives)
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=True, index=True,
    )
    customer_id: Mapped[str | None] = mapped_column(String(64), index=True)
    order_quote_id: Mapped[str | None] = mapped_column(String(100))

    status: Mapped[TransactionStatus] = mapped_column(
        SAEnum(TransactionStatus, name="transactionstatus", values_callable=enum_values),
        default=TransactionStatus.PENDING,
    )
    transaction_type: Mapped[TransactionType] = mapped_column(
        SAEnum(TransactionType, name="transactiontype", values_callable=enum_values),
        default=TransactionType.ONRAMP,
    )

    # Amounts are kept as the provider's decimal strings
    crypto_amount: Mapped[str | None] = mapped_column(String(64))
    crypto_currency: Mapped[str | None] = mapped_column(String(32))
    fiat_amount: Mapped[str | None] = mapped_column(String(64))
    fiat_currency: Mapped[str | None] = mapped_column(String(8))
    destination_wallet: Mapped[str | None] = mapped_column(String(128))
    network_id: Mapped[str | None] = mapped_column(String(64))
    payment_method: Mapped[str | None] = mapped_column(String(64))

    fee_amount: Mapped[str | None] = mapped_column(String(64))
    fee_currency: Mapped[str | None] = mapped_column(String(32))

    tx_hash: Mapped[str | None] = mapped_column(String(128))
    fail_reason: Mapped[str | None] = mapped_column(String(500))

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @staticmethod
    def can_advance(from_status: TransactionStatus, to_status: TransactionStatus) -> bool:
        """
        True if moving from *from_status* to *to_status* goes forward.

        Terminal states never move. ``failed`` is reachable from any
        non-terminal state. Otherwise the target must sit later in the
        sequence; intermediate steps may be skipped when webhooks are lost.
        """
        if from_status in TERMINAL_STATUSES:
            return False
        if to_status == TransactionStatus.FAILED:
            return True
        return LIFECYCLE_ORDER[to_status] > LIFECYCLE_ORDER[from_status]

    def advance_to(self, new_status: TransactionStatus) -> bool:
        """
        Move to *new_status* if allowed. Returns False (and changes nothing)
        for stale or repeated events.
        """
        if not self.can_advance(self.status, new_status):
            return False
        self.status = new_status
        now = datetime.now(timezone.utc)
        self.updated_at = now
        if new_status == TransactionStatus.COMPLETED:
            self.completed_at = now
        return True

    @property
    def step(self) -> int:
        """Progress step 1-4 for onramp display; 0 for pending/failed."""
        if self.status == TransactionStatus.FAILED:
            return 0
        return LIFECYCLE_ORDER[self.status]

    def __repr__(self) -> str:
        return (
            f"<Transaction {self.reference_id} "
            f"status={self.status.value if self.status else 'N/A'}>"
        )


@event.listens_for(Transaction, "init")
def _set_transaction_defaults(target, args, kwargs):
    if "id" not in kwargs:
        target.id = uuid.uuid4()
    if "status" not in kwargs:
        target.status = TransactionStatus.PENDING
    if "transaction_type" not in kwargs:
        target.transaction_type = TransactionType.ONRAMP
    if "created_at" not in kwargs:
        target.created_at = datetime.now(timezone.utc)
    if "updated_at" not in kwargs:
        target.updated_at = datetime.now(timezone.utc)
