"""create transactions table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision = "002"
down_revision = "001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    transactionstatus = sa.Enum(
        "pending", "payment_received", "trade_completed",
        "withdrawal_initiated", "completed", "failed",
        name="transactionstatus",
    )
    transactionstatus.create(op.get_bind(), checkfirst=True)

    transactiontype = sa.Enum("onramp", "offramp", name="transactiontype")
    transactiontype.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "transactions",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("reference_id", sa.String(100), unique=True, index=True, nullable=False),
        sa.Column(
            "user_id",
            UUID(as_uuid=True),
            sa.ForeignKey("users.id"),
            index=True,
            nullable=True,
        ),
        sa.Column("customer_id", sa.String(64), index=True, nullable=True),
        sa.Column("order_quote_id", sa.String(100), nullable=True),
        sa.Column("status", transactionstatus, server_default="pending", nullable=False),
        sa.Column("transaction_type", transactiontype, server_default="onramp", nullable=False),
        sa.Column("crypto_amount", sa.String(64), nullable=True),
        sa.Column("crypto_currency", sa.String(32), nullable=True),
        sa.Column("fiat_amount", sa.String(64), nullable=True),
        sa.Column("fiat_currency", sa.String(8), nullable=True),
        sa.Column("destination_wallet", sa.String(128), nullable=True),
        sa.Column("network_id", sa.String(64), nullable=True),
        sa.Column("payment_method", sa.String(64), nullable=True),
        sa.Column("fee_amount", sa.String(64), nullable=True),
        sa.Column("fee_currency", sa.String(32), nullable=True),
        sa.Column("tx_hash", sa.String(128), nullable=True),
        sa.Column("fail_reason", sa.String(500), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
    )


def downgrade() -> None:
    op.drop_table("transactions")

    sa.Enum(name="transactiontype").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="transactionstatus").drop(op.get_bind(), checkfirst=True)
