"""create catalog tables

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

revision = "003"
down_revision = "002"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "countries",
        sa.Column("id", sa.String(8), primary_key=True),
        sa.Column("states", JSONB, nullable=True),
    )

    op.create_table(
        "payment_methods",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("on_ramp_supported", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("off_ramp_supported", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("available_fiat_currencies", JSONB, server_default="[]", nullable=False),
        sa.Column("available_countries", JSONB, server_default="[]", nullable=False),
    )
    # Country filter uses JSONB containment
    op.create_index(
        "ix_payment_methods_available_countries",
        "payment_methods",
        ["available_countries"],
        postgresql_using="gin",
    )

    op.create_table(
        "crypto_assets",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("on_ramp_supported", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("off_ramp_supported", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("address", sa.String(128), nullable=True),
        sa.Column("network", sa.String(64), nullable=True),
        sa.Column("chain", sa.String(64), nullable=True),
        sa.Column("payment_limits", JSONB, server_default="[]", nullable=False),
    )


def downgrade() -> None:
    op.drop_table("crypto_assets")
    op.drop_index("ix_payment_methods_available_countries", table_name="payment_methods")
    op.drop_table("payment_methods")
    op.drop_table("countries")
