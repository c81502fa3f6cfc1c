"""create users table

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

# revision identifiers, used by Alembic
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    userrole = sa.Enum("user", "admin", name="userrole")
    userrole.create(op.get_bind(), checkfirst=True)

    kycstatus = sa.Enum(
        "NONE", "IN_REVIEW", "PENDING", "COMPLETED", "UPDATE_REQUIRED", "FAILED",
        name="kycstatus",
    )
    kycstatus.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(254), unique=True, index=True, nullable=False),
        sa.Column("first_name", sa.String(100), nullable=True),
        sa.Column("last_name", sa.String(100), nullable=True),
        sa.Column("is_verified", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("role", userrole, server_default="user", nullable=False),
        sa.Column("customer_id", sa.String(64), unique=True, index=True, nullable=True),
        sa.Column("kyc_status", kycstatus, server_default="NONE", nullable=False),
        sa.Column("kyc_level", sa.String(50), nullable=True),
        sa.Column("kyc_submission_id", sa.String(64), nullable=True),
        sa.Column("kyc_status_reason", sa.String(500), nullable=True),
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
    )


def downgrade() -> None:
    op.drop_table("users")

    sa.Enum(name="kycstatus").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="userrole").drop(op.get_bind(), checkfirst=True)
