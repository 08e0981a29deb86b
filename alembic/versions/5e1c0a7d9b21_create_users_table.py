"""Create users table

Revision ID: 5e1c0a7d9b21
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "5e1c0a7d9b21"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """One nugget account per Discord member."""
    # Databases bootstrapped by init_db already have the table
    if sa.inspect(op.get_bind()).has_table("users"):
        return
    op.create_table(
        "users",
        sa.Column("user_id", sa.BigInteger(), primary_key=True, autoincrement=False),
        sa.Column("balance", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("last_claim_date", sa.Date(), nullable=True),
        sa.CheckConstraint("balance >= 0", name="ck_users_balance_non_negative"),
    )


def downgrade() -> None:
    op.drop_table("users")
