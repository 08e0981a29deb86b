"""
nuggies.database.models — SQLAlchemy 2.0 Data Models
=====================================================

Tables:
- users — one nugget account per Discord member (snowflake PK)

Rows are created by the first daily claim and never deleted by the bot.
"""

from __future__ import annotations

from datetime import date

from sqlalchemy import BigInteger, CheckConstraint, Date
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------
class Base(DeclarativeBase):
    """Shared base for all Nuggies ORM models."""


# ---------------------------------------------------------------------------
# Accounts — one row per Discord member
# ---------------------------------------------------------------------------
class Account(Base):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("balance >= 0", name="ck_users_balance_non_negative"),
    )

    # Snowflakes are unsigned 64-bit but stay below 2**63 until about 2084,
    # so a signed BIGINT holds every real Discord ID.
    user_id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    balance: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    # Calendar day in the configured reference zone, not a UTC timestamp
    last_claim_date: Mapped[date | None] = mapped_column(Date, default=None)

    def __repr__(self) -> str:
        return (
            f"<Account user_id={self.user_id} balance={self.balance} "
            f"last_claim_date={self.last_claim_date}>"
        )
