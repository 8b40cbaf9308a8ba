"""
Ledgerline Backend — Transaction Model
========================================

What:  ORM model for the `transactions` table.

Table Design:
    - amount: signed NUMERIC(14, 2). Positive = inflow, negative = outflow.
      An account's cashflow is SUM(amount) over its rows (0 when none).
    - description / category: NOT NULL, default ''
    - date: nullable calendar date; listings order by it descending
"""

import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, DateTime, ForeignKey, Index, Integer, Numeric, Text, func, text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Transaction(Base):
    """One signed money movement on an account."""

    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    account_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
    )

    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)

    description: Mapped[str] = mapped_column(
        Text, nullable=False, default="", server_default=text("''")
    )

    category: Mapped[str] = mapped_column(
        Text, nullable=False, default="", server_default=text("''")
    )

    date: Mapped[Optional[datetime.date]] = mapped_column(Date, nullable=True)

    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    # Account transaction listings: WHERE account_id = ? ORDER BY date DESC
    __table_args__ = (
        Index("idx_transactions_account_date", "account_id", "date"),
    )

    def __repr__(self) -> str:
        return f"<Transaction(id={self.id}, account_id={self.account_id}, amount={self.amount})>"


transactions = Transaction.__table__
