"""
Ledgerline Backend — Account Model
====================================

What:  ORM model for the `accounts` table.

Table Design:
    - user_id: required, FK to users(id). The application never checks that
      the user exists; the store's constraint rejects the insert (SQLSTATE
      23503) and the request fails with 500.
    - type: free-form ("chequing", "credit", ...)
    - currency: defaults to 'CAD' at the store level as well as in the service
    - created_at: orders the per-user account listing (newest first)
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, func, text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Account(Base):
    """A named money container (bank account, card, wallet) owned by one user."""

    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    name: Mapped[str] = mapped_column(Text, nullable=False)

    type: Mapped[str] = mapped_column(Text, nullable=False)

    currency: Mapped[str] = mapped_column(
        String(3),
        nullable=False,
        server_default=text("'CAD'"),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        Index("idx_accounts_user_id", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<Account(id={self.id}, user_id={self.user_id}, name='{self.name}')>"


accounts = Account.__table__
