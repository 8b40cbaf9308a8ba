"""
Ledgerline Backend — User Model
=================================

What:  ORM model for the `users` table.
How:   Declares the columns and the UNIQUE constraint on email explicitly;
       services query the underlying `users` Table through the gateway.

Table Design:
    - id: serial integer, generated by the store
    - email: globally unique; a duplicate insert/update raises SQLSTATE 23505,
      which the user service reports as 409 Conflict
    - Accounts reference users with ON DELETE CASCADE
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class User(Base):
    """A person owning zero or more accounts."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(Text, nullable=False)

    email: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"


users = User.__table__
