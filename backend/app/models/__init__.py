# Models package init
"""
Importing this package registers every table on `Base.metadata`
(used by Alembic autogenerate and `Gateway.create_schema()`).
"""

from app.models.user import User, users
from app.models.account import Account, accounts
from app.models.transaction import Transaction, transactions

__all__ = ["User", "Account", "Transaction", "users", "accounts", "transactions"]
