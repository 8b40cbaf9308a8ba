"""
Ledgerline Backend — Transaction Service
==========================================

What:  SQL for creating, listing, updating and deleting transactions.
Who:   Called by app/routes/transactions.py and GET /accounts/{id}/transactions.
"""

import datetime
import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import insert, select

from app.database import Gateway
from app.exceptions import StoreError
from app.models import transactions
from app.schemas.transaction import TransactionDeleteResponse, TransactionResponse
from app.services.base import CrudService

logger = logging.getLogger(__name__)


class TransactionService(CrudService):
    table = transactions
    resource = "Transaction"

    async def list_account_transactions(
        self, gateway: Gateway, account_id: int
    ) -> List[TransactionResponse]:
        """An account's transactions ordered by date descending (id breaks ties)."""
        statement = (
            select(transactions)
            .where(transactions.c.account_id == account_id)
            .order_by(transactions.c.date.desc(), transactions.c.id.desc())
        )
        result = await self._run(
            gateway,
            statement,
            action="Fetch transactions",
            failure_message="Could not fetch transactions",
        )
        return [TransactionResponse.model_validate(row) for row in result.rows]

    async def create_transaction(
        self,
        gateway: Gateway,
        account_id: int,
        amount: Decimal,
        description: Optional[str] = None,
        category: Optional[str] = None,
        date: Optional[datetime.date] = None,
    ) -> TransactionResponse:
        """
        INSERT a transaction.

        Defaults: description "", category "", date null.
        An unknown account_id fails on the foreign key (→ 500).
        """
        statement = (
            insert(transactions)
            .values(
                account_id=account_id,
                amount=amount,
                description=description or "",
                category=category or "",
                date=date or None,
            )
            .returning(*transactions.c)
        )
        result = await self._run(
            gateway,
            statement,
            action="Create transaction",
            failure_message="Could not create transaction",
        )
        row = result.first()
        if row is None:
            raise StoreError(message="Could not create transaction")
        return TransactionResponse.model_validate(row)

    async def update_transaction(
        self, gateway: Gateway, transaction_id: int, changes: dict
    ) -> TransactionResponse:
        row = await self._update(gateway, transaction_id, changes)
        return TransactionResponse.model_validate(row)

    async def delete_transaction(
        self, gateway: Gateway, transaction_id: int
    ) -> TransactionDeleteResponse:
        row = await self._delete(gateway, transaction_id)
        return TransactionDeleteResponse(
            success=True, deleted=TransactionResponse.model_validate(row)
        )


# ── Singleton Instance ────────────────────────────────────────────────────
transaction_service = TransactionService()
