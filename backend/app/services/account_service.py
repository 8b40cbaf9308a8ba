"""
Ledgerline Backend — Account Service
======================================

What:  SQL for accounts, plus the two derived reads built on transactions:
       per-account cashflow and account details.
Who:   Called by app/routes/accounts.py and the GET /users/{id}/accounts route.

Cashflow:
    SELECT COALESCE(SUM(amount), 0) FROM transactions WHERE account_id = :id
    An account with no transactions (or an unknown id) has cashflow 0.

Details (two sequential reads, no transaction around them):
    1. SELECT the account          → NotFoundError if absent
    2. SELECT its transactions     → only issued when step 1 found the account
    Either read failing fails the whole request.
"""

import logging
from typing import List, Optional

from sqlalchemy import func, insert, select

from app.config import settings
from app.database import Gateway
from app.exceptions import NotFoundError, StoreError
from app.models import accounts, transactions
from app.schemas.account import (
    AccountDeleteResponse,
    AccountDetails,
    AccountResponse,
    AccountWithCashflow,
    CashflowResponse,
)
from app.services.base import CrudService

logger = logging.getLogger(__name__)


def _cashflow_column():
    return func.coalesce(func.sum(transactions.c.amount), 0).label("cashflow")


class AccountService(CrudService):
    table = accounts
    resource = "Account"

    async def list_accounts(self, gateway: Gateway) -> List[AccountResponse]:
        """All accounts ordered by id ascending."""
        result = await self._run(
            gateway,
            select(accounts).order_by(accounts.c.id.asc()),
            action="Fetch accounts",
            failure_message="Could not fetch accounts",
        )
        return [AccountResponse.model_validate(row) for row in result.rows]

    async def list_user_accounts(self, gateway: Gateway, user_id: int) -> List[AccountWithCashflow]:
        """
        A user's accounts, newest first, each with its cashflow.

        Query plan:
            SELECT a.*, COALESCE(SUM(t.amount), 0) AS cashflow
            FROM accounts a LEFT JOIN transactions t ON t.account_id = a.id
            WHERE a.user_id = :user_id GROUP BY a.id
            ORDER BY a.created_at DESC
        """
        statement = (
            select(accounts, _cashflow_column())
            .select_from(
                accounts.outerjoin(transactions, transactions.c.account_id == accounts.c.id)
            )
            .where(accounts.c.user_id == user_id)
            .group_by(accounts.c.id)
            .order_by(accounts.c.created_at.desc(), accounts.c.id.desc())
        )
        result = await self._run(
            gateway,
            statement,
            action="Fetch accounts",
            failure_message="Could not fetch accounts",
        )
        return [AccountWithCashflow.model_validate(row) for row in result.rows]

    async def create_account(
        self,
        gateway: Gateway,
        user_id: int,
        name: str,
        type: str,
        currency: Optional[str] = None,
    ) -> AccountResponse:
        """
        INSERT an account. No user lookup happens first: a missing user is a
        foreign-key violation in the store and ends as 500.
        """
        statement = (
            insert(accounts)
            .values(
                user_id=user_id,
                name=name,
                type=type,
                currency=currency or settings.default_currency,
            )
            .returning(*accounts.c)
        )
        result = await self._run(
            gateway,
            statement,
            action="Create account",
            failure_message="Could not create account",
        )
        row = result.first()
        if row is None:
            raise StoreError(message="Could not create account")
        return AccountResponse.model_validate(row)

    async def get_account_details(self, gateway: Gateway, account_id: int) -> AccountDetails:
        account_result = await self._run(
            gateway,
            select(accounts).where(accounts.c.id == account_id),
            action="Fetch account details",
            failure_message="Could not fetch account details",
        )
        account = account_result.first()
        if account is None:
            raise NotFoundError(resource="Account", resource_id=account_id)

        transactions_result = await self._run(
            gateway,
            select(transactions)
            .where(transactions.c.account_id == account_id)
            .order_by(transactions.c.date.desc(), transactions.c.id.desc()),
            action="Fetch account details",
            failure_message="Could not fetch account details",
        )
        return AccountDetails.model_validate(
            {**account, "transactions": transactions_result.rows}
        )

    async def get_cashflow(self, gateway: Gateway, account_id: int) -> CashflowResponse:
        result = await self._run(
            gateway,
            select(_cashflow_column()).where(transactions.c.account_id == account_id),
            action="Fetch cashflow",
            failure_message="Could not fetch cashflow",
        )
        row = result.first()
        cashflow = row["cashflow"] if row and row["cashflow"] is not None else 0
        return CashflowResponse(account_id=account_id, cashflow=cashflow)

    async def update_account(self, gateway: Gateway, account_id: int, changes: dict) -> AccountResponse:
        row = await self._update(gateway, account_id, changes)
        return AccountResponse.model_validate(row)

    async def delete_account(self, gateway: Gateway, account_id: int) -> AccountDeleteResponse:
        row = await self._delete(gateway, account_id)
        logger.info("Account %s deleted", account_id)
        return AccountDeleteResponse(success=True, deleted=AccountResponse.model_validate(row))


# ── Singleton Instance ────────────────────────────────────────────────────
account_service = AccountService()
