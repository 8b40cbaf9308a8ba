"""
Ledgerline Backend — Service Unit Tests
=========================================

What:  Tests for the per-resource services with a mocked gateway.
How:   The gateway's execute() is an AsyncMock returning QueryResult objects
       or raising StoreError (no real DB).

What we test:
    ✅ Unique violation on user create/update → ConflictError
    ✅ Other store failures → StoreError with the operation's message
    ✅ Update/delete of an absent id → NotFoundError
    ✅ Account details: 404 without issuing the transactions query
    ✅ Cashflow: numeric value, 0 when there are no transactions
    ✅ Account creation defaults currency to CAD
"""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from app.database import QueryResult
from app.exceptions import (
    FOREIGN_KEY_VIOLATION,
    UNIQUE_VIOLATION,
    ConflictError,
    NotFoundError,
    StoreError,
)
from app.services.account_service import AccountService
from app.services.transaction_service import TransactionService
from app.services.user_service import UserService


class TestUserService:

    def setup_method(self):
        self.service = UserService()

    @pytest.mark.asyncio
    async def test_create_user_returns_record(self, mock_gateway, sample_user_row):
        mock_gateway.execute.return_value = QueryResult(rows=[sample_user_row], row_count=1)

        user = await self.service.create_user(mock_gateway, name="Ada", email="ada@example.com")

        assert user.id == 1
        assert user.email == "ada@example.com"
        mock_gateway.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_create_user_duplicate_email_is_conflict(self, mock_gateway):
        mock_gateway.execute = AsyncMock(side_effect=StoreError(code=UNIQUE_VIOLATION))

        with pytest.raises(ConflictError) as exc_info:
            await self.service.create_user(mock_gateway, name="Ada", email="ada@example.com")

        assert exc_info.value.message == "Email already exists"

    @pytest.mark.asyncio
    async def test_create_user_other_failure_is_store_error(self, mock_gateway):
        mock_gateway.execute = AsyncMock(side_effect=StoreError(code="08006"))

        with pytest.raises(StoreError) as exc_info:
            await self.service.create_user(mock_gateway, name="Ada", email="ada@example.com")

        assert exc_info.value.code == "08006"
        assert exc_info.value.message == "Server error"

    @pytest.mark.asyncio
    async def test_list_users(self, mock_gateway, sample_user_row):
        mock_gateway.execute.return_value = QueryResult(rows=[sample_user_row], row_count=1)

        result = await self.service.list_users(mock_gateway)

        assert [u.id for u in result] == [1]

    @pytest.mark.asyncio
    async def test_list_users_failure_message(self, mock_gateway):
        mock_gateway.execute = AsyncMock(side_effect=StoreError())

        with pytest.raises(StoreError) as exc_info:
            await self.service.list_users(mock_gateway)

        assert exc_info.value.message == "Could not fetch users"

    @pytest.mark.asyncio
    async def test_update_missing_user_is_not_found(self, mock_gateway):
        mock_gateway.execute.return_value = QueryResult(rows=[], row_count=0)

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.update_user(mock_gateway, 42, {"name": "New"})

        assert exc_info.value.message == "User not found"

    @pytest.mark.asyncio
    async def test_update_user_email_clash_is_conflict(self, mock_gateway):
        mock_gateway.execute = AsyncMock(side_effect=StoreError(code=UNIQUE_VIOLATION))

        with pytest.raises(ConflictError):
            await self.service.update_user(mock_gateway, 1, {"email": "taken@example.com"})

    @pytest.mark.asyncio
    async def test_delete_user_wraps_deleted_record(self, mock_gateway, sample_user_row):
        mock_gateway.execute.return_value = QueryResult(rows=[sample_user_row], row_count=1)

        result = await self.service.delete_user(mock_gateway, 1)

        assert result.success is True
        assert result.deleted.id == 1


class TestAccountService:

    def setup_method(self):
        self.service = AccountService()

    @pytest.mark.asyncio
    async def test_details_not_found_skips_transactions_query(self, mock_gateway):
        mock_gateway.execute.return_value = QueryResult(rows=[], row_count=0)

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.get_account_details(mock_gateway, 10)

        assert exc_info.value.message == "Account not found"
        assert mock_gateway.execute.await_count == 1

    @pytest.mark.asyncio
    async def test_details_merges_transactions(
        self, mock_gateway, sample_account_row, sample_transaction_row
    ):
        mock_gateway.execute = AsyncMock(side_effect=[
            QueryResult(rows=[sample_account_row], row_count=1),
            QueryResult(rows=[sample_transaction_row], row_count=1),
        ])

        details = await self.service.get_account_details(mock_gateway, 10)

        assert details.id == 10
        assert len(details.transactions) == 1
        assert details.transactions[0].amount == -42.5

    @pytest.mark.asyncio
    async def test_details_second_read_failure_fails_request(
        self, mock_gateway, sample_account_row
    ):
        mock_gateway.execute = AsyncMock(side_effect=[
            QueryResult(rows=[sample_account_row], row_count=1),
            StoreError(),
        ])

        with pytest.raises(StoreError) as exc_info:
            await self.service.get_account_details(mock_gateway, 10)

        assert exc_info.value.message == "Could not fetch account details"

    @pytest.mark.asyncio
    async def test_cashflow_is_numeric(self, mock_gateway):
        mock_gateway.execute.return_value = QueryResult(
            rows=[{"cashflow": Decimal("120.00")}], row_count=1
        )

        result = await self.service.get_cashflow(mock_gateway, 10)

        assert result.account_id == 10
        assert result.cashflow == 120.0
        assert isinstance(result.cashflow, float)

    @pytest.mark.asyncio
    async def test_cashflow_null_sum_is_zero(self, mock_gateway):
        mock_gateway.execute.return_value = QueryResult(rows=[{"cashflow": None}], row_count=1)

        result = await self.service.get_cashflow(mock_gateway, 10)

        assert result.cashflow == 0

    @pytest.mark.asyncio
    async def test_create_account_defaults_currency(self, mock_gateway, sample_account_row):
        mock_gateway.execute.return_value = QueryResult(rows=[sample_account_row], row_count=1)

        await self.service.create_account(mock_gateway, user_id=1, name="Everyday", type="chequing")

        statement = mock_gateway.execute.await_args.args[0]
        assert statement.compile().params["currency"] == "CAD"

    @pytest.mark.asyncio
    async def test_create_account_missing_user_is_store_error(self, mock_gateway):
        mock_gateway.execute = AsyncMock(side_effect=StoreError(code=FOREIGN_KEY_VIOLATION))

        with pytest.raises(StoreError) as exc_info:
            await self.service.create_account(mock_gateway, user_id=999, name="X", type="cash")

        assert exc_info.value.message == "Could not create account"
        assert exc_info.value.is_foreign_key_violation

    @pytest.mark.asyncio
    async def test_delete_missing_account_is_not_found(self, mock_gateway):
        mock_gateway.execute.return_value = QueryResult(rows=[], row_count=0)

        with pytest.raises(NotFoundError):
            await self.service.delete_account(mock_gateway, 10)


class TestTransactionService:

    def setup_method(self):
        self.service = TransactionService()

    @pytest.mark.asyncio
    async def test_create_applies_defaults(self, mock_gateway, sample_transaction_row):
        mock_gateway.execute.return_value = QueryResult(
            rows=[sample_transaction_row], row_count=1
        )

        await self.service.create_transaction(mock_gateway, account_id=10, amount=Decimal("5"))

        params = mock_gateway.execute.await_args.args[0].compile().params
        assert params["description"] == ""
        assert params["category"] == ""
        assert params["date"] is None

    @pytest.mark.asyncio
    async def test_unique_violation_is_not_a_conflict(self, mock_gateway):
        mock_gateway.execute = AsyncMock(side_effect=StoreError(code=UNIQUE_VIOLATION))

        with pytest.raises(StoreError) as exc_info:
            await self.service.create_transaction(mock_gateway, account_id=10, amount=Decimal("5"))

        assert exc_info.value.message == "Could not create transaction"

    @pytest.mark.asyncio
    async def test_update_missing_transaction_is_not_found(self, mock_gateway):
        mock_gateway.execute.return_value = QueryResult(rows=[], row_count=0)

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.update_transaction(mock_gateway, 7, {"amount": Decimal("1")})

        assert exc_info.value.message == "Transaction not found"
