"""
Ledgerline Backend — Gateway Tests
====================================

What we test:
    ✅ classify_error: asyncpg-style sqlstate, SQLite messages, unknown errors
    ✅ execute() returns rows as dicts with a row count
    ✅ execute() binds parameters (no interpolation)
    ✅ Store failures surface as StoreError with the right code
    ✅ SQLite foreign keys are enforced
"""

import pytest
from sqlalchemy import insert
from sqlalchemy.exc import IntegrityError, OperationalError

from app.database import classify_error
from app.exceptions import (
    FOREIGN_KEY_VIOLATION,
    UNIQUE_VIOLATION,
    UNKNOWN_ERROR,
    StoreError,
)
from app.models import accounts, users


class _PgError(Exception):
    def __init__(self, sqlstate):
        super().__init__("pg error")
        self.sqlstate = sqlstate


class TestClassifyError:

    def test_sqlstate_from_driver(self):
        exc = IntegrityError("INSERT ...", {}, _PgError("23505"))
        assert classify_error(exc) == UNIQUE_VIOLATION

    def test_sqlstate_from_wrapped_cause(self):
        orig = Exception("adapted")
        orig.__cause__ = _PgError("23503")
        exc = IntegrityError("INSERT ...", {}, orig)
        assert classify_error(exc) == FOREIGN_KEY_VIOLATION

    def test_sqlite_unique_message(self):
        exc = IntegrityError("INSERT ...", {}, Exception("UNIQUE constraint failed: users.email"))
        assert classify_error(exc) == UNIQUE_VIOLATION

    def test_sqlite_foreign_key_message(self):
        exc = IntegrityError("INSERT ...", {}, Exception("FOREIGN KEY constraint failed"))
        assert classify_error(exc) == FOREIGN_KEY_VIOLATION

    def test_other_errors_are_unknown(self):
        exc = OperationalError("SELECT ...", {}, Exception("no such table: nope"))
        assert classify_error(exc) == UNKNOWN_ERROR


class TestGatewayExecute:

    @pytest.mark.asyncio
    async def test_returning_rows_and_count(self, gateway):
        result = await gateway.execute(
            insert(users).values(name="Ada", email="ada@example.com").returning(*users.c)
        )

        assert result.row_count == 1
        assert result.rows[0]["name"] == "Ada"
        assert isinstance(result.rows[0]["id"], int)

    @pytest.mark.asyncio
    async def test_text_statement_with_bound_params(self, gateway):
        await gateway.execute(insert(users).values(name="Ada", email="ada@example.com"))
        hostile = "x' OR '1'='1"

        result = await gateway.execute(
            "SELECT * FROM users WHERE email = :email", {"email": hostile}
        )

        assert result.rows == []
        assert result.row_count == 0

    @pytest.mark.asyncio
    async def test_unique_violation_code(self, gateway):
        await gateway.execute(insert(users).values(name="Ada", email="ada@example.com"))

        with pytest.raises(StoreError) as exc_info:
            await gateway.execute(insert(users).values(name="Bob", email="ada@example.com"))

        assert exc_info.value.code == UNIQUE_VIOLATION
        assert exc_info.value.is_unique_violation

    @pytest.mark.asyncio
    async def test_foreign_keys_enforced(self, gateway):
        with pytest.raises(StoreError) as exc_info:
            await gateway.execute(
                insert(accounts).values(user_id=999, name="Orphan", type="cash", currency="CAD")
            )

        assert exc_info.value.code == FOREIGN_KEY_VIOLATION

    @pytest.mark.asyncio
    async def test_bad_sql_is_store_error(self, gateway):
        with pytest.raises(StoreError) as exc_info:
            await gateway.execute("SELECT * FROM no_such_table")

        assert exc_info.value.code == UNKNOWN_ERROR
        assert exc_info.value.message == "Server error"

    @pytest.mark.asyncio
    async def test_ping(self, gateway):
        await gateway.ping()
