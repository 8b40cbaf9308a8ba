"""
Ledgerline Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_gateway: AsyncMock gateway for service unit tests (no DB)
    ├── gateway: real Gateway on a fresh SQLite file with the schema created
    ├── test_client: HTTPX AsyncClient wired to the app, using `gateway`
    └── sample rows: dicts shaped like gateway result rows
"""

import os
import tempfile

# Override settings for testing BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="ledgerline_test_"), "settings.db"
)
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["DB_CREATE_TABLES"] = "false"

from datetime import date, datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.database import Gateway, QueryResult, get_gateway


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures (created fresh for each test)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_gateway():
    """
    Provides a mock gateway.

    Usage:
        mock_gateway.execute.return_value = QueryResult(rows=[row], row_count=1)
        result = await user_service.list_users(mock_gateway)
    """
    gateway = AsyncMock(spec=Gateway)
    gateway.execute = AsyncMock(return_value=QueryResult())
    return gateway


@pytest_asyncio.fixture
async def gateway(tmp_path):
    """
    Provides a real gateway on an empty SQLite database.

    Foreign keys are enforced (PRAGMA foreign_keys=ON), so constraint
    behaviour matches PostgreSQL.
    """
    gw = Gateway(f"sqlite+aiosqlite:///{tmp_path / 'ledgerline.db'}")
    await gw.create_schema()
    yield gw
    await gw.dispose()


@pytest_asyncio.fixture
async def test_client(gateway):
    """
    Provides an async HTTP test client for endpoint testing.

    How: ASGITransport routes requests straight into the app; the
         `get_gateway` dependency is overridden with the SQLite gateway
         (ASGITransport does not run the lifespan).
    """
    from app.main import app

    app.dependency_overrides[get_gateway] = lambda: gateway
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def sample_user_row():
    return {
        "id": 1,
        "name": "Ada",
        "email": "ada@example.com",
        "created_at": datetime.now(timezone.utc),
    }


@pytest.fixture
def sample_account_row():
    return {
        "id": 10,
        "user_id": 1,
        "name": "Everyday",
        "type": "chequing",
        "currency": "CAD",
        "created_at": datetime.now(timezone.utc),
    }


@pytest.fixture
def sample_transaction_row():
    return {
        "id": 100,
        "account_id": 10,
        "amount": Decimal("-42.50"),
        "description": "Groceries",
        "category": "food",
        "date": date(2024, 1, 15),
        "created_at": datetime.now(timezone.utc),
    }
