"""
Ledgerline Backend — Persistence Gateway
==========================================

What:  Async SQLAlchemy engine wrapper through which every SQL statement runs.
How:   `Gateway.execute()` takes one parameterized statement, runs it in its
       own transaction on a pooled connection and returns the rows as dicts
       plus the row count. Driver errors become `StoreError` with a code.
Who:   Created once by the application lifespan (main.py), stored on
       `app.state.gateway`, and handed to route handlers via `get_gateway`.
When:  Engine lives for the whole process; a connection is borrowed per call.

Connection Pooling:
    pool_size / max_overflow come from settings (PostgreSQL only).
    pool_pre_ping validates connections before use.
    pool_recycle=3600 recycles connections every hour.
    SQLite URLs use SQLAlchemy's default pool and get foreign keys switched on.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.sql import Executable

from app.exceptions import (
    FOREIGN_KEY_VIOLATION,
    UNIQUE_VIOLATION,
    UNKNOWN_ERROR,
    StoreError,
)

logger = logging.getLogger(__name__)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Registers every table on one metadata object, used by Alembic
    and by `Gateway.create_schema()`.
    """
    pass


@dataclass
class QueryResult:
    """Outcome of one statement: rows as plain dicts and the affected row count."""

    rows: List[Dict[str, Any]] = field(default_factory=list)
    row_count: int = 0

    def first(self) -> Optional[Dict[str, Any]]:
        return self.rows[0] if self.rows else None


def classify_error(exc: BaseException) -> str:
    """
    Map a driver exception to a SQLSTATE-style code.

    asyncpg exposes `sqlstate` on the adapted exception (and on its cause);
    sqlite3 only reports the violation in its message.
    """
    orig = getattr(exc, "orig", None)
    for candidate in (orig, getattr(orig, "__cause__", None)):
        code = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if isinstance(code, str) and code:
            return code

    if isinstance(exc, IntegrityError):
        detail = str(orig if orig is not None else exc).upper()
        if "UNIQUE" in detail:
            return UNIQUE_VIOLATION
        if "FOREIGN KEY" in detail:
            return FOREIGN_KEY_VIOLATION
    return UNKNOWN_ERROR


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores REFERENCES clauses unless this is set per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Gateway:
    """
    Process-scoped handle on the connection pool.

    Every route handler receives the same instance; the engine's pool makes
    it safe for concurrent requests. The store serializes conflicting writes.
    """

    def __init__(
        self,
        database_url: str,
        pool_size: int = 10,
        max_overflow: int = 10,
        pool_pre_ping: bool = True,
        echo: bool = False,
    ):
        engine_kwargs: Dict[str, Any] = {"echo": echo}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_pre_ping=pool_pre_ping,
                pool_recycle=3600,
            )
        self._engine: AsyncEngine = create_async_engine(database_url, **engine_kwargs)

        if self._engine.dialect.name == "sqlite":
            event.listen(self._engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    @classmethod
    def from_settings(cls, settings) -> "Gateway":
        return cls(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            echo=settings.log_level == "DEBUG",
        )

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    async def execute(
        self,
        statement: Union[str, Executable],
        params: Optional[Mapping[str, Any]] = None,
    ) -> QueryResult:
        """
        Run one parameterized statement and return its rows and row count.

        Args:
            statement: SQLAlchemy Core construct, or SQL text with `:name`
                       placeholders. Values always travel as bound parameters.
            params:    Bound parameter values for text statements.

        Returns:
            QueryResult. `row_count` is the number of returned rows for
            SELECT / ... RETURNING, the driver rowcount otherwise.

        Raises:
            StoreError: any database failure, with `code` set by classify_error().
        """
        if isinstance(statement, str):
            statement = text(statement)

        try:
            async with self._engine.begin() as conn:
                if params:
                    result = await conn.execute(statement, dict(params))
                else:
                    result = await conn.execute(statement)

                if result.returns_rows:
                    rows = [dict(row._mapping) for row in result]
                    return QueryResult(rows=rows, row_count=len(rows))
                return QueryResult(rows=[], row_count=result.rowcount)

        except (SQLAlchemyError, OSError) as e:
            code = classify_error(e)
            raise StoreError(
                code=code,
                context={
                    "error_type": type(e).__name__,
                    "detail": str(getattr(e, "orig", e)),
                },
            ) from e

    async def ping(self) -> None:
        """Trivial round trip used by the health check."""
        await self.execute("SELECT 1")

    async def create_schema(self) -> None:
        """CREATE TABLE for every registered model (skips existing tables)."""
        import app.models  # noqa: F401  (registers tables on Base.metadata)

        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """
        Gracefully close all connections in the pool.
        Called during application shutdown (lifespan handler).
        """
        await self._engine.dispose()


# ── Gateway Dependency ────────────────────────────────────────────────────
def get_gateway(request: Request) -> Gateway:
    """
    FastAPI dependency returning the gateway created at startup.

    Example usage in a route:
        @router.get("/users")
        async def list_users(gateway: Gateway = Depends(get_gateway)):
            return await user_service.list_users(gateway)

    Tests replace it through `app.dependency_overrides[get_gateway]`.
    """
    return request.app.state.gateway
