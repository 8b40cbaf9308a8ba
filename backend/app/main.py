"""
Ledgerline Backend — FastAPI Application Factory
===================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires middleware, exception handlers, routers and the
       static client; lifespan() owns the persistence gateway.
Who:   Run with `uvicorn app.main:app` from the backend/ directory.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Logging → GZip → CORS    │
    │                                                     │
    │  Routes:  /users  /accounts  /transactions /health  │
    │           /  (static client pages and scripts)      │
    │                                                     │
    │  Exception Handlers:                                │
    │   Validation→400 │ NotFound→404 │ Conflict→409      │
    │   Store→500      │ unexpected→500                   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → Gateway (connection pool) → optional CREATE TABLE
    Shutdown: dispose the gateway (close pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import __version__
from app.config import settings
from app.database import Gateway
from app.exceptions import (
    ConflictError,
    FinanceAPIError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware, request_id_var
from app.routes import accounts, health, transactions, users

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    When:   Called once during app startup, before the gateway is created.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    # Per-query and per-request noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup sequence:
        1. Setup logging
        2. Create the gateway (connection pool) and store it on app.state
        3. Create tables when DB_CREATE_TABLES is set

    Shutdown sequence:
        1. Dispose the gateway
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("Ledgerline Backend %s starting up...", __version__)

    gateway = Gateway.from_settings(settings)
    app.state.gateway = gateway

    if settings.db_create_tables:
        await gateway.create_schema()
        logger.info("Database tables created (db_create_tables=True)")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Ledgerline Backend shutting down...")
    await gateway.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes. Every body is {"error": message}.

    Handler hierarchy:
        ValidationError         → 400 Bad Request
        RequestValidationError  → 400 Bad Request (malformed JSON, wrong types)
        NotFoundError           → 404 Not Found
        ConflictError           → 409 Conflict
        StoreError              → 500 Internal Server Error
        FinanceAPIError (base)  → 500 Internal Server Error
        HTTPException           → its own status (unrouted path 404, wrong method 405)
        Exception (fallback)    → 500 Internal Server Error

    Store details (SQLSTATE, driver message) are logged, never returned.

    The fallback runs in ServerErrorMiddleware, outside RequestIDMiddleware:
    the ContextVar is already reset there, so the id is read back from
    request.state and the X-Request-ID header is set on the response here.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return _error(400, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        errors = exc.errors()
        message = "Invalid request"
        if errors:
            first = errors[0]
            location = ".".join(
                str(part) for part in first.get("loc", ()) if part not in ("body", "path", "query")
            )
            message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
        logger.warning("[%s] Request validation error: %s", rid, message)
        return _error(400, message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        response = _error(exc.status_code, str(exc.detail))
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error(404, exc.message)

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        rid = request_id_var.get("")
        logger.warning("[%s] Conflict: %s", rid, exc.message)
        return _error(409, exc.message)

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        rid = request_id_var.get("")
        logger.error("[%s] Store error: %s | Context: %s", rid, exc.message, exc.context)
        return _error(500, exc.message)

    @app.exception_handler(FinanceAPIError)
    async def handle_app_error(request: Request, exc: FinanceAPIError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return _error(500, exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Stack trace is logged server-side only."""
        rid = request_id_var.get("") or getattr(request.state, "request_id", "")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        response = _error(500, "Server error")
        if rid:
            response.headers[REQUEST_ID_HEADER] = rid
        return response


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance ready to receive requests.
             The gateway is attached by lifespan(); tests override
             `get_gateway` instead.
    """
    app = FastAPI(
        title="Ledgerline API",
        description="Users, accounts and transactions for personal-finance tracking.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Executes in REVERSE order of addition: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(accounts.router)
    app.include_router(transactions.router)

    # Static client last: the "/" mount only sees paths no router matched
    static_dir = Path(settings.static_dir) if settings.static_dir else STATIC_DIR
    app.mount("/", StaticFiles(directory=str(static_dir), html=True), name="static")

    return app


# ── Application Instance ─────────────────────────────────────────────────
app = create_app()
