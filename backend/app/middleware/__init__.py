# Middleware package init
"""
Ledgerline Backend — Middleware Package
========================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: correlation id for logs and the X-Request-ID header
    2. Logging: one access line with status and duration
    3. GZip / CORS: FastAPI's stock middleware
"""
