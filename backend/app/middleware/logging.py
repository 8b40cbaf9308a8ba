"""
Ledgerline Backend — Access Log Middleware
============================================

What:  One log line per API request, on the "ledgerline.access" logger.

Log line:
    2024-01-15T12:00:00 [INFO] ledgerline.access: PATCH /accounts/{account_id} 200 8.4ms [3f9c0a1b22de]

The path is the matched route template, so requests for different ids
group together; the concrete id is kept in `extra["path"]`. Health probes
and static client assets are not logged. Request bodies never are (names,
emails and amounts are personal data).
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import request_id_var

logger = logging.getLogger("ledgerline.access")

UNLOGGED_PATHS = frozenset({"/health", "/", "/favicon.ico"})
STATIC_SUFFIXES = (".html", ".js", ".css")


def is_logged_path(path: str) -> bool:
    return path not in UNLOGGED_PATHS and not path.endswith(STATIC_SUFFIXES)


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if not is_logged_path(path):
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000

        route = request.scope.get("route")
        template = getattr(route, "path", path)
        rid = request_id_var.get("")

        logger.log(
            level_for_status(response.status_code),
            "%s %s %d %.1fms [%s]",
            request.method,
            template,
            response.status_code,
            duration_ms,
            rid,
            extra={
                "request_id": rid,
                "path": path,
                "status": response.status_code,
                "duration_ms": round(duration_ms, 2),
            },
        )
        return response
