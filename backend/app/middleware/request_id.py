"""
Ledgerline Backend — Request ID Middleware
============================================

What:  Tags every request with a short id that appears in each log line the
       request produces (access log and the error handlers in main.py).
How:   Accepts a well-formed client X-Request-ID, otherwise mints one; the
       id lives in a ContextVar for the duration of the request.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Client ids are echoed into logs: letters, digits, "-" and "_" only
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9_-]{1,64}$")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:12]


def resolve_request_id(header_value: Optional[str]) -> str:
    """The client's id when it is safe to log, a fresh one otherwise."""
    if header_value and _VALID_REQUEST_ID.match(header_value):
        return header_value
    return new_request_id()


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
