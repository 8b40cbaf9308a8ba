"""
Ledgerline Backend — Middleware Tests
=======================================

What we test:
    ✅ Client request ids are echoed only when safe to log
    ✅ Health probes and static assets stay out of the access log
    ✅ Access log level follows the status class
    ✅ API requests produce one access line with the route template
"""

import logging

import pytest

from app.middleware.logging import is_logged_path, level_for_status
from app.middleware.request_id import resolve_request_id


class TestRequestId:

    def test_well_formed_client_id_is_kept(self):
        assert resolve_request_id("trace-42_a") == "trace-42_a"

    @pytest.mark.parametrize("header", [None, "", "bad id", "x" * 65, "id\nInjected: 1"])
    def test_unusable_client_id_is_replaced(self, header):
        rid = resolve_request_id(header)
        assert rid != header
        assert len(rid) == 12

    @pytest.mark.asyncio
    async def test_header_echoed(self, test_client):
        response = await test_client.get("/users", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"


class TestAccessLog:

    @pytest.mark.parametrize("path", ["/health", "/", "/users.js", "/styles.css", "/accounts.html"])
    def test_unlogged_paths(self, path):
        assert is_logged_path(path) is False

    @pytest.mark.parametrize("path", ["/users", "/accounts/3/cashflow", "/transactions/9"])
    def test_api_paths_logged(self, path):
        assert is_logged_path(path) is True

    @pytest.mark.parametrize(
        "status, level",
        [(200, logging.INFO), (201, logging.INFO), (404, logging.WARNING), (409, logging.WARNING), (500, logging.ERROR)],
    )
    def test_level_for_status(self, status, level):
        assert level_for_status(status) == level

    @pytest.mark.asyncio
    async def test_route_template_logged(self, test_client, caplog):
        with caplog.at_level(logging.INFO, logger="ledgerline.access"):
            await test_client.delete("/accounts/999")

        lines = [r.getMessage() for r in caplog.records if r.name == "ledgerline.access"]
        assert len(lines) == 1
        assert lines[0].startswith("DELETE /accounts/{account_id} 404")
