"""
Ledgerline Backend — Shared Response Schemas
==============================================

What:  Error and health response models shared by every route module.
"""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field


def decimal_to_float(value: Any) -> Any:
    """
    Before-validator for money fields.

    NUMERIC columns come back as Decimal; the API contract is a JSON number,
    never a string.
    """
    if isinstance(value, Decimal):
        return float(value)
    return value


class ErrorResponse(BaseModel):
    """
    What:  Error body returned by every endpoint on failure.

    Example:
        {"error": "Email already exists"}
    """
    error: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    """Returned by GET /health when the store answers `SELECT 1`."""
    status: str = Field(default="ok", description="Always 'ok' on success")
    version: str = Field(description="Application version")
    uptime_seconds: float = Field(description="Seconds since service started")
