"""
Ledgerline Backend — Transaction Schemas
==========================================

What:  Request/response models for /transactions and the per-account
       transaction listings.

`amount` is accepted as a Decimal (exact arithmetic in the store) and
returned as a JSON number.
"""

import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from app.schemas.common import decimal_to_float

TRANSACTION_UPDATABLE_FIELDS = ("amount", "description", "category", "date")

# Matches the NUMERIC(14, 2) column: more precision would be rounded away by the store
AMOUNT_MAX_DIGITS = 14
AMOUNT_DECIMAL_PLACES = 2


class TransactionCreate(BaseModel):
    """
    Body of POST /transactions.

    Defaults applied by the service when absent:
        description → "", category → "", date → null
    """
    account_id: Optional[int] = Field(default=None, description="Owning account (required)")
    amount: Optional[Decimal] = Field(
        default=None,
        max_digits=AMOUNT_MAX_DIGITS,
        decimal_places=AMOUNT_DECIMAL_PLACES,
        description="Signed amount (required): positive = inflow, negative = outflow",
    )
    description: Optional[str] = None
    category: Optional[str] = None
    date: Optional[datetime.date] = Field(default=None, description="ISO date (YYYY-MM-DD)")


class TransactionUpdate(BaseModel):
    """Body of PATCH /transactions/{id}."""
    amount: Optional[Decimal] = Field(
        default=None, max_digits=AMOUNT_MAX_DIGITS, decimal_places=AMOUNT_DECIMAL_PLACES
    )
    description: Optional[str] = None
    category: Optional[str] = None
    date: Optional[datetime.date] = None


class TransactionResponse(BaseModel):
    id: int
    account_id: int
    amount: float
    description: str = ""
    category: str = ""
    date: Optional[datetime.date] = None
    created_at: Optional[datetime.datetime] = None

    model_config = {"from_attributes": True}

    @field_validator("amount", mode="before")
    @classmethod
    def amount_as_float(cls, v):
        return decimal_to_float(v)


class TransactionDeleteResponse(BaseModel):
    success: bool = True
    deleted: TransactionResponse
