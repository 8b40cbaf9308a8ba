"""
Ledgerline Backend — Account Schemas
======================================

What:  Request/response models for /accounts, /users/{id}/accounts and the
       derived cashflow / details reads.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from app.schemas.common import decimal_to_float
from app.schemas.transaction import TransactionResponse

ACCOUNT_UPDATABLE_FIELDS = ("name", "type", "currency")
CURRENCY_MAX_LENGTH = 3


class AccountCreate(BaseModel):
    """
    Body of POST /accounts.

    The referenced user is not looked up first: a missing user is rejected
    by the store's foreign key.
    """
    user_id: Optional[int] = Field(default=None, description="Owning user (required)")
    name: Optional[str] = Field(default=None, description="Account name (required)")
    type: Optional[str] = Field(default=None, description="Free-form account type (required)")
    currency: Optional[str] = Field(
        default=None, max_length=CURRENCY_MAX_LENGTH, description="Currency code, defaults to CAD"
    )


class AccountUpdate(BaseModel):
    """Body of PATCH /accounts/{id}."""
    name: Optional[str] = None
    type: Optional[str] = None
    currency: Optional[str] = Field(default=None, max_length=CURRENCY_MAX_LENGTH)


class AccountResponse(BaseModel):
    id: int
    user_id: int
    name: str
    type: str
    currency: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class AccountWithCashflow(AccountResponse):
    """Item of GET /users/{id}/accounts."""
    cashflow: float = 0.0

    @field_validator("cashflow", mode="before")
    @classmethod
    def cashflow_as_float(cls, v):
        return decimal_to_float(v)


class AccountDetails(AccountResponse):
    """GET /accounts/{id}/details: the account merged with its transactions (date desc)."""
    transactions: List[TransactionResponse] = Field(default_factory=list)


class CashflowResponse(BaseModel):
    """
    What:  Net flow of an account: SUM(amount) over its transactions.
    When:  0 when the account has no transactions.
    """
    account_id: int
    cashflow: float

    @field_validator("cashflow", mode="before")
    @classmethod
    def cashflow_as_float(cls, v):
        return decimal_to_float(v)


class AccountDeleteResponse(BaseModel):
    success: bool = True
    deleted: AccountResponse
