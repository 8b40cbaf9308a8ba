"""
Ledgerline Backend — Account Route Handlers
=============================================

What:  /accounts CRUD plus the account-scoped reads:
       GET /users/{id}/accounts, /accounts/{id}/details,
       /accounts/{id}/cashflow and /accounts/{id}/transactions.
Who:   Called by static/accounts.js, static/transactions.js and API clients.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends

from app.database import Gateway, get_gateway
from app.schemas.account import (
    ACCOUNT_UPDATABLE_FIELDS,
    AccountCreate,
    AccountDeleteResponse,
    AccountDetails,
    AccountResponse,
    AccountUpdate,
    AccountWithCashflow,
    CashflowResponse,
)
from app.schemas.common import ErrorResponse
from app.schemas.transaction import TransactionResponse
from app.services.account_service import account_service
from app.services.transaction_service import transaction_service
from app.validators import require_fields, updatable_fields

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Accounts"])

_server_error = {500: {"description": "Server error", "model": ErrorResponse}}


@router.get(
    "/accounts",
    response_model=List[AccountResponse],
    responses=_server_error,
    summary="List all accounts (id ascending)",
)
async def list_accounts(gateway: Gateway = Depends(get_gateway)) -> List[AccountResponse]:
    return await account_service.list_accounts(gateway)


@router.post(
    "/accounts",
    status_code=201,
    response_model=AccountResponse,
    responses={
        400: {"description": "user_id, name or type missing", "model": ErrorResponse},
        **_server_error,
    },
    summary="Create an account",
)
async def create_account(
    body: Optional[AccountCreate] = None,
    gateway: Gateway = Depends(get_gateway),
) -> AccountResponse:
    """
    Create an account from {user_id, name, type, currency?}.

    currency defaults to CAD. A user_id with no matching user is not checked
    here; the store rejects it and the response is 500.
    """
    body = body or AccountCreate()
    require_fields(
        body.model_dump(),
        ("user_id", "name", "type"),
        "user_id, name, and type are required",
    )
    return await account_service.create_account(
        gateway,
        user_id=body.user_id,
        name=body.name,
        type=body.type,
        currency=body.currency,
    )


@router.patch(
    "/accounts/{account_id}",
    response_model=AccountResponse,
    responses={
        400: {"description": "No fields to update", "model": ErrorResponse},
        404: {"description": "Account not found", "model": ErrorResponse},
    },
    summary="Update an account's name, type and/or currency",
)
async def update_account(
    account_id: int,
    body: AccountUpdate,
    gateway: Gateway = Depends(get_gateway),
) -> AccountResponse:
    changes = updatable_fields(body.model_dump(exclude_unset=True), ACCOUNT_UPDATABLE_FIELDS)
    return await account_service.update_account(gateway, account_id, changes)


@router.delete(
    "/accounts/{account_id}",
    response_model=AccountDeleteResponse,
    responses={404: {"description": "Account not found", "model": ErrorResponse}},
    summary="Delete an account",
)
async def delete_account(
    account_id: int,
    gateway: Gateway = Depends(get_gateway),
) -> AccountDeleteResponse:
    return await account_service.delete_account(gateway, account_id)


@router.get(
    "/users/{user_id}/accounts",
    response_model=List[AccountWithCashflow],
    responses=_server_error,
    summary="List a user's accounts with their cashflow (newest first)",
)
async def list_user_accounts(
    user_id: int,
    gateway: Gateway = Depends(get_gateway),
) -> List[AccountWithCashflow]:
    return await account_service.list_user_accounts(gateway, user_id)


@router.get(
    "/accounts/{account_id}/details",
    response_model=AccountDetails,
    responses={
        404: {"description": "Account not found", "model": ErrorResponse},
        **_server_error,
    },
    summary="Get an account with its transactions (date descending)",
)
async def get_account_details(
    account_id: int,
    gateway: Gateway = Depends(get_gateway),
) -> AccountDetails:
    return await account_service.get_account_details(gateway, account_id)


@router.get(
    "/accounts/{account_id}/cashflow",
    response_model=CashflowResponse,
    responses=_server_error,
    summary="Sum of an account's transaction amounts",
)
async def get_cashflow(
    account_id: int,
    gateway: Gateway = Depends(get_gateway),
) -> CashflowResponse:
    return await account_service.get_cashflow(gateway, account_id)


@router.get(
    "/accounts/{account_id}/transactions",
    response_model=List[TransactionResponse],
    responses=_server_error,
    summary="List an account's transactions (date descending)",
)
async def list_account_transactions(
    account_id: int,
    gateway: Gateway = Depends(get_gateway),
) -> List[TransactionResponse]:
    return await transaction_service.list_account_transactions(gateway, account_id)
