"""
Ledgerline Backend — Transaction Route Handlers
=================================================

What:  POST /transactions, PATCH and DELETE /transactions/{id}.
       Listing lives under /accounts/{id}/transactions (routes/accounts.py).
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from app.database import Gateway, get_gateway
from app.schemas.common import ErrorResponse
from app.schemas.transaction import (
    TRANSACTION_UPDATABLE_FIELDS,
    TransactionCreate,
    TransactionDeleteResponse,
    TransactionResponse,
    TransactionUpdate,
)
from app.services.transaction_service import transaction_service
from app.validators import require_fields, updatable_fields

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Transactions"])


@router.post(
    "/transactions",
    status_code=201,
    response_model=TransactionResponse,
    responses={
        400: {"description": "account_id or amount missing", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Record a transaction",
)
async def create_transaction(
    body: Optional[TransactionCreate] = None,
    gateway: Gateway = Depends(get_gateway),
) -> TransactionResponse:
    body = body or TransactionCreate()
    require_fields(
        body.model_dump(),
        ("account_id", "amount"),
        "account_id and amount are required",
    )
    return await transaction_service.create_transaction(
        gateway,
        account_id=body.account_id,
        amount=body.amount,
        description=body.description,
        category=body.category,
        date=body.date,
    )


@router.patch(
    "/transactions/{transaction_id}",
    response_model=TransactionResponse,
    responses={
        400: {"description": "No fields to update", "model": ErrorResponse},
        404: {"description": "Transaction not found", "model": ErrorResponse},
    },
    summary="Update a transaction's amount, description, category and/or date",
)
async def update_transaction(
    transaction_id: int,
    body: TransactionUpdate,
    gateway: Gateway = Depends(get_gateway),
) -> TransactionResponse:
    changes = updatable_fields(
        body.model_dump(exclude_unset=True), TRANSACTION_UPDATABLE_FIELDS
    )
    return await transaction_service.update_transaction(gateway, transaction_id, changes)


@router.delete(
    "/transactions/{transaction_id}",
    response_model=TransactionDeleteResponse,
    responses={404: {"description": "Transaction not found", "model": ErrorResponse}},
    summary="Delete a transaction",
)
async def delete_transaction(
    transaction_id: int,
    gateway: Gateway = Depends(get_gateway),
) -> TransactionDeleteResponse:
    return await transaction_service.delete_transaction(gateway, transaction_id)
