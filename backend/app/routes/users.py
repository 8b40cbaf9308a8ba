"""
Ledgerline Backend — User Route Handlers
==========================================

What:  /users list, create, partial update and delete.
Who:   Called by static/users.js and API clients.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends

from app.database import Gateway, get_gateway
from app.schemas.common import ErrorResponse
from app.schemas.user import (
    USER_UPDATABLE_FIELDS,
    UserCreate,
    UserDeleteResponse,
    UserResponse,
    UserUpdate,
)
from app.services.user_service import user_service
from app.validators import require_fields, updatable_fields

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Users"])


@router.get(
    "/users",
    response_model=List[UserResponse],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List all users (id ascending)",
)
async def list_users(gateway: Gateway = Depends(get_gateway)) -> List[UserResponse]:
    return await user_service.list_users(gateway)


@router.post(
    "/users",
    status_code=201,
    response_model=UserResponse,
    responses={
        400: {"description": "Name or email missing", "model": ErrorResponse},
        409: {"description": "Email already exists", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a user",
)
async def create_user(
    body: Optional[UserCreate] = None,
    gateway: Gateway = Depends(get_gateway),
) -> UserResponse:
    """
    Create a user from {name, email}.

    Error responses (handled by global exception handlers):
        HTTP 400: name or email missing/empty (ValidationError)
        HTTP 409: email already registered (ConflictError)
        HTTP 500: any other store failure (StoreError)
    """
    body = body or UserCreate()
    require_fields(body.model_dump(), ("name", "email"), "Name and email are required")
    return await user_service.create_user(gateway, name=body.name, email=body.email)


@router.patch(
    "/users/{user_id}",
    response_model=UserResponse,
    responses={
        400: {"description": "No fields to update", "model": ErrorResponse},
        404: {"description": "User not found", "model": ErrorResponse},
        # Email clash is 409 as on POST /users, not the generic 500 "Could not update user"
        409: {"description": "Email already exists", "model": ErrorResponse},
    },
    summary="Update a user's name and/or email",
)
async def update_user(
    user_id: int,
    body: UserUpdate,
    gateway: Gateway = Depends(get_gateway),
) -> UserResponse:
    changes = updatable_fields(body.model_dump(exclude_unset=True), USER_UPDATABLE_FIELDS)
    return await user_service.update_user(gateway, user_id, changes)


@router.delete(
    "/users/{user_id}",
    response_model=UserDeleteResponse,
    responses={404: {"description": "User not found", "model": ErrorResponse}},
    summary="Delete a user",
)
async def delete_user(
    user_id: int,
    gateway: Gateway = Depends(get_gateway),
) -> UserDeleteResponse:
    return await user_service.delete_user(gateway, user_id)
