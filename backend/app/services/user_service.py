"""
Ledgerline Backend — User Service
===================================

What:  SQL for listing, creating, updating and deleting users.
Who:   Called by app/routes/users.py with the request's gateway.

Conflicts:
    users.email is UNIQUE. A duplicate on create or update comes back from
    the store as SQLSTATE 23505 and is raised as ConflictError (409).
"""

import logging
from typing import List

from sqlalchemy import insert, select

from app.database import Gateway
from app.exceptions import StoreError
from app.models import users
from app.schemas.user import UserDeleteResponse, UserResponse
from app.services.base import CrudService

logger = logging.getLogger(__name__)


class UserService(CrudService):
    table = users
    resource = "User"
    conflict_message = "Email already exists"

    async def list_users(self, gateway: Gateway) -> List[UserResponse]:
        """All users ordered by id ascending."""
        result = await self._run(
            gateway,
            select(users).order_by(users.c.id.asc()),
            action="Fetch users",
            failure_message="Could not fetch users",
        )
        return [UserResponse.model_validate(row) for row in result.rows]

    async def create_user(self, gateway: Gateway, name: str, email: str) -> UserResponse:
        """
        INSERT a user and return it with its generated id.

        Raises:
            ConflictError: email already taken (→ 409)
            StoreError:    any other failure (→ 500)
        """
        result = await self._run(
            gateway,
            insert(users).values(name=name, email=email).returning(*users.c),
            action="Create user",
            failure_message="Server error",
        )
        row = result.first()
        if row is None:
            raise StoreError(message="User creation failed")

        logger.info("User %s created", row["id"])
        return UserResponse.model_validate(row)

    async def update_user(self, gateway: Gateway, user_id: int, changes: dict) -> UserResponse:
        row = await self._update(gateway, user_id, changes)
        return UserResponse.model_validate(row)

    async def delete_user(self, gateway: Gateway, user_id: int) -> UserDeleteResponse:
        """Delete a user; their accounts and transactions go with them (ON DELETE CASCADE)."""
        row = await self._delete(gateway, user_id)
        logger.info("User %s deleted", user_id)
        return UserDeleteResponse(success=True, deleted=UserResponse.model_validate(row))


# ── Singleton Instance ────────────────────────────────────────────────────
user_service = UserService()
