"""
Ledgerline Backend — User Schemas
===================================

What:  Request/response models for /users.

Request models declare every field optional on purpose: presence and
emptiness are checked by app.validators so that a missing field yields
400 {"error": ...} rather than FastAPI's 422 body.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

# Fields PATCH /users/{id} may change, in SET-clause order
USER_UPDATABLE_FIELDS = ("name", "email")


class UserCreate(BaseModel):
    """Body of POST /users."""
    name: Optional[str] = Field(default=None, description="Display name (required)")
    email: Optional[str] = Field(default=None, description="Unique email address (required)")


class UserUpdate(BaseModel):
    """Body of PATCH /users/{id}; only fields that are sent get updated."""
    name: Optional[str] = None
    email: Optional[str] = None


class UserResponse(BaseModel):
    id: int = Field(description="Server-generated identifier")
    name: str
    email: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class UserDeleteResponse(BaseModel):
    """Returned by DELETE /users/{id}."""
    success: bool = True
    deleted: UserResponse

