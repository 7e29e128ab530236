"""
Pydantic schemas for auth / user endpoints.

``password_hash`` appears in none of the outgoing schemas.
"""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, StringConstraints

from smartsupply.core.permissions import Role

PersonName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]


# ── Auth / Registration ─────────────────────────────────

class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    first_name: PersonName
    last_name: PersonName
    role: Role


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


# ── User responses ──────────────────────────────────────

class UserOut(BaseModel):
    """Public view of a user; the auth gate attaches this to the request."""

    id: UUID
    email: str
    first_name: str
    last_name: str
    role: Role

    model_config = {"from_attributes": True}


class UserDetailOut(UserOut):
    created_at: datetime


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut


class PermissionsOut(BaseModel):
    role: Role
    permissions: dict[str, bool]
