# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from leave_portal.models.enums import Role


class RegisterUserPayload(BaseModel):
    """Identity claims forwarded after a successful sign-in."""

    email: EmailStr
    display_name: str = Field(min_length=1, max_length=255)
    first_name: str | None = Field(default=None, max_length=255)
    last_name: str | None = Field(default=None, max_length=255)
    role: Role = Role.USER


class UserResponse(BaseModel):
    """A directory entry."""

    id: uuid.UUID
    email: str
    display_name: str
    first_name: str | None
    last_name: str | None
    role: Role
    last_login: datetime | None
    created_at: datetime


class RegisterUserResponse(UserResponse):
    """A directory entry plus the number of balance rows provisioned."""

    balances_provisioned: int


class UserListResponse(BaseModel):
    """All directory entries ordered by display name."""

    items: list[UserResponse]
    total: int
