# ruff: noqa: TC003
from __future__ import annotations

from datetime import datetime

import sqlalchemy as sa
from sqlmodel import Field

from leave_portal.models.base import TimestampMixin, UUIDBase
from leave_portal.models.enums import Role


class User(UUIDBase, TimestampMixin, table=True):
    """Directory entry for a person who signed in through the identity provider."""

    __tablename__ = "app_user"

    email: str = Field(max_length=255, unique=True)
    display_name: str = Field(max_length=255)
    first_name: str | None = Field(default=None, max_length=255)
    last_name: str | None = Field(default=None, max_length=255)
    role: str = Field(default=Role.USER, max_length=20, sa_column_kwargs={"server_default": "USER"})
    last_login: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
