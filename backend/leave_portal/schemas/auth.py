# ruff: noqa: TC003
from __future__ import annotations

import uuid

from pydantic import BaseModel

from leave_portal.models.enums import Role


class AuthContext(BaseModel):
    """Caller identity as supplied by the identity provider."""

    user_id: uuid.UUID
    role: str = Role.USER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
