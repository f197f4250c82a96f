# ruff: noqa: B008, TC003
from __future__ import annotations

import uuid
from datetime import date
from typing import Annotated

from fastapi import Depends, Header, Query

from leave_portal.exceptions import ForbiddenError
from leave_portal.models.enums import Role
from leave_portal.schemas.auth import AuthContext
from leave_portal.services.request import MAX_YEAR


async def get_auth_context(
    x_user_id: uuid.UUID = Header(),
    x_role: str = Header(default=Role.USER),
) -> AuthContext:
    """Extract the caller identity forwarded by the identity provider."""
    return AuthContext(user_id=x_user_id, role=x_role.upper())


AuthDep = Annotated[AuthContext, Depends(get_auth_context)]


async def require_admin(
    auth: AuthDep,
) -> AuthContext:
    """Require the ADMIN role for the request."""
    if not auth.is_admin:
        raise ForbiddenError("Admin access required")
    return auth


AdminDep = Annotated[AuthContext, Depends(require_admin)]


def current_year(year: int | None = Query(default=None, ge=1900, le=MAX_YEAR)) -> int:
    """Resolve the ``year`` query parameter, defaulting to the current calendar year."""
    return year if year is not None else date.today().year


YearDep = Annotated[int, Depends(current_year)]
