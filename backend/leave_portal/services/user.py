# ruff: noqa: TC003
"""User directory: registration from identity claims and administrative reads."""

from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from leave_portal.exceptions import NotFoundError
from leave_portal.models.base import now_utc
from leave_portal.models.enums import AuditAction, AuditEntityType, Role
from leave_portal.models.user import User
from leave_portal.schemas.user import RegisterUserResponse, UserListResponse, UserResponse
from leave_portal.services.audit import record_audit, snapshot
from leave_portal.services.balance import provision_for_new_user

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from leave_portal.schemas.auth import AuthContext
    from leave_portal.schemas.user import RegisterUserPayload

logger = logging.getLogger(__name__)


def _build_user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        display_name=user.display_name,
        first_name=user.first_name,
        last_name=user.last_name,
        role=Role(user.role),
        last_login=user.last_login,
        created_at=user.created_at,
    )


async def get_user_or_404(session: AsyncSession, user_id: uuid.UUID) -> User:
    """Fetch a user by ID. Raises NotFoundError if it does not exist."""
    user = await session.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def register_user(
    session: AsyncSession,
    auth: AuthContext,
    payload: RegisterUserPayload,
) -> RegisterUserResponse:
    """Create or refresh a directory entry keyed by email.

    A first registration provisions the current year's balances in the same
    transaction. Later registrations only refresh the profile fields and
    last_login; balances are left to the provisioning worker.
    """
    result = await session.execute(select(User).where(col(User.email) == payload.email))
    user = result.scalar_one_or_none()
    login_at = now_utc()

    provisioned = 0
    if user is None:
        user = User(
            email=payload.email,
            display_name=payload.display_name,
            first_name=payload.first_name,
            last_name=payload.last_name,
            role=payload.role.value,
            last_login=login_at,
        )
        session.add(user)
        await session.flush()

        year = date.today().year
        provisioned = await provision_for_new_user(session, user.id, year)
        await record_audit(
            session,
            actor_id=auth.user_id,
            entity_type=AuditEntityType.USER,
            entity_id=user.id,
            action=AuditAction.CREATE,
            after=snapshot(user),
        )
        await record_audit(
            session,
            actor_id=auth.user_id,
            entity_type=AuditEntityType.BALANCE,
            entity_id=user.id,
            action=AuditAction.PROVISION,
            after={"year": year, "rows_created": provisioned},
        )
        logger.info("Registered user %s (%s); provisioned %d balances for %d", user.id, user.email, provisioned, year)
    else:
        before = snapshot(user)
        user.display_name = payload.display_name
        user.first_name = payload.first_name
        user.last_name = payload.last_name
        user.role = payload.role.value
        user.last_login = login_at
        await session.flush()
        await record_audit(
            session,
            actor_id=auth.user_id,
            entity_type=AuditEntityType.USER,
            entity_id=user.id,
            action=AuditAction.UPDATE,
            before=before,
            after=snapshot(user),
        )
        logger.info("Refreshed user %s (%s)", user.id, user.email)

    await session.commit()
    return RegisterUserResponse(**_build_user_response(user).model_dump(), balances_provisioned=provisioned)


async def list_users(session: AsyncSession) -> UserListResponse:
    """All users ordered by display name."""
    result = await session.execute(select(User).order_by(col(User.display_name), col(User.id)))
    users = result.scalars().all()
    return UserListResponse(items=[_build_user_response(u) for u in users], total=len(users))
