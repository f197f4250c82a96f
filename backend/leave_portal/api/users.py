# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

from fastapi import APIRouter

from leave_portal.api.deps import AdminDep
from leave_portal.db import SessionDep
from leave_portal.schemas.user import RegisterUserPayload, RegisterUserResponse, UserListResponse
from leave_portal.services import user as user_service

users_router = APIRouter(prefix="/users", tags=["users"])


@users_router.post("", response_model=RegisterUserResponse)
async def register_user(
    payload: RegisterUserPayload,
    session: SessionDep,
    auth: AdminDep,
) -> RegisterUserResponse:
    """Register or refresh a user from identity claims (admin only).

    First registration provisions the current year's balances.
    """
    return await user_service.register_user(session, auth, payload)


@users_router.get("", response_model=UserListResponse)
async def list_users(session: SessionDep, auth: AdminDep) -> UserListResponse:
    """List all users (admin only)."""
    return await user_service.list_users(session)
