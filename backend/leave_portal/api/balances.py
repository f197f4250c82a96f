# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter

from leave_portal.api.deps import AdminDep, AuthDep, YearDep
from leave_portal.db import SessionDep
from leave_portal.schemas.balance import BalanceListResponse
from leave_portal.services import balance as balance_service

balances_router = APIRouter(prefix="/balances", tags=["balances"])

user_balances_router = APIRouter(prefix="/users/{user_id}/balances", tags=["balances"])


@balances_router.get("", response_model=BalanceListResponse)
async def get_my_balances(
    session: SessionDep,
    auth: AuthDep,
    year: YearDep,
) -> BalanceListResponse:
    """Get the caller's balances for a year."""
    return await balance_service.get_balances_for_user(session, auth.user_id, year)


@user_balances_router.get("", response_model=BalanceListResponse)
async def get_user_balances(
    user_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
    year: YearDep,
) -> BalanceListResponse:
    """Get any user's balances for a year (admin only)."""
    return await balance_service.get_user_balances(session, user_id, year)
