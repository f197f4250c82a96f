"""Balance ledger: per-user, per-leave-type, per-year day counters."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from leave_portal.exceptions import NotFoundError
from leave_portal.models.balance import LeaveBalance
from leave_portal.models.leave_type import LeaveType
from leave_portal.models.user import User
from leave_portal.schemas.balance import BalanceListResponse, BalanceResponse

if TYPE_CHECKING:
    import uuid

    from sqlalchemy import ColumnElement
    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _balance_key_filter(user_id: uuid.UUID, leave_type_id: uuid.UUID, year: int) -> list[ColumnElement[bool]]:
    return [
        col(LeaveBalance.user_id) == user_id,
        col(LeaveBalance.leave_type_id) == leave_type_id,
        col(LeaveBalance.year) == year,
    ]


async def _get_balance_for_update(
    session: AsyncSession,
    user_id: uuid.UUID,
    leave_type_id: uuid.UUID,
    year: int,
) -> LeaveBalance:
    """Load the balance row with a FOR UPDATE lock. Raises NotFoundError if absent.

    populate_existing makes sure the locked row's current values replace any
    stale copy already held in the session's identity map.
    """
    result = await session.execute(
        select(LeaveBalance)
        .where(*_balance_key_filter(user_id, leave_type_id, year))
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    balance = result.scalar_one_or_none()
    if balance is None:
        raise NotFoundError(f"No leave balance for this leave type in {year}")
    return balance


async def _provisioned_leave_type_ids(session: AsyncSession, user_id: uuid.UUID, year: int) -> set[uuid.UUID]:
    result = await session.execute(
        select(col(LeaveBalance.leave_type_id)).where(
            col(LeaveBalance.user_id) == user_id,
            col(LeaveBalance.year) == year,
        )
    )
    return set(result.scalars().all())


# ---------------------------------------------------------------------------
# Read path
# ---------------------------------------------------------------------------


async def get_balance(
    session: AsyncSession,
    user_id: uuid.UUID,
    leave_type_id: uuid.UUID,
    year: int,
) -> LeaveBalance | None:
    """Plain lookup of a single balance row."""
    result = await session.execute(select(LeaveBalance).where(*_balance_key_filter(user_id, leave_type_id, year)))
    return result.scalar_one_or_none()


async def get_balances_for_user(
    session: AsyncSession,
    user_id: uuid.UUID,
    year: int,
) -> BalanceListResponse:
    """All balances of a user for one year, ordered by leave-type name."""
    result = await session.execute(
        select(LeaveBalance, col(LeaveType.name))
        .join(LeaveType, col(LeaveType.id) == col(LeaveBalance.leave_type_id))
        .where(col(LeaveBalance.user_id) == user_id, col(LeaveBalance.year) == year)
        .order_by(col(LeaveType.name))
    )
    items = [
        BalanceResponse(
            id=balance.id,
            user_id=balance.user_id,
            leave_type_id=balance.leave_type_id,
            leave_type_name=leave_type_name,
            year=balance.year,
            total_days=balance.total_days,
            used_days=balance.used_days,
            updated_at=balance.updated_at,
        )
        for balance, leave_type_name in result.all()
    ]
    return BalanceListResponse(items=items, total=len(items), year=year)


async def get_user_balances(
    session: AsyncSession,
    user_id: uuid.UUID,
    year: int,
) -> BalanceListResponse:
    """Administrative read of another user's balances. Raises NotFoundError for unknown users."""
    if await session.get(User, user_id) is None:
        raise NotFoundError("User not found")
    return await get_balances_for_user(session, user_id, year)


# ---------------------------------------------------------------------------
# Write path
# ---------------------------------------------------------------------------


async def apply_usage(
    session: AsyncSession,
    user_id: uuid.UUID,
    leave_type_id: uuid.UUID,
    year: int,
    days: int,
) -> LeaveBalance:
    """Add ``days`` to used_days.

    No sufficiency check and not idempotent: every call debits again. The
    lifecycle engine is the only caller and guarantees one call per approval.
    Flushes but does not commit.
    """
    balance = await _get_balance_for_update(session, user_id, leave_type_id, year)
    balance.used_days += days
    balance.touch()
    await session.flush()
    return balance


async def reverse_usage(
    session: AsyncSession,
    user_id: uuid.UUID,
    leave_type_id: uuid.UUID,
    year: int,
    days: int,
) -> LeaveBalance:
    """Subtract ``days`` from used_days, never going below zero.

    Hitting the floor means more days are being returned than were ever
    debited; that is logged but the floor still applies. Flushes but does
    not commit.
    """
    balance = await _get_balance_for_update(session, user_id, leave_type_id, year)
    if days > balance.used_days:
        logger.warning(
            "Reversal of %d days exceeds used_days=%d for user=%s leave_type=%s year=%d; clamping at zero",
            days,
            balance.used_days,
            user_id,
            leave_type_id,
            year,
        )
    balance.used_days = max(0, balance.used_days - days)
    balance.touch()
    await session.flush()
    return balance


async def provision_for_new_user(
    session: AsyncSession,
    user_id: uuid.UUID,
    year: int,
) -> int:
    """Create one balance row per leave type for ``year``, skipping rows that exist.

    Safe to call any number of times, including from concurrent runs: each
    insert sits in its own savepoint, so a row another transaction created
    first is skipped instead of failing the whole run. Flushes but does not
    commit; returns the number of rows created.
    """
    existing = await _provisioned_leave_type_ids(session, user_id, year)

    leave_types_result = await session.execute(select(LeaveType).order_by(col(LeaveType.name)))
    created = 0
    for leave_type in leave_types_result.scalars().all():
        if leave_type.id in existing:
            continue
        balance = LeaveBalance(
            user_id=user_id,
            leave_type_id=leave_type.id,
            year=year,
            total_days=leave_type.days_per_year,
            used_days=0,
        )
        try:
            async with session.begin_nested():
                session.add(balance)
                await session.flush()
        except IntegrityError:
            logger.info(
                "Balance for user=%s leave_type=%s year=%d already provisioned elsewhere", user_id, leave_type.id, year
            )
            continue
        created += 1

    return created


async def provision_year_for_all_users(session: AsyncSession, year: int) -> int:
    """Provision ``year`` balances for every registered user and commit.

    Returns the total number of rows created; zero on a repeated run.
    """
    users_result = await session.execute(select(col(User.id)))
    created = 0
    for user_id in users_result.scalars().all():
        created += await provision_for_new_user(session, user_id, year)
    await session.commit()
    return created
