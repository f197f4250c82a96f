"""Reporting service: per-user summaries and per-leave-type statistics."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import and_, case, func, select, true
from sqlmodel import col

from leave_portal.exceptions import InvalidInputError
from leave_portal.models.balance import LeaveBalance
from leave_portal.models.enums import RequestStatus
from leave_portal.models.leave_type import LeaveType
from leave_portal.models.request import LeaveRequest
from leave_portal.models.user import User
from leave_portal.schemas.report import StatsReportResponse, StatsRow, SummaryReportResponse, SummaryRow
from leave_portal.services.request import year_bounds
from leave_portal.services.user import get_user_or_404

if TYPE_CHECKING:
    import uuid

    from sqlalchemy import ColumnElement
    from sqlalchemy.ext.asyncio import AsyncSession


def _count_with_status(status: RequestStatus) -> ColumnElement[int]:
    # CASE without ELSE yields NULL, which COUNT skips.
    return func.count(case((col(LeaveRequest.status) == status.value, 1)))


def _approved_days_taken() -> ColumnElement[int]:
    return func.coalesce(
        func.sum(
            case(
                (col(LeaveRequest.status) == RequestStatus.APPROVED.value, col(LeaveRequest.days_count)),
                else_=0,
            )
        ),
        0,
    )


def _period_bounds(year: int, month: int | None) -> tuple[date, date]:
    year_start, next_year_start = year_bounds(year)
    if month is None:
        return year_start, next_year_start
    if not 1 <= month <= 12:
        raise InvalidInputError("Month must be between 1 and 12")
    end = next_year_start if month == 12 else date(year, month + 1, 1)
    return date(year, month, 1), end


async def get_summary_report(
    session: AsyncSession,
    year: int,
    *,
    user_id: uuid.UUID | None = None,
    month: int | None = None,
) -> SummaryReportResponse:
    """Every user x every leave type for ``year``, zero-filled where nothing matches.

    Request counts only include requests whose start date falls in the year
    (and in ``month`` when given). Balance columns come from the year's
    balance row regardless of month.
    """
    period_start, period_end = _period_bounds(year, month)

    if user_id is not None:
        await get_user_or_404(session, user_id)

    query = (
        select(
            col(User.id).label("user_id"),
            col(User.display_name).label("display_name"),
            col(User.email).label("email"),
            col(LeaveType.id).label("leave_type_id"),
            col(LeaveType.name).label("leave_type"),
            _count_with_status(RequestStatus.APPROVED).label("approved_count"),
            _count_with_status(RequestStatus.REJECTED).label("rejected_count"),
            _count_with_status(RequestStatus.PENDING).label("pending_count"),
            _approved_days_taken().label("total_days_taken"),
            func.coalesce(col(LeaveBalance.total_days), 0).label("total_days"),
            func.coalesce(col(LeaveBalance.used_days), 0).label("used_days"),
        )
        .select_from(User)
        .join(LeaveType, true())
        .outerjoin(
            LeaveRequest,
            and_(
                col(LeaveRequest.user_id) == col(User.id),
                col(LeaveRequest.leave_type_id) == col(LeaveType.id),
                col(LeaveRequest.start_date) >= period_start,
                col(LeaveRequest.start_date) < period_end,
            ),
        )
        .outerjoin(
            LeaveBalance,
            and_(
                col(LeaveBalance.user_id) == col(User.id),
                col(LeaveBalance.leave_type_id) == col(LeaveType.id),
                col(LeaveBalance.year) == year,
            ),
        )
        .group_by(
            col(User.id),
            col(User.display_name),
            col(User.email),
            col(LeaveType.id),
            col(LeaveType.name),
            col(LeaveBalance.total_days),
            col(LeaveBalance.used_days),
        )
        .order_by(col(User.display_name), col(LeaveType.name))
    )
    if user_id is not None:
        query = query.where(col(User.id) == user_id)

    result = await session.execute(query)
    items = [
        SummaryRow(
            user_id=row.user_id,
            display_name=row.display_name,
            email=row.email,
            leave_type_id=row.leave_type_id,
            leave_type=row.leave_type,
            approved_count=int(row.approved_count),
            rejected_count=int(row.rejected_count),
            pending_count=int(row.pending_count),
            total_days_taken=int(row.total_days_taken),
            total_days=int(row.total_days),
            used_days=int(row.used_days),
            remaining_days=int(row.total_days) - int(row.used_days),
        )
        for row in result.all()
    ]
    return SummaryReportResponse(items=items, total=len(items), year=year, month=month)


async def get_stats_report(session: AsyncSession, year: int) -> StatsReportResponse:
    """Per-leave-type totals across all users for requests starting in ``year``."""
    year_start, next_year_start = year_bounds(year)

    result = await session.execute(
        select(
            col(LeaveType.id).label("leave_type_id"),
            col(LeaveType.name).label("leave_type"),
            func.count(col(LeaveRequest.user_id).distinct()).label("distinct_employees_used"),
            _approved_days_taken().label("total_days_taken"),
            _count_with_status(RequestStatus.PENDING).label("pending_count"),
            _count_with_status(RequestStatus.APPROVED).label("approved_count"),
            _count_with_status(RequestStatus.REJECTED).label("rejected_count"),
        )
        .select_from(LeaveType)
        .outerjoin(
            LeaveRequest,
            and_(
                col(LeaveRequest.leave_type_id) == col(LeaveType.id),
                col(LeaveRequest.start_date) >= year_start,
                col(LeaveRequest.start_date) < next_year_start,
            ),
        )
        .group_by(col(LeaveType.id), col(LeaveType.name))
        .order_by(col(LeaveType.name))
    )
    items = [
        StatsRow(
            leave_type_id=row.leave_type_id,
            leave_type=row.leave_type,
            distinct_employees_used=int(row.distinct_employees_used),
            total_days_taken=int(row.total_days_taken),
            pending_count=int(row.pending_count),
            approved_count=int(row.approved_count),
            rejected_count=int(row.rejected_count),
        )
        for row in result.all()
    ]
    return StatsReportResponse(items=items, total=len(items), year=year)
