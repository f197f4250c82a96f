# ruff: noqa: TC003
"""Request store: durable leave requests and their owner/admin queries."""

from __future__ import annotations

import uuid
from datetime import date
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select, update
from sqlalchemy.orm import aliased
from sqlmodel import col

from leave_portal.exceptions import ForbiddenError, InvalidInputError, InvalidStateError, NotFoundError
from leave_portal.models.base import now_utc
from leave_portal.models.enums import RequestStatus
from leave_portal.models.leave_type import LeaveType
from leave_portal.models.request import LeaveRequest
from leave_portal.models.user import User
from leave_portal.schemas.request import LeaveRequestListResponse, LeaveRequestResponse

if TYPE_CHECKING:
    from collections.abc import Collection

    from sqlalchemy import ColumnElement, Select
    from sqlalchemy.ext.asyncio import AsyncSession

    from leave_portal.schemas.auth import AuthContext


def calculate_days_count(start_date: date, end_date: date) -> int:
    """Inclusive calendar-day count: a same-day request is one day."""
    return (end_date - start_date).days + 1


MIN_YEAR = 1
MAX_YEAR = 9998


def year_bounds(year: int) -> tuple[date, date]:
    """Half-open [Jan 1 of year, Jan 1 of next year) range."""
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise InvalidInputError(f"Year must be between {MIN_YEAR} and {MAX_YEAR}")
    return date(year, 1, 1), date(year + 1, 1, 1)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _build_request_response(
    request: LeaveRequest,
    user_name: str | None = None,
    user_email: str | None = None,
    leave_type_name: str | None = None,
    approved_by_name: str | None = None,
) -> LeaveRequestResponse:
    """Map a request model (plus joined display fields) to its response schema."""
    return LeaveRequestResponse(
        id=request.id,
        user_id=request.user_id,
        leave_type_id=request.leave_type_id,
        start_date=request.start_date,
        end_date=request.end_date,
        days_count=request.days_count,
        reason=request.reason,
        status=RequestStatus(request.status),
        approved_by=request.approved_by,
        approved_at=request.approved_at,
        rejection_reason=request.rejection_reason,
        ledger_year=request.ledger_year,
        created_at=request.created_at,
        updated_at=request.updated_at,
        user_name=user_name,
        user_email=user_email,
        leave_type_name=leave_type_name,
        approved_by_name=approved_by_name,
    )


def _enriched_select() -> Select[Any]:
    """Requests joined with requester, leave type and (optional) approver display fields."""
    approver = aliased(User)
    return (
        select(
            LeaveRequest,
            col(User.display_name),
            col(User.email),
            col(LeaveType.name),
            approver.display_name,
        )
        .join(User, col(User.id) == col(LeaveRequest.user_id))
        .join(LeaveType, col(LeaveType.id) == col(LeaveRequest.leave_type_id))
        .outerjoin(approver, approver.id == col(LeaveRequest.approved_by))
    )


async def _get_request_for_update(session: AsyncSession, request_id: uuid.UUID) -> LeaveRequest:
    """Fetch a request with a FOR UPDATE lock and fresh column values."""
    result = await session.execute(
        select(LeaveRequest)
        .where(col(LeaveRequest.id) == request_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    request = result.scalar_one_or_none()
    if request is None:
        raise NotFoundError("Leave request not found")
    return request


async def _set_status(
    session: AsyncSession,
    request: LeaveRequest,
    expected: Collection[RequestStatus],
    new_status: RequestStatus,
    **fields: Any,
) -> None:
    """Move ``request`` to ``new_status`` only if its stored status is still one of ``expected``.

    The WHERE clause on the prior status is the last line of defence against a
    concurrent transition: if another transaction got there first, zero rows
    match and InvalidStateError is raised before anything else is written.
    Used only by the lifecycle engine.
    """
    result = await session.execute(
        update(LeaveRequest)
        .where(
            col(LeaveRequest.id) == request.id,
            col(LeaveRequest.status).in_([s.value for s in expected]),
        )
        .values(status=new_status.value, updated_at=now_utc(), **fields)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:  # type: ignore[attr-defined]
        raise InvalidStateError(f"Leave request can no longer be moved to {new_status.value}")
    await session.refresh(request)


async def _list_requests(
    session: AsyncSession,
    filters: list[ColumnElement[bool]],
    offset: int,
    limit: int,
) -> LeaveRequestListResponse:
    count_result = await session.execute(select(func.count()).select_from(LeaveRequest).where(*filters))
    total = count_result.scalar_one()

    result = await session.execute(
        _enriched_select()
        .where(*filters)
        .order_by(col(LeaveRequest.created_at).desc(), col(LeaveRequest.id))
        .offset(offset)
        .limit(limit)
    )
    return LeaveRequestListResponse(
        items=[_build_request_response(*row) for row in result.all()],
        total=total,
    )


def _common_filters(status_filter: RequestStatus | None, year: int | None) -> list[ColumnElement[bool]]:
    filters: list[ColumnElement[bool]] = []
    if status_filter is not None:
        filters.append(col(LeaveRequest.status) == status_filter.value)
    if year is not None:
        year_start, next_year_start = year_bounds(year)
        filters.append(col(LeaveRequest.start_date) >= year_start)
        filters.append(col(LeaveRequest.start_date) < next_year_start)
    return filters


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def create_request_record(
    session: AsyncSession,
    user_id: uuid.UUID,
    leave_type_id: uuid.UUID,
    start_date: date,
    end_date: date,
    reason: str | None,
) -> LeaveRequest:
    """Stage a new PENDING request. Flushes but does not commit.

    Date ordering and balance sufficiency are not checked here; that is the
    lifecycle engine's job.
    """
    request = LeaveRequest(
        user_id=user_id,
        leave_type_id=leave_type_id,
        start_date=start_date,
        end_date=end_date,
        days_count=calculate_days_count(start_date, end_date),
        reason=reason,
        status=RequestStatus.PENDING.value,
    )
    session.add(request)
    await session.flush()
    return request


async def get_request(
    session: AsyncSession,
    request_id: uuid.UUID,
    actor: AuthContext | None = None,
) -> LeaveRequestResponse:
    """Get a single request with display fields.

    When ``actor`` is given, non-admins may only read their own requests.
    """
    result = await session.execute(_enriched_select().where(col(LeaveRequest.id) == request_id))
    row = result.one_or_none()
    if row is None:
        raise NotFoundError("Leave request not found")

    request = row[0]
    if actor is not None and not actor.is_admin and request.user_id != actor.user_id:
        raise ForbiddenError("You can only view your own leave requests")
    return _build_request_response(*row)


async def list_requests_for_user(
    session: AsyncSession,
    user_id: uuid.UUID,
    status_filter: RequestStatus | None = None,
    year: int | None = None,
    offset: int = 0,
    limit: int = 50,
) -> LeaveRequestListResponse:
    """A user's own requests, newest first."""
    filters = [col(LeaveRequest.user_id) == user_id, *_common_filters(status_filter, year)]
    return await _list_requests(session, filters, offset, limit)


async def list_all_requests(
    session: AsyncSession,
    status_filter: RequestStatus | None = None,
    year: int | None = None,
    user_id: uuid.UUID | None = None,
    offset: int = 0,
    limit: int = 100,
) -> LeaveRequestListResponse:
    """Every user's requests (administrative), newest first."""
    filters = _common_filters(status_filter, year)
    if user_id is not None:
        filters.append(col(LeaveRequest.user_id) == user_id)
    return await _list_requests(session, filters, offset, limit)
