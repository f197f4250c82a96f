# ruff: noqa: TC003
"""Leave request lifecycle: create, approve, reject and cancel.

Every transition runs in one transaction. Rows are read with FOR UPDATE
(request first, then balance) and all preconditions are checked before the
first write, so a failed transition leaves nothing behind. The ledger is
debited exactly when a request becomes APPROVED and credited exactly when an
APPROVED request is cancelled, which keeps used_days equal to the sum of
days_count over the currently approved requests.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import TYPE_CHECKING

from leave_portal.exceptions import (
    ForbiddenError,
    InsufficientBalanceError,
    InvalidInputError,
    InvalidStateError,
)
from leave_portal.models.base import now_utc
from leave_portal.models.enums import AuditAction, RequestStatus
from leave_portal.services.audit import record_request_transition, snapshot
from leave_portal.services.balance import _get_balance_for_update, apply_usage, reverse_usage
from leave_portal.services.leave_type import get_leave_type_or_404
from leave_portal.services.request import (
    _get_request_for_update,
    _set_status,
    create_request_record,
    get_request,
)
from leave_portal.services.user import get_user_or_404

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from leave_portal.schemas.auth import AuthContext
    from leave_portal.schemas.request import CreateLeaveRequestPayload, LeaveRequestResponse, RejectPayload

logger = logging.getLogger(__name__)


def current_ledger_year() -> int:
    """Calendar year whose balance an approval is charged against."""
    return date.today().year


async def create_request(
    session: AsyncSession,
    auth: AuthContext,
    payload: CreateLeaveRequestPayload,
) -> LeaveRequestResponse:
    """Apply for leave on behalf of the caller. The ledger is not touched."""
    if payload.end_date < payload.start_date:
        raise InvalidInputError("End date must not be before start date")

    await get_leave_type_or_404(session, payload.leave_type_id)
    await get_user_or_404(session, auth.user_id)

    leave_request = await create_request_record(
        session,
        auth.user_id,
        payload.leave_type_id,
        payload.start_date,
        payload.end_date,
        payload.reason,
    )

    await record_request_transition(session, auth.user_id, leave_request, AuditAction.CREATE)

    await session.commit()
    logger.info(
        "Leave request %s created by user=%s for %d days",
        leave_request.id,
        auth.user_id,
        leave_request.days_count,
    )
    return await get_request(session, leave_request.id)


async def approve_request(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
) -> LeaveRequestResponse:
    """Approve a PENDING request and debit the requester's balance.

    The balance checked is the current year's, re-read under lock now rather
    than whatever it was when the request was created, so approvals granted in
    the meantime are accounted for. The charged year is stored on the request.
    """
    leave_request = await _get_request_for_update(session, request_id)

    if leave_request.status != RequestStatus.PENDING.value:
        raise InvalidStateError("Only pending requests can be approved")

    year = current_ledger_year()
    balance = await _get_balance_for_update(session, leave_request.user_id, leave_request.leave_type_id, year)
    if balance.remaining_days < leave_request.days_count:
        raise InsufficientBalanceError(
            f"Insufficient leave balance: {balance.remaining_days} days remaining, "
            f"{leave_request.days_count} requested"
        )

    before = snapshot(leave_request)
    await _set_status(
        session,
        leave_request,
        expected=(RequestStatus.PENDING,),
        new_status=RequestStatus.APPROVED,
        approved_by=auth.user_id,
        approved_at=now_utc(),
        ledger_year=year,
    )
    await apply_usage(session, leave_request.user_id, leave_request.leave_type_id, year, leave_request.days_count)

    await record_request_transition(session, auth.user_id, leave_request, AuditAction.APPROVE, before=before)

    await session.commit()
    logger.info("Leave request %s approved by %s", leave_request.id, auth.user_id)
    return await get_request(session, leave_request.id)


async def reject_request(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
    payload: RejectPayload | None = None,
) -> LeaveRequestResponse:
    """Reject a PENDING request. The ledger is not touched."""
    leave_request = await _get_request_for_update(session, request_id)

    if leave_request.status != RequestStatus.PENDING.value:
        raise InvalidStateError("Only pending requests can be rejected")

    before = snapshot(leave_request)
    await _set_status(
        session,
        leave_request,
        expected=(RequestStatus.PENDING,),
        new_status=RequestStatus.REJECTED,
        approved_by=auth.user_id,
        approved_at=now_utc(),
        rejection_reason=payload.reason if payload else None,
    )

    await record_request_transition(session, auth.user_id, leave_request, AuditAction.REJECT, before=before)

    await session.commit()
    logger.info("Leave request %s rejected by %s", leave_request.id, auth.user_id)
    return await get_request(session, leave_request.id)


async def cancel_request(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
) -> LeaveRequestResponse:
    """Cancel the caller's own PENDING or APPROVED request.

    Only the owner may cancel, admins included. Cancelling an APPROVED
    request returns its days to the balance; a PENDING one never consumed any.
    """
    leave_request = await _get_request_for_update(session, request_id)

    if leave_request.user_id != auth.user_id:
        raise ForbiddenError("You can only cancel your own leave requests")
    if leave_request.status == RequestStatus.CANCELLED.value:
        raise InvalidStateError("Leave request is already cancelled")
    if leave_request.status == RequestStatus.REJECTED.value:
        raise InvalidStateError("Rejected leave requests cannot be cancelled")

    prior_status = RequestStatus(leave_request.status)
    year = leave_request.ledger_year if leave_request.ledger_year is not None else current_ledger_year()
    if prior_status is RequestStatus.APPROVED:
        # Lock the balance before the first write so a missing row aborts cleanly.
        await _get_balance_for_update(session, leave_request.user_id, leave_request.leave_type_id, year)

    before = snapshot(leave_request)
    await _set_status(
        session,
        leave_request,
        expected=(prior_status,),
        new_status=RequestStatus.CANCELLED,
    )
    if prior_status is RequestStatus.APPROVED:
        await reverse_usage(
            session, leave_request.user_id, leave_request.leave_type_id, year, leave_request.days_count
        )

    await record_request_transition(session, auth.user_id, leave_request, AuditAction.CANCEL, before=before)

    await session.commit()
    logger.info("Leave request %s cancelled by %s (was %s)", leave_request.id, auth.user_id, prior_status.value)
    return await get_request(session, leave_request.id)
