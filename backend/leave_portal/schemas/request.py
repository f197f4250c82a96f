# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field

from leave_portal.models.enums import RequestStatus

# ---------------------------------------------------------------------------
# Request payloads
# ---------------------------------------------------------------------------


class CreateLeaveRequestPayload(BaseModel):
    """Request body for applying for leave.

    Date ordering is checked by the lifecycle engine, not here, so that
    direct callers get the same error as HTTP clients.
    """

    leave_type_id: uuid.UUID
    start_date: date
    end_date: date
    reason: str | None = Field(default=None, max_length=2000)


class RejectPayload(BaseModel):
    """Request body for rejecting a pending request."""

    reason: str | None = Field(default=None, max_length=2000)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class LeaveRequestResponse(BaseModel):
    """A leave request with denormalized display fields."""

    id: uuid.UUID
    user_id: uuid.UUID
    leave_type_id: uuid.UUID
    start_date: date
    end_date: date
    days_count: int
    reason: str | None
    status: RequestStatus
    approved_by: uuid.UUID | None
    approved_at: datetime | None
    rejection_reason: str | None
    ledger_year: int | None
    created_at: datetime
    updated_at: datetime | None
    user_name: str | None = None
    user_email: str | None = None
    leave_type_name: str | None = None
    approved_by_name: str | None = None


class LeaveRequestListResponse(BaseModel):
    """Paginated list of leave requests, newest first."""

    items: list[LeaveRequestResponse]
    total: int
