# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query, status

from leave_portal.api.deps import AdminDep, AuthDep
from leave_portal.db import SessionDep
from leave_portal.models.enums import RequestStatus
from leave_portal.schemas.request import (
    CreateLeaveRequestPayload,
    LeaveRequestListResponse,
    LeaveRequestResponse,
    RejectPayload,
)
from leave_portal.services import lifecycle as lifecycle_service
from leave_portal.services import request as request_service
from leave_portal.services.request import MAX_YEAR, MIN_YEAR

requests_router = APIRouter(prefix="/requests", tags=["requests"])

admin_requests_router = APIRouter(prefix="/admin/requests", tags=["requests"])


@requests_router.post("", response_model=LeaveRequestResponse, status_code=status.HTTP_201_CREATED)
async def create_request(
    payload: CreateLeaveRequestPayload,
    session: SessionDep,
    auth: AuthDep,
) -> LeaveRequestResponse:
    """Apply for leave."""
    return await lifecycle_service.create_request(session, auth, payload)


@requests_router.get("", response_model=LeaveRequestListResponse)
async def list_my_requests(
    session: SessionDep,
    auth: AuthDep,
    status_filter: RequestStatus | None = Query(default=None, alias="status"),
    year: int | None = Query(default=None, ge=MIN_YEAR, le=MAX_YEAR),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> LeaveRequestListResponse:
    """List the caller's own requests, newest first."""
    return await request_service.list_requests_for_user(session, auth.user_id, status_filter, year, offset, limit)


@requests_router.get("/{request_id}", response_model=LeaveRequestResponse)
async def get_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> LeaveRequestResponse:
    """Get a single request. Non-admins only see their own."""
    return await request_service.get_request(session, request_id, actor=auth)


@requests_router.post("/{request_id}/cancel", response_model=LeaveRequestResponse)
async def cancel_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> LeaveRequestResponse:
    """Cancel the caller's own pending or approved request."""
    return await lifecycle_service.cancel_request(session, auth, request_id)


@admin_requests_router.get("", response_model=LeaveRequestListResponse)
async def list_all_requests(
    session: SessionDep,
    auth: AdminDep,
    status_filter: RequestStatus | None = Query(default=None, alias="status"),
    year: int | None = Query(default=None, ge=MIN_YEAR, le=MAX_YEAR),
    user_id: uuid.UUID | None = Query(default=None),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=500),
) -> LeaveRequestListResponse:
    """List every user's requests (admin only)."""
    return await request_service.list_all_requests(session, status_filter, year, user_id, offset, limit)


@admin_requests_router.post("/{request_id}/approve", response_model=LeaveRequestResponse)
async def approve_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
) -> LeaveRequestResponse:
    """Approve a pending request and debit the balance (admin only)."""
    return await lifecycle_service.approve_request(session, auth, request_id)


@admin_requests_router.post("/{request_id}/reject", response_model=LeaveRequestResponse)
async def reject_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
    payload: RejectPayload | None = None,
) -> LeaveRequestResponse:
    """Reject a pending request (admin only)."""
    return await lifecycle_service.reject_request(session, auth, request_id, payload)
