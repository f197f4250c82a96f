from fastapi import APIRouter

from leave_portal.api.deps import AuthDep
from leave_portal.db import SessionDep
from leave_portal.schemas.leave_type import LeaveTypeListResponse
from leave_portal.services import leave_type as leave_type_service

leave_types_router = APIRouter(prefix="/leave-types", tags=["leave-types"])


@leave_types_router.get("", response_model=LeaveTypeListResponse)
async def list_leave_types(session: SessionDep, auth: AuthDep) -> LeaveTypeListResponse:
    """List the leave-type catalog."""
    return await leave_type_service.get_leave_types(session)
