"""Leave-type catalog: seeded once at startup, read-only afterwards."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from leave_portal.exceptions import NotFoundError
from leave_portal.models.leave_type import LeaveType
from leave_portal.schemas.leave_type import LeaveTypeListResponse, LeaveTypeResponse

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

# (name, description, days_per_year)
DEFAULT_LEAVE_TYPES: tuple[tuple[str, str, int], ...] = (
    ("Casual Leave", "Short personal absences", 12),
    ("Paid Leave", "Planned paid time off", 18),
    ("Sick Leave", "Absence due to illness or medical appointments", 12),
    ("Unpaid Leave", "Time off without pay", 30),
)


def _build_leave_type_response(leave_type: LeaveType) -> LeaveTypeResponse:
    return LeaveTypeResponse(
        id=leave_type.id,
        name=leave_type.name,
        description=leave_type.description,
        days_per_year=leave_type.days_per_year,
    )


async def seed_leave_types(session: AsyncSession) -> int:
    """Insert any missing default leave types. Returns how many were created."""
    result = await session.execute(select(col(LeaveType.name)))
    existing = set(result.scalars().all())

    created = 0
    for name, description, days_per_year in DEFAULT_LEAVE_TYPES:
        if name in existing:
            continue
        session.add(LeaveType(name=name, description=description, days_per_year=days_per_year))
        created += 1

    if created:
        await session.commit()
        logger.info("Seeded %d leave types", created)
    return created


async def list_leave_types(session: AsyncSession) -> list[LeaveType]:
    """Return the whole catalog ordered by name."""
    result = await session.execute(select(LeaveType).order_by(col(LeaveType.name)))
    return list(result.scalars().all())


async def get_leave_type_or_404(session: AsyncSession, leave_type_id: uuid.UUID) -> LeaveType:
    """Fetch a leave type by ID. Raises NotFoundError if it does not exist."""
    leave_type = await session.get(LeaveType, leave_type_id)
    if leave_type is None:
        raise NotFoundError("Leave type not found")
    return leave_type


async def get_leave_types(session: AsyncSession) -> LeaveTypeListResponse:
    """Catalog read for the HTTP layer."""
    leave_types = await list_leave_types(session)
    return LeaveTypeListResponse(
        items=[_build_leave_type_response(t) for t in leave_types],
        total=len(leave_types),
    )
