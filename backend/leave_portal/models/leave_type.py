from __future__ import annotations

import sqlalchemy as sa
from sqlmodel import Field

from leave_portal.models.base import TimestampMixin, UUIDBase


class LeaveType(UUIDBase, TimestampMixin, table=True):
    """Catalog entry for a category of absence (e.g. Sick Leave)."""

    __tablename__ = "leave_type"
    __table_args__ = (sa.CheckConstraint("days_per_year >= 0", name="ck_leave_type_days_non_negative"),)

    name: str = Field(max_length=100, unique=True)
    description: str | None = None
    days_per_year: int = Field(default=0)
