# ruff: noqa: TC003
from __future__ import annotations

import uuid

import sqlalchemy as sa
from sqlmodel import Field

from leave_portal.models.base import UpdatedAtMixin, UUIDBase


class LeaveBalance(UUIDBase, UpdatedAtMixin, table=True):
    """Allotted vs. consumed days for one user, leave type and year."""

    __tablename__ = "leave_balance"
    __table_args__ = (
        sa.UniqueConstraint("user_id", "leave_type_id", "year", name="uq_balance_user_type_year"),
        sa.CheckConstraint("used_days >= 0", name="ck_balance_used_non_negative"),
    )

    user_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    leave_type_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("leave_type.id", ondelete="CASCADE"), nullable=False),
    )
    year: int = Field(index=True)
    total_days: int = Field(default=0, sa_column_kwargs={"server_default": "0"})
    used_days: int = Field(default=0, sa_column_kwargs={"server_default": "0"})

    @property
    def remaining_days(self) -> int:
        """Derived on read so it can never drift from the two counters."""
        return self.total_days - self.used_days
