# ruff: noqa: TC003
from __future__ import annotations

import uuid

from pydantic import BaseModel


class SummaryRow(BaseModel):
    """Leave activity for one user and one leave type."""

    user_id: uuid.UUID
    display_name: str
    email: str
    leave_type_id: uuid.UUID
    leave_type: str
    approved_count: int
    rejected_count: int
    pending_count: int
    total_days_taken: int
    total_days: int
    used_days: int
    remaining_days: int


class SummaryReportResponse(BaseModel):
    """Users x leave types summary for a year, optionally narrowed to a user or month."""

    items: list[SummaryRow]
    total: int
    year: int
    month: int | None = None


class StatsRow(BaseModel):
    """Aggregated activity for one leave type across all users."""

    leave_type_id: uuid.UUID
    leave_type: str
    distinct_employees_used: int
    total_days_taken: int
    pending_count: int
    approved_count: int
    rejected_count: int


class StatsReportResponse(BaseModel):
    """Per-leave-type statistics for a year."""

    items: list[StatsRow]
    total: int
    year: int
