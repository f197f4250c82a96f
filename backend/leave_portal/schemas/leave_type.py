# ruff: noqa: TC003
from __future__ import annotations

import uuid

from pydantic import BaseModel


class LeaveTypeResponse(BaseModel):
    """A leave-type catalog entry."""

    id: uuid.UUID
    name: str
    description: str | None
    days_per_year: int


class LeaveTypeListResponse(BaseModel):
    """The full leave-type catalog."""

    items: list[LeaveTypeResponse]
    total: int
