# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, computed_field


class BalanceResponse(BaseModel):
    """Balance for a single leave type in a given year."""

    id: uuid.UUID
    user_id: uuid.UUID
    leave_type_id: uuid.UUID
    leave_type_name: str
    year: int
    total_days: int
    used_days: int
    updated_at: datetime | None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def remaining_days(self) -> int:
        return self.total_days - self.used_days


class BalanceListResponse(BaseModel):
    """All leave-type balances for a user and year, ordered by leave-type name."""

    items: list[BalanceResponse]
    total: int
    year: int
