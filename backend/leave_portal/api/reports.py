# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query

from leave_portal.api.deps import AdminDep, YearDep
from leave_portal.db import SessionDep
from leave_portal.schemas.report import StatsReportResponse, SummaryReportResponse
from leave_portal.services import report as report_service

reports_router = APIRouter(prefix="/reports", tags=["reports"])


@reports_router.get("/summary", response_model=SummaryReportResponse)
async def summary_report(
    session: SessionDep,
    auth: AdminDep,
    year: YearDep,
    user_id: uuid.UUID | None = Query(default=None),
    month: int | None = Query(default=None),
) -> SummaryReportResponse:
    """Per-user, per-leave-type usage summary (admin only)."""
    return await report_service.get_summary_report(session, year, user_id=user_id, month=month)


@reports_router.get("/stats", response_model=StatsReportResponse)
async def stats_report(
    session: SessionDep,
    auth: AdminDep,
    year: YearDep,
) -> StatsReportResponse:
    """Per-leave-type totals across all users (admin only)."""
    return await report_service.get_stats_report(session, year)
