"""Audit trail helpers. Entries join the caller's transaction and are never updated."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from leave_portal.models.audit import AuditLog
from leave_portal.models.enums import AuditEntityType

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlmodel import SQLModel

    from leave_portal.models.enums import AuditAction
    from leave_portal.models.request import LeaveRequest


def snapshot(model: SQLModel) -> dict[str, Any]:
    """JSON-safe copy of a row's column values."""
    return model.model_dump(mode="json")


async def record_audit(
    session: AsyncSession,
    *,
    actor_id: uuid.UUID,
    entity_type: AuditEntityType,
    entity_id: uuid.UUID,
    action: AuditAction,
    before: dict[str, Any] | None = None,
    after: dict[str, Any] | None = None,
) -> AuditLog:
    entry = AuditLog(
        actor_id=actor_id,
        entity_type=entity_type.value,
        entity_id=entity_id,
        action=action.value,
        before_json=before,
        after_json=after,
    )
    session.add(entry)
    return entry


async def record_request_transition(
    session: AsyncSession,
    actor_id: uuid.UUID,
    request: LeaveRequest,
    action: AuditAction,
    before: dict[str, Any] | None = None,
) -> AuditLog:
    """Record a request's move into its current state, snapshotting it as the after-image."""
    return await record_audit(
        session,
        actor_id=actor_id,
        entity_type=AuditEntityType.REQUEST,
        entity_id=request.id,
        action=action,
        before=before,
        after=snapshot(request),
    )
