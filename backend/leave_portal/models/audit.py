# ruff: noqa: TC003
from __future__ import annotations

import uuid
from typing import Any

import sqlalchemy as sa
from sqlmodel import Field

from leave_portal.models.base import TimestampMixin, UUIDBase


class AuditLog(UUIDBase, TimestampMixin, table=True):
    """Append-only trail of leave mutations; written in the mutating transaction."""

    __tablename__ = "audit_log"
    __table_args__ = (
        sa.Index("ix_audit_entity", "entity_type", "entity_id"),
        sa.Index("ix_audit_created_at", "created_at"),
    )

    actor_id: uuid.UUID = Field(sa_type=sa.Uuid, index=True)
    entity_type: str = Field(max_length=20)
    entity_id: uuid.UUID = Field(sa_type=sa.Uuid)
    action: str = Field(max_length=20)
    before_json: dict[str, Any] | None = Field(default=None, sa_type=sa.JSON)
    after_json: dict[str, Any] | None = Field(default=None, sa_type=sa.JSON)
