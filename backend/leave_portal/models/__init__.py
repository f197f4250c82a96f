from sqlmodel import SQLModel

from leave_portal.models.audit import AuditLog
from leave_portal.models.balance import LeaveBalance
from leave_portal.models.base import TimestampMixin, UpdatedAtMixin, UUIDBase
from leave_portal.models.enums import AuditAction, AuditEntityType, RequestStatus, Role
from leave_portal.models.leave_type import LeaveType
from leave_portal.models.request import LeaveRequest
from leave_portal.models.user import User

__all__ = [
    "AuditAction",
    "AuditEntityType",
    "AuditLog",
    "LeaveBalance",
    "LeaveRequest",
    "LeaveType",
    "RequestStatus",
    "Role",
    "SQLModel",
    "TimestampMixin",
    "UpdatedAtMixin",
    "User",
    "UUIDBase",
]
