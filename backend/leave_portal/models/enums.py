from __future__ import annotations

import enum


class Role(enum.StrEnum):
    """Role attribute supplied by the identity provider."""

    ADMIN = "ADMIN"
    USER = "USER"


class RequestStatus(enum.StrEnum):
    """State machine for leave requests.

    PENDING is the initial state. REJECTED and CANCELLED are terminal;
    APPROVED can still move to CANCELLED.
    """

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class AuditEntityType(enum.StrEnum):
    """Entity type recorded in the audit log."""

    REQUEST = "REQUEST"
    BALANCE = "BALANCE"
    USER = "USER"


class AuditAction(enum.StrEnum):
    """Action recorded in the audit log."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    APPROVE = "APPROVE"
    REJECT = "REJECT"
    CANCEL = "CANCEL"
    PROVISION = "PROVISION"
