"""Tests for the user directory and first-login provisioning."""

from __future__ import annotations

import uuid
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from leave_portal.models import AuditLog, Role
from leave_portal.models.enums import AuditAction, AuditEntityType
from leave_portal.schemas.user import RegisterUserPayload
from leave_portal.services.balance import get_balances_for_user
from leave_portal.services.user import list_users, register_user

if TYPE_CHECKING:
    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncSession

    from leave_portal.models import LeaveType, User
    from leave_portal.schemas.auth import AuthContext


def _admin_headers(admin: User) -> dict[str, str]:
    return {"X-User-Id": str(admin.id), "X-Role": Role.ADMIN.value}


async def test_register_new_user_provisions_current_year(
    db_session: AsyncSession,
    admin_auth: AuthContext,
    leave_types: dict[str, LeaveType],
) -> None:
    response = await register_user(
        db_session,
        admin_auth,
        RegisterUserPayload(email="frank@acme.com", display_name="Frank Fisher", first_name="Frank"),
    )
    assert response.balances_provisioned == len(leave_types)
    assert response.role == Role.USER
    assert response.last_login is not None

    balances = await get_balances_for_user(db_session, response.id, date.today().year)
    assert balances.total == len(leave_types)
    assert {b.leave_type_name: b.total_days for b in balances.items} == {
        name: leave_type.days_per_year for name, leave_type in leave_types.items()
    }


async def test_register_existing_user_refreshes_profile(
    db_session: AsyncSession,
    admin_auth: AuthContext,
    leave_types: dict[str, LeaveType],
) -> None:
    first = await register_user(
        db_session, admin_auth, RegisterUserPayload(email="frank@acme.com", display_name="Frank")
    )
    second = await register_user(
        db_session,
        admin_auth,
        RegisterUserPayload(email="frank@acme.com", display_name="Frank Fisher", role=Role.ADMIN),
    )

    assert second.id == first.id
    assert second.display_name == "Frank Fisher"
    assert second.role == Role.ADMIN
    assert second.balances_provisioned == 0

    balances = await get_balances_for_user(db_session, first.id, date.today().year)
    assert balances.total == len(leave_types)


async def test_register_writes_audit_entries(
    db_session: AsyncSession,
    admin_auth: AuthContext,
    leave_types: dict[str, LeaveType],
) -> None:
    response = await register_user(
        db_session, admin_auth, RegisterUserPayload(email="frank@acme.com", display_name="Frank")
    )
    result = await db_session.execute(
        select(col(AuditLog.entity_type), col(AuditLog.action)).where(col(AuditLog.entity_id) == response.id)
    )
    assert {tuple(row) for row in result.all()} == {
        (AuditEntityType.USER.value, AuditAction.CREATE.value),
        (AuditEntityType.BALANCE.value, AuditAction.PROVISION.value),
    }


async def test_list_users_ordered_by_display_name(
    db_session: AsyncSession,
    employee: User,
    admin: User,
) -> None:
    response = await list_users(db_session)
    assert response.total == 2
    assert [u.display_name for u in response.items] == ["Alice Anders", "Bob Boss"]


async def test_register_endpoint(async_client: AsyncClient, admin: User) -> None:
    response = await async_client.post(
        "/users",
        json={"email": "gina@acme.com", "display_name": "Gina", "last_name": "Gray"},
        headers=_admin_headers(admin),
    )
    assert response.status_code == 200
    data = response.json()
    assert data["email"] == "gina@acme.com"
    assert data["last_name"] == "Gray"
    assert data["balances_provisioned"] == 4


async def test_register_endpoint_requires_admin(async_client: AsyncClient, employee: User) -> None:
    response = await async_client.post(
        "/users",
        json={"email": "gina@acme.com", "display_name": "Gina"},
        headers={"X-User-Id": str(employee.id)},
    )
    assert response.status_code == 403


async def test_register_endpoint_invalid_email(async_client: AsyncClient, admin: User) -> None:
    response = await async_client.post(
        "/users",
        json={"email": "gina", "display_name": "Gina"},
        headers=_admin_headers(admin),
    )
    assert response.status_code == 422


async def test_list_users_endpoint(async_client: AsyncClient, admin: User, employee: User) -> None:
    response = await async_client.get("/users", headers=_admin_headers(admin))
    assert response.status_code == 200
    assert {item["email"] for item in response.json()["items"]} == {"alice@acme.com", "boss@acme.com"}


async def test_role_header_is_case_insensitive(async_client: AsyncClient, admin: User) -> None:
    response = await async_client.get("/users", headers={"X-User-Id": str(admin.id), "X-Role": "admin"})
    assert response.status_code == 200


async def test_missing_user_header_is_422(async_client: AsyncClient) -> None:
    response = await async_client.get("/users", headers={"X-Role": "ADMIN"})
    assert response.status_code == 422


async def test_malformed_user_header_is_422(async_client: AsyncClient) -> None:
    response = await async_client.get("/users", headers={"X-User-Id": "not-a-uuid", "X-Role": "ADMIN"})
    assert response.status_code == 422


async def test_unknown_role_is_not_admin(async_client: AsyncClient) -> None:
    response = await async_client.get("/users", headers={"X-User-Id": str(uuid.uuid4()), "X-Role": "MANAGER"})
    assert response.status_code == 403
