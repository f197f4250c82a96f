from __future__ import annotations

import os

# Must be set before leave_portal.config is first imported.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

import uuid
from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import col

from leave_portal.db import get_session
from leave_portal.main import app
from leave_portal.models import LeaveBalance, LeaveType, Role, SQLModel, User
from leave_portal.schemas.auth import AuthContext
from leave_portal.services.balance import provision_for_new_user
from leave_portal.services.leave_type import seed_leave_types

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable

    from sqlalchemy.ext.asyncio import AsyncEngine

TEST_DATABASE_URL = "sqlite+aiosqlite://"
TEST_YEAR = 2025


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """Fresh in-memory SQLite database with the full schema, one per test."""
    _engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with _engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield _engine
    await _engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """Yield a database session wrapped in a transaction that rolls back after each test."""
    async with engine.connect() as conn:
        txn = await conn.begin()
        session = AsyncSession(bind=conn, expire_on_commit=False)
        yield session
        await session.close()
        await txn.rollback()


@pytest.fixture
async def async_client(db_session: AsyncSession) -> AsyncIterator[AsyncClient]:
    """Async HTTP client with the database session dependency overridden."""

    async def _override_get_session() -> AsyncIterator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_session] = _override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Domain fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def pinned_ledger_year(monkeypatch: pytest.MonkeyPatch) -> int:
    """Charge approvals against TEST_YEAR whatever today's date is."""
    monkeypatch.setattr("leave_portal.services.lifecycle.current_ledger_year", lambda: TEST_YEAR)
    return TEST_YEAR


@pytest.fixture
async def leave_types(db_session: AsyncSession) -> dict[str, LeaveType]:
    """The default catalog, keyed by name."""
    await seed_leave_types(db_session)
    result = await db_session.execute(select(LeaveType))
    return {leave_type.name: leave_type for leave_type in result.scalars().all()}


@pytest.fixture
def make_user(db_session: AsyncSession, leave_types: dict[str, LeaveType]) -> Callable[..., Awaitable[User]]:
    """Insert a user and, unless ``provision_year`` is None, provision that year's balances."""

    async def _make_user(
        email: str,
        display_name: str,
        role: Role = Role.USER,
        provision_year: int | None = TEST_YEAR,
    ) -> User:
        user = User(email=email, display_name=display_name, role=role.value)
        db_session.add(user)
        await db_session.flush()
        if provision_year is not None:
            await provision_for_new_user(db_session, user.id, provision_year)
        await db_session.commit()
        return user

    return _make_user


@pytest.fixture
def balance_of(db_session: AsyncSession) -> Callable[..., Awaitable[LeaveBalance]]:
    """Re-read a balance row from the database, bypassing stale identity-map state."""

    async def _balance_of(user_id: uuid.UUID, leave_type_id: uuid.UUID, year: int = TEST_YEAR) -> LeaveBalance:
        result = await db_session.execute(
            select(LeaveBalance)
            .where(
                col(LeaveBalance.user_id) == user_id,
                col(LeaveBalance.leave_type_id) == leave_type_id,
                col(LeaveBalance.year) == year,
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()

    return _balance_of


@pytest.fixture
async def employee(make_user: Callable[..., Awaitable[User]]) -> User:
    return await make_user("alice@acme.com", "Alice Anders")


@pytest.fixture
async def admin(make_user: Callable[..., Awaitable[User]]) -> User:
    return await make_user("boss@acme.com", "Bob Boss", role=Role.ADMIN)


@pytest.fixture
def employee_auth(employee: User) -> AuthContext:
    return AuthContext(user_id=employee.id, role=Role.USER)


@pytest.fixture
def admin_auth(admin: User) -> AuthContext:
    return AuthContext(user_id=admin.id, role=Role.ADMIN)
