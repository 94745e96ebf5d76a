"""Pytest fixtures for employee management tests."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import AsyncGenerator, Awaitable, Callable

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from employee_management.calculators.net_pay import calculate_net_pay
from employee_management.database import create_schema, create_session_factory
from employee_management.models import (
    Branch,
    PayrollCycle,
    PayrollDetail,
    RawMaterial,
    TimeEntry,
    User,
)

BRANCH_LATITUDE = 13.7455
BRANCH_LONGITUDE = 100.5340

_AUTO = object()


@pytest.fixture
def database_url(tmp_path) -> str:
    """A file database, so API requests and assertions use separate connections."""
    return f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest_asyncio.fixture
async def engine(database_url: str) -> AsyncGenerator[AsyncEngine, None]:
    """Create test database engine with a fresh schema."""
    engine = create_async_engine(database_url, echo=False)
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(engine)


@pytest_asyncio.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def test_branch(session_factory: async_sessionmaker[AsyncSession]) -> Branch:
    """Create a test branch."""
    async with session_factory() as session:
        branch = Branch(
            name="สาขาสยาม",
            address="ถนนพระราม 1 กรุงเทพฯ",
            latitude=BRANCH_LATITUDE,
            longitude=BRANCH_LONGITUDE,
        )
        session.add(branch)
        await session.commit()
        return branch


@pytest.fixture
def make_user(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., Awaitable[User]]:
    """Factory for users; employees default to 100 THB/hour."""

    async def _make(
        email: str,
        full_name: str = "พนักงาน ทดสอบ",
        role: str = "employee",
        branch: Branch | None = None,
        employee_code: str | None = None,
        hourly_rate: Decimal | None = Decimal("100.00"),
        daily_rate: Decimal | None = None,
        is_active: bool = True,
    ) -> User:
        async with session_factory() as session:
            user = User(
                email=email,
                full_name=full_name,
                role=role,
                branch_id=branch.id if branch else None,
                employee_code=employee_code,
                hourly_rate=hourly_rate if role == "employee" else None,
                daily_rate=daily_rate,
                is_active=is_active,
            )
            session.add(user)
            await session.commit()
            return user

    return _make


@pytest_asyncio.fixture
async def test_admin(make_user) -> User:
    return await make_user("admin@example.com", full_name="ผู้ดูแลระบบ", role="admin")


@pytest_asyncio.fixture
async def test_employee(make_user, test_branch: Branch) -> User:
    return await make_user(
        "somchai@example.com",
        full_name="สมชาย ใจดี",
        branch=test_branch,
        employee_code="EMP001",
    )


@pytest.fixture
def make_cycle(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., Awaitable[PayrollCycle]]:
    """Factory for payroll cycles inserted directly, bypassing validation."""

    async def _make(
        name: str = "มกราคม 2025",
        start_date: date = date(2025, 1, 1),
        end_date: date = date(2025, 1, 31),
        status: str = "active",
    ) -> PayrollCycle:
        async with session_factory() as session:
            cycle = PayrollCycle(
                name=name,
                start_date=start_date,
                end_date=end_date,
                pay_date=end_date,
                status=status,
                total_employees=0,
                total_amount=Decimal("0"),
            )
            session.add(cycle)
            await session.commit()
            return cycle

    return _make


@pytest.fixture
def make_detail(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., Awaitable[PayrollDetail]]:
    """Factory for payroll details; net pay is derived unless given."""

    async def _make(
        cycle: PayrollCycle,
        user: User,
        base_pay: Decimal | None = Decimal("30000.00"),
        overtime_pay: Decimal = Decimal("0"),
        bonus: Decimal = Decimal("0"),
        bonus_reason: str | None = None,
        deduction: Decimal = Decimal("0"),
        deduction_reason: str | None = None,
        net_pay=_AUTO,
    ) -> PayrollDetail:
        if net_pay is _AUTO:
            net_pay = (
                calculate_net_pay(base_pay, overtime_pay, bonus, deduction)
                if base_pay is not None
                else None
            )
        async with session_factory() as session:
            detail = PayrollDetail(
                payroll_cycle_id=cycle.id,
                user_id=user.id,
                base_pay=base_pay,
                overtime_hours=Decimal("0"),
                overtime_rate=Decimal("0"),
                overtime_pay=overtime_pay,
                bonus=bonus,
                bonus_reason=bonus_reason,
                deduction=deduction,
                deduction_reason=deduction_reason,
                net_pay=net_pay,
                calculation_method="hourly",
            )
            session.add(detail)
            await session.commit()
            return detail

    return _make


@pytest.fixture
def make_time_entry(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., Awaitable[TimeEntry]]:
    """Factory for completed (or open) time entries."""

    async def _make(
        user: User,
        branch: Branch,
        check_in: datetime,
        hours: float | None = 8,
        break_minutes: int = 0,
    ) -> TimeEntry:
        check_out = check_in + timedelta(hours=hours) if hours is not None else None
        async with session_factory() as session:
            entry = TimeEntry(
                user_id=user.id,
                branch_id=branch.id,
                check_in_time=check_in,
                check_out_time=check_out,
                break_duration=break_minutes,
                total_hours=Decimal(str(hours)) if hours is not None else None,
            )
            session.add(entry)
            await session.commit()
            return entry

    return _make



@pytest.fixture
def make_material(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., Awaitable[RawMaterial]]:
    async def _make(
        name: str,
        unit: str = "กิโลกรัม",
        cost_per_unit: Decimal = Decimal("0"),
        is_active: bool = True,
    ) -> RawMaterial:
        async with session_factory() as session:
            material = RawMaterial(
                name=name, unit=unit, cost_per_unit=cost_per_unit, is_active=is_active
            )
            session.add(material)
            await session.commit()
            return material

    return _make
