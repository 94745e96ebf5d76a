#!/usr/bin/env python
"""Create the database schema and optionally seed demo data.

Usage:
    python scripts/create_schema.py
    python scripts/create_schema.py --database-url postgresql+asyncpg://...
    python scripts/create_schema.py --drop --seed
"""

import argparse
import asyncio
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from employee_management.config import get_settings
from employee_management.database import create_schema, create_session_factory, get_engine
from employee_management.models import Branch, SalesReport, TimeEntry, User


async def seed(database_url: str) -> None:
    """Insert one branch, one admin and two employees with a week of shifts."""
    engine = get_engine(database_url)
    factory = create_session_factory(engine)

    async with factory() as session:
        branch = Branch(
            name="สาขาสยาม",
            address="ถนนพระราม 1 ปทุมวัน กรุงเทพฯ",
            latitude=13.7455,
            longitude=100.5340,
        )
        session.add(branch)
        await session.flush()

        admin = User(email="admin@example.com", full_name="ผู้ดูแลระบบ", role="admin")
        hourly = User(
            email="somchai@example.com",
            full_name="สมชาย ใจดี",
            role="employee",
            branch_id=branch.id,
            employee_code="EMP001",
            hourly_rate=Decimal("60.00"),
            hire_date=date(2024, 1, 15),
        )
        daily = User(
            email="suda@example.com",
            full_name="สุดา รักงาน",
            role="employee",
            branch_id=branch.id,
            employee_code="EMP002",
            hourly_rate=Decimal("55.00"),
            daily_rate=Decimal("600.00"),
            hire_date=date(2024, 3, 1),
        )
        session.add_all([admin, hourly, daily])
        await session.flush()

        today = datetime.now(timezone.utc).replace(hour=1, minute=0, second=0, microsecond=0)
        for offset in range(1, 8):
            start = today - timedelta(days=offset)
            session.add(
                TimeEntry(
                    user_id=hourly.id,
                    branch_id=branch.id,
                    check_in_time=start,
                    check_out_time=start + timedelta(hours=8),
                    total_hours=Decimal("8.00"),
                )
            )
            session.add(
                TimeEntry(
                    user_id=daily.id,
                    branch_id=branch.id,
                    check_in_time=start,
                    check_out_time=start + timedelta(hours=13),
                    total_hours=Decimal("13.00"),
                )
            )
            session.add(
                SalesReport(
                    branch_id=branch.id,
                    user_id=hourly.id,
                    report_date=start.date(),
                    total_sales=Decimal("4500.00") + offset * 100,
                )
            )

        await session.commit()
        print(f"  Seeded branch {branch.id}, admin {admin.id}, 2 employees")

    await engine.dispose()


async def run(database_url: str, drop: bool, with_seed: bool) -> None:
    engine = get_engine(database_url)
    await create_schema(engine, drop_existing=drop)
    await engine.dispose()
    print("  Schema created")

    if with_seed:
        await seed(database_url)


def main() -> None:
    parser = argparse.ArgumentParser(description="Create the employee management schema")
    parser.add_argument(
        "--database-url",
        default=None,
        help="Async database URL (default: DATABASE_URL from the environment)",
    )
    parser.add_argument("--drop", action="store_true", help="Drop existing tables first")
    parser.add_argument("--seed", action="store_true", help="Insert demo data")
    args = parser.parse_args()

    database_url = args.database_url or get_settings().database_url
    asyncio.run(run(database_url, args.drop, args.seed))


if __name__ == "__main__":
    main()
