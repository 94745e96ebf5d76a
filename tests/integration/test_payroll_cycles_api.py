"""API tests for payroll cycle creation, listing, calculation and reset."""

from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from employee_management.models import AuditLog, PayrollDetail

pytestmark = pytest.mark.asyncio

BASE = "/api/admin/payroll-cycles"


class TestCreatePayrollCycle:
    """POST /api/admin/payroll-cycles"""

    async def test_create(self, client: AsyncClient, admin_headers, session_factory):
        response = await client.post(
            BASE,
            headers=admin_headers,
            json={"name": "มกราคม 2025", "start_date": "2025-01-01", "end_date": "2025-01-31"},
        )
        assert response.status_code == 201

        data = response.json()
        cycle = data["payroll_cycle"]
        assert data["message"] == "สร้างรอบการจ่ายเงินเดือนเรียบร้อยแล้ว"
        assert cycle["status"] == "active"
        assert cycle["pay_date"] == "2025-01-31"
        assert cycle["total_employees"] == 0
        assert cycle["total_amount"] == 0

        async with session_factory() as session:
            audit = (
                await session.execute(select(AuditLog).where(AuditLog.table_name == "payroll_cycles"))
            ).scalar_one()
        assert audit.action == "CREATE"
        assert str(audit.record_id) == cycle["id"]
        assert audit.new_values["name"] == "มกราคม 2025"

    async def test_name_is_trimmed(self, client: AsyncClient, admin_headers):
        response = await client.post(
            BASE,
            headers=admin_headers,
            json={"name": "  Feb  ", "start_date": "2025-02-01", "end_date": "2025-02-28"},
        )
        assert response.status_code == 201
        assert response.json()["payroll_cycle"]["name"] == "Feb"

    async def test_missing_fields(self, client: AsyncClient, admin_headers):
        response = await client.post(BASE, headers=admin_headers, json={"name": "x"})
        assert response.status_code == 400
        data = response.json()
        assert data["code"] == "MISSING_FIELDS"
        assert data["missing_fields"] == ["start_date", "end_date"]

    @pytest.mark.parametrize("end_date", ["2025-01-01", "2024-12-31"])
    async def test_start_must_precede_end(self, client: AsyncClient, admin_headers, end_date):
        response = await client.post(
            BASE,
            headers=admin_headers,
            json={"name": "bad", "start_date": "2025-01-01", "end_date": end_date},
        )
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_DATE_RANGE"

    async def test_malformed_date(self, client: AsyncClient, admin_headers):
        response = await client.post(
            BASE,
            headers=admin_headers,
            json={"name": "bad", "start_date": "2025-13-01", "end_date": "2025-12-31"},
        )
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    @pytest.mark.parametrize(
        "start_date,end_date",
        [
            ("2025-01-15", "2025-02-15"),  # straddles the end
            ("2024-12-01", "2025-01-01"),  # shares the first day
            ("2025-01-31", "2025-02-28"),  # shares the last day
            ("2025-01-10", "2025-01-12"),  # contained
        ],
    )
    async def test_overlap_is_rejected(
        self, client: AsyncClient, admin_headers, make_cycle, start_date, end_date
    ):
        existing = await make_cycle(name="มกราคม 2025")
        response = await client.post(
            BASE,
            headers=admin_headers,
            json={"name": "ใหม่", "start_date": start_date, "end_date": end_date},
        )
        assert response.status_code == 409

        data = response.json()
        assert data["code"] == "CYCLE_OVERLAP"
        assert data["conflicting_cycles"] == [
            {
                "id": str(existing.id),
                "name": "มกราคม 2025",
                "start_date": "2025-01-01",
                "end_date": "2025-01-31",
            }
        ]

    async def test_adjacent_cycle_is_allowed(self, client: AsyncClient, admin_headers, make_cycle):
        await make_cycle()
        response = await client.post(
            BASE,
            headers=admin_headers,
            json={"name": "กุมภาพันธ์ 2025", "start_date": "2025-02-01", "end_date": "2025-02-28"},
        )
        assert response.status_code == 201

    async def test_duplicate_name(self, client: AsyncClient, admin_headers, make_cycle):
        await make_cycle(name="รอบพิเศษ")
        response = await client.post(
            BASE,
            headers=admin_headers,
            json={"name": "รอบพิเศษ", "start_date": "2025-03-01", "end_date": "2025-03-31"},
        )
        assert response.status_code == 409
        assert response.json()["code"] == "CYCLE_DUPLICATE_NAME"

    async def test_employee_is_forbidden(self, client: AsyncClient, employee_headers):
        response = await client.post(
            BASE,
            headers=employee_headers,
            json={"name": "x", "start_date": "2025-01-01", "end_date": "2025-01-31"},
        )
        assert response.status_code == 403


class TestReadPayrollCycles:
    async def test_list_newest_first(self, client: AsyncClient, admin_headers, make_cycle):
        await make_cycle(name="first", start_date=date(2025, 1, 1), end_date=date(2025, 1, 31))
        await make_cycle(name="second", start_date=date(2025, 2, 1), end_date=date(2025, 2, 28))

        response = await client.get(BASE, headers=admin_headers)
        assert response.status_code == 200
        names = [c["name"] for c in response.json()["payroll_cycles"]]
        assert names == ["second", "first"]

    async def test_get_one(self, client: AsyncClient, admin_headers, make_cycle):
        cycle = await make_cycle()
        response = await client.get(f"{BASE}/{cycle.id}", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["payroll_cycle"]["id"] == str(cycle.id)

    async def test_unknown_cycle(self, client: AsyncClient, admin_headers):
        response = await client.get(f"{BASE}/{uuid4()}", headers=admin_headers)
        assert response.status_code == 404
        assert response.json()["code"] == "CYCLE_NOT_FOUND"

    async def test_invalid_id(self, client: AsyncClient, admin_headers):
        response = await client.get(f"{BASE}/not-a-uuid", headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_UUID"


class TestCalculateAndReset:
    """POST /{id}/calculate and DELETE /{id}/reset"""

    async def test_calculate_from_time_entries(
        self,
        client: AsyncClient,
        admin_headers,
        make_cycle,
        make_user,
        make_time_entry,
        test_branch,
        test_employee,
        session_factory,
    ):
        cycle = await make_cycle()
        daily_worker = await make_user(
            "suda@example.com",
            full_name="สุดา รักงาน",
            branch=test_branch,
            hourly_rate=Decimal("50"),
            daily_rate=Decimal("700"),
        )
        await make_user("inactive@example.com", full_name="ออก แล้ว", is_active=False)

        def at(day: int, hour: int = 8) -> datetime:
            return datetime(2025, 1, day, hour, tzinfo=timezone.utc)

        await make_time_entry(test_employee, test_branch, at(2), hours=8)
        await make_time_entry(test_employee, test_branch, at(3), hours=8)
        await make_time_entry(test_employee, test_branch, datetime(2025, 2, 1, 8, tzinfo=timezone.utc))
        await make_time_entry(test_employee, test_branch, at(4), hours=None)
        await make_time_entry(daily_worker, test_branch, at(2, hour=6), hours=13)
        await make_time_entry(daily_worker, test_branch, at(3), hours=4)

        response = await client.post(f"{BASE}/{cycle.id}/calculate", headers=admin_headers)
        assert response.status_code == 200

        data = response.json()
        assert data["calculation_summary"]["total_employees"] == 2
        assert data["calculation_summary"]["total_base_pay"] == 1600 + 900

        by_name = {e["full_name"]: e for e in data["employee_calculations"]}
        assert by_name["สมชาย ใจดี"]["base_pay"] == 1600
        assert by_name["สมชาย ใจดี"]["total_days_worked"] == 2
        assert by_name["สมชาย ใจดี"]["calculation_method"] == "hourly"
        assert by_name["สุดา รักงาน"]["base_pay"] == 700 + 200
        assert by_name["สุดา รักงาน"]["total_hours"] == 17
        assert by_name["สุดา รักงาน"]["calculation_method"] == "mixed"

        async with session_factory() as session:
            details = (
                await session.execute(
                    select(PayrollDetail).where(PayrollDetail.payroll_cycle_id == cycle.id)
                )
            ).scalars().all()
        assert len(details) == 2
        assert all(d.net_pay == d.base_pay for d in details)

    async def test_recorded_break_does_not_reduce_hours(
        self,
        client: AsyncClient,
        admin_headers,
        make_cycle,
        make_time_entry,
        test_branch,
        test_employee,
    ):
        cycle = await make_cycle()
        check_in = datetime(2025, 1, 6, 8, tzinfo=timezone.utc)
        await make_time_entry(test_employee, test_branch, check_in, hours=8, break_minutes=60)

        response = await client.post(f"{BASE}/{cycle.id}/calculate", headers=admin_headers)
        assert response.status_code == 200

        (calculation,) = response.json()["employee_calculations"]
        assert calculation["total_hours"] == 8
        assert calculation["base_pay"] == 800

    async def test_calculate_twice_is_rejected(
        self, client: AsyncClient, admin_headers, make_cycle, test_employee
    ):
        cycle = await make_cycle()
        first = await client.post(f"{BASE}/{cycle.id}/calculate", headers=admin_headers)
        assert first.status_code == 200

        second = await client.post(f"{BASE}/{cycle.id}/calculate", headers=admin_headers)
        assert second.status_code == 400
        assert second.json()["code"] == "ALREADY_CALCULATED"

    async def test_no_eligible_employees(self, client: AsyncClient, admin_headers, make_cycle):
        cycle = await make_cycle()
        response = await client.post(f"{BASE}/{cycle.id}/calculate", headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["code"] == "NO_ELIGIBLE_EMPLOYEES"

    async def test_reset_allows_recalculation(
        self,
        client: AsyncClient,
        admin_headers,
        make_cycle,
        make_detail,
        test_employee,
        session_factory,
    ):
        cycle = await make_cycle()
        await make_detail(cycle, test_employee)

        response = await client.delete(f"{BASE}/{cycle.id}/reset", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["deleted_details"] == 1

        recalculated = await client.post(f"{BASE}/{cycle.id}/calculate", headers=admin_headers)
        assert recalculated.status_code == 200

        async with session_factory() as session:
            actions = (
                await session.execute(
                    select(AuditLog.action)
                    .where(AuditLog.record_id == cycle.id)
                    .order_by(AuditLog.created_at)
                )
            ).scalars().all()
        assert actions == ["RESET", "CALCULATE"]

    @pytest.mark.parametrize("method,suffix", [("post", "calculate"), ("delete", "reset")])
    async def test_completed_cycle_is_locked(
        self, client: AsyncClient, admin_headers, make_cycle, method, suffix
    ):
        cycle = await make_cycle(status="completed")
        response = await client.request(
            method.upper(), f"{BASE}/{cycle.id}/{suffix}", headers=admin_headers
        )
        assert response.status_code == 400
        assert response.json()["code"] == "CYCLE_ALREADY_COMPLETED"