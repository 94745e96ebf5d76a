"""API tests for the payroll dashboard statistics."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from httpx import AsyncClient

from employee_management.services.payroll_stats_service import month_start

pytestmark = pytest.mark.asyncio

STATS = "/api/admin/payroll/stats"


class TestPayrollStats:
    async def test_empty(self, client: AsyncClient, admin_headers, test_employee):
        response = await client.get(STATS, headers=admin_headers)
        assert response.status_code == 200

        data = response.json()
        assert data["active_cycles"] == 0
        assert data["total_employees"] == 1
        assert data["monthly_payroll"] == 0
        assert data["pending_approvals"] == 0
        assert data["growth_percentage"] == 0
        assert "last_updated" in data

    async def test_month_over_month(
        self,
        client: AsyncClient,
        admin_headers,
        make_cycle,
        make_detail,
        make_user,
        test_employee,
    ):
        this_month = month_start(datetime.now(timezone.utc).date())
        last_month = month_start(this_month, months_back=1)
        other = await make_user("other@example.com")

        current = await make_cycle(
            name="เดือนนี้",
            start_date=this_month,
            end_date=this_month + timedelta(days=9),
            status="completed",
        )
        await make_detail(current, test_employee, base_pay=Decimal("7000.40"))
        await make_detail(current, other, base_pay=Decimal("5000.00"))

        previous = await make_cycle(
            name="เดือนก่อน",
            start_date=last_month,
            end_date=last_month + timedelta(days=9),
            status="completed",
        )
        await make_detail(previous, test_employee, base_pay=Decimal("10000.00"))

        open_until = this_month + timedelta(days=1)
        calculated = await make_cycle(name="รอปิด", start_date=this_month, end_date=open_until)
        await make_detail(calculated, test_employee)
        await make_cycle(name="ยังไม่คำนวณ", start_date=this_month, end_date=open_until)

        data = (await client.get(STATS, headers=admin_headers)).json()
        assert data["active_cycles"] == 2
        assert data["pending_approvals"] == 1
        assert data["total_employees"] == 2
        assert data["monthly_payroll"] == 12000
        assert data["growth_percentage"] == 20

    async def test_employee_is_forbidden(self, client: AsyncClient, employee_headers):
        response = await client.get(STATS, headers=employee_headers)
        assert response.status_code == 403
        assert response.json()["code"] == "FORBIDDEN"
