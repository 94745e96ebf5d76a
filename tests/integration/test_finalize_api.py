"""API tests for payroll summary and finalization."""

from decimal import Decimal
from uuid import uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from employee_management.models import AuditLog, PayrollCycle

pytestmark = pytest.mark.asyncio

BASE = "/api/admin/payroll-cycles"


class TestSummary:
    """GET /api/admin/payroll-cycles/{id}/summary"""

    async def test_totals_and_branch_breakdown(
        self,
        client: AsyncClient,
        admin_headers,
        make_cycle,
        make_detail,
        make_user,
        test_employee,
        test_branch,
    ):
        cycle = await make_cycle()
        floater = await make_user("floater@example.com", full_name="ก้อง ไร้สาขา")
        await make_detail(
            cycle, test_employee, base_pay=Decimal("30000"), bonus=Decimal("2000"), bonus_reason="x"
        )
        await make_detail(cycle, floater, base_pay=Decimal("10000"), deduction=Decimal("1000"), deduction_reason="y")

        response = await client.get(f"{BASE}/{cycle.id}/summary", headers=admin_headers)
        assert response.status_code == 200

        summary = response.json()["summary"]
        assert summary["cycle_info"]["id"] == str(cycle.id)
        assert summary["totals"] == {
            "total_employees": 2,
            "total_base_pay": 40000,
            "total_overtime_pay": 0,
            "total_bonus": 2000,
            "total_deduction": 1000,
            "total_net_pay": 41000,
            "average_net_pay": 20500,
        }
        assert summary["validation"] == {"can_finalize": True, "issues_count": 0, "issues": []}

        breakdown = summary["branch_breakdown"]
        assert breakdown[str(test_branch.id)]["branch_name"] == "สาขาสยาม"
        assert breakdown[str(test_branch.id)]["total_net_pay"] == 32000
        assert breakdown["no_branch"]["branch_name"] == "ไม่มีสาขา"
        assert breakdown["no_branch"]["employee_count"] == 1

        # Ordered by employee name
        names = [e["full_name"] for e in summary["employee_details"]]
        assert names == sorted(names)

    async def test_negative_net_pay_blocks_finalization(
        self, client: AsyncClient, admin_headers, make_cycle, make_detail, test_employee
    ):
        cycle = await make_cycle()
        await make_detail(cycle, test_employee, net_pay=Decimal("-100"))

        response = await client.get(f"{BASE}/{cycle.id}/summary", headers=admin_headers)
        validation = response.json()["summary"]["validation"]
        assert validation["can_finalize"] is False
        assert validation["issues_count"] == 1
        assert validation["issues"][0]["type"] == "negative_net_pay"
        assert validation["issues"][0]["net_pay"] == -100

    async def test_completed_cycle_cannot_finalize(
        self, client: AsyncClient, admin_headers, make_cycle
    ):
        cycle = await make_cycle(status="completed")
        response = await client.get(f"{BASE}/{cycle.id}/summary", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["summary"]["validation"]["can_finalize"] is False

    async def test_unknown_cycle(self, client: AsyncClient, admin_headers):
        response = await client.get(f"{BASE}/{uuid4()}/summary", headers=admin_headers)
        assert response.status_code == 404


class TestFinalize:
    """POST /api/admin/payroll-cycles/{id}/finalize"""

    async def test_finalize(
        self,
        client: AsyncClient,
        admin_headers,
        make_cycle,
        make_detail,
        make_user,
        test_employee,
        test_admin,
        session_factory,
    ):
        cycle = await make_cycle()
        other = await make_user("other@example.com", full_name="สุดา")
        await make_detail(cycle, test_employee, base_pay=Decimal("30000"))
        await make_detail(cycle, other, base_pay=Decimal("20000"), bonus=Decimal("500"), bonus_reason="x")

        response = await client.post(f"{BASE}/{cycle.id}/finalize", headers=admin_headers)
        assert response.status_code == 200

        data = response.json()["finalization_summary"]
        assert data["cycle_info"]["status"] == "completed"
        assert data["totals"]["total_employees"] == 2
        assert data["totals"]["total_net_pay"] == 50500
        assert data["finalization_details"]["finalized_by_user_id"] == str(test_admin.id)
        assert data["finalization_details"]["validation_passed"] is True

        async with session_factory() as session:
            stored = await session.get(PayrollCycle, cycle.id)
            audit = (
                await session.execute(
                    select(AuditLog).where(
                        AuditLog.record_id == cycle.id, AuditLog.action == "FINALIZE"
                    )
                )
            ).scalar_one()

        assert stored.status == "completed"
        assert stored.finalized_by == test_admin.id
        assert stored.finalized_at is not None
        assert stored.total_employees == 2
        assert stored.total_amount == Decimal("50500.00")
        assert audit.old_values["status"] == "active"
        assert audit.new_values["status"] == "completed"

    async def test_negative_net_pay_is_rejected(
        self,
        client: AsyncClient,
        admin_headers,
        make_cycle,
        make_detail,
        test_employee,
        session_factory,
    ):
        cycle = await make_cycle()
        await make_detail(cycle, test_employee, net_pay=Decimal("-100"))

        response = await client.post(f"{BASE}/{cycle.id}/finalize", headers=admin_headers)
        assert response.status_code == 400

        data = response.json()
        assert data["code"] == "NEGATIVE_NET_PAY"
        assert data["invalid_employees"] == [
            {
                "user_id": str(test_employee.id),
                "name": "สมชาย ใจดี",
                "employee_code": "EMP001",
                "net_pay": -100,
            }
        ]

        async with session_factory() as session:
            stored = await session.get(PayrollCycle, cycle.id)
        assert stored.status == "active"

    async def test_missing_data_is_rejected(
        self, client: AsyncClient, admin_headers, make_cycle, make_detail, test_employee
    ):
        cycle = await make_cycle()
        await make_detail(cycle, test_employee, base_pay=None)

        response = await client.post(f"{BASE}/{cycle.id}/finalize", headers=admin_headers)
        assert response.status_code == 400

        data = response.json()
        assert data["code"] == "MISSING_DATA"
        assert data["invalid_employees"][0]["missing_data"] == ["base_pay", "net_pay"]

    async def test_second_finalize_fails(
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

        first = await client.post(f"{BASE}/{cycle.id}/finalize", headers=admin_headers)
        assert first.status_code == 200

        second = await client.post(f"{BASE}/{cycle.id}/finalize", headers=admin_headers)
        assert second.status_code == 400
        assert second.json()["code"] == "CYCLE_ALREADY_COMPLETED"

        async with session_factory() as session:
            finalize_entries = (
                await session.execute(
                    select(AuditLog).where(
                        AuditLog.record_id == cycle.id, AuditLog.action == "FINALIZE"
                    )
                )
            ).scalars().all()
        assert len(finalize_entries) == 1

    async def test_employee_cannot_finalize(
        self, client: AsyncClient, employee_headers, make_cycle
    ):
        cycle = await make_cycle()
        response = await client.post(f"{BASE}/{cycle.id}/finalize", headers=employee_headers)
        assert response.status_code == 403

    async def test_details_locked_after_finalize(
        self, client: AsyncClient, admin_headers, make_cycle, make_detail, test_employee
    ):
        cycle = await make_cycle()
        detail = await make_detail(cycle, test_employee)
        await client.post(f"{BASE}/{cycle.id}/finalize", headers=admin_headers)

        response = await client.put(
            f"/api/admin/payroll-details/{detail.id}/bonus",
            headers=admin_headers,
            json={"bonus": 100, "bonus_reason": "x"},
        )
        assert response.status_code == 403
