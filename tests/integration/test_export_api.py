"""API tests for payroll export."""

import csv
import io
from decimal import Decimal
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import AsyncClient

from employee_management.models import PayrollCycle

pytestmark = pytest.mark.asyncio

BASE = "/api/admin/payroll-cycles"


@pytest_asyncio.fixture
async def cycle(make_cycle, make_detail, test_employee) -> PayrollCycle:
    cycle = await make_cycle(name="มกราคม 2568")
    await make_detail(
        cycle, test_employee, base_pay=Decimal("30000"), bonus=Decimal("2000"), bonus_reason="ขยัน"
    )
    return cycle


class TestCsvExport:
    async def test_csv_is_default(self, client: AsyncClient, admin_headers, cycle):
        response = await client.get(f"{BASE}/{cycle.id}/export", headers=admin_headers)
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")

        disposition = response.headers["content-disposition"]
        assert disposition.startswith("attachment;")
        assert "filename*=UTF-8''payroll-" in disposition

        assert response.content.startswith(b"\xef\xbb\xbf")

    async def test_csv_rows(self, client: AsyncClient, admin_headers, cycle):
        response = await client.get(
            f"{BASE}/{cycle.id}/export", headers=admin_headers, params={"format": "csv"}
        )
        text = response.content.decode("utf-8-sig")
        rows = list(csv.reader(io.StringIO(text)))

        assert rows[0] == ["รายงานเงินเดือน", "มกราคม 2568"]
        employee_row = next(r for r in rows if r and r[0] == "1")
        assert employee_row[1] == "EMP001"
        assert employee_row[2] == "สมชาย ใจดี"
        assert employee_row[3] == "สาขาสยาม"
        assert employee_row[10] == "32000.00"


class TestJsonExport:
    async def test_json_with_details(self, client: AsyncClient, admin_headers, cycle, test_admin):
        response = await client.get(
            f"{BASE}/{cycle.id}/export", headers=admin_headers, params={"format": "json"}
        )
        assert response.status_code == 200

        data = response.json()["export_data"]
        assert data["cycle_info"]["name"] == "มกราคม 2568"
        assert data["summary"]["total_net_pay"] == 32000
        assert len(data["employee_details"]) == 1
        assert data["employee_details"][0]["bonus_reason"] == "ขยัน"
        assert data["export_info"]["format"] == "json"
        assert data["export_info"]["exported_by"] == str(test_admin.id)

    async def test_json_without_details(self, client: AsyncClient, admin_headers, cycle):
        response = await client.get(
            f"{BASE}/{cycle.id}/export",
            headers=admin_headers,
            params={"format": "json", "include_details": "false"},
        )
        data = response.json()["export_data"]
        assert data["employee_details"] is None
        assert data["export_info"]["include_details"] is False


class TestExportErrors:
    async def test_unsupported_format(self, client: AsyncClient, admin_headers, cycle):
        response = await client.get(
            f"{BASE}/{cycle.id}/export", headers=admin_headers, params={"format": "xlsx"}
        )
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_EXPORT_FORMAT"

    async def test_unknown_cycle(self, client: AsyncClient, admin_headers):
        response = await client.get(f"{BASE}/{uuid4()}/export", headers=admin_headers)
        assert response.status_code == 404

    async def test_requires_admin(self, client: AsyncClient, employee_headers, cycle):
        response = await client.get(f"{BASE}/{cycle.id}/export", headers=employee_headers)
        assert response.status_code == 403
