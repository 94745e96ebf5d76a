"""API tests for employee check-in and check-out."""

from uuid import uuid4

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

BASE = "/api/employee/time-entries"

AT_BRANCH = {"latitude": 13.7455, "longitude": 100.5340}
NEARBY = {"latitude": 13.7459, "longitude": 100.5340}  # ~45 m
FAR_AWAY = {"latitude": 13.7555, "longitude": 100.5340}  # ~1.1 km


class TestCheckIn:
    async def test_check_in(self, client: AsyncClient, employee_headers, test_branch, test_employee):
        response = await client.post(
            f"{BASE}/check-in",
            headers=employee_headers,
            json={
                "branch_id": str(test_branch.id),
                **NEARBY,
                "selfie_url": f"https://cdn.example.com/selfies/checkin/{test_employee.id}/1.jpg",
            },
        )
        assert response.status_code == 200

        data = response.json()
        assert data["message"] == "ลงเวลาเข้างานเรียบร้อยแล้ว"
        assert data["branch_name"] == "สาขาสยาม"
        assert 30 < data["distance_meters"] < 60
        assert data["time_entry"]["check_out_time"] is None

        status = await client.get(f"{BASE}/status", headers=employee_headers)
        assert status.json()["is_checked_in"] is True
        assert status.json()["time_entry"]["id"] == data["time_entry"]["id"]

    async def test_second_check_in_is_rejected(
        self, client: AsyncClient, employee_headers, test_branch
    ):
        payload = {"branch_id": str(test_branch.id), **AT_BRANCH}
        first = await client.post(f"{BASE}/check-in", headers=employee_headers, json=payload)
        assert first.status_code == 200

        second = await client.post(f"{BASE}/check-in", headers=employee_headers, json=payload)
        assert second.status_code == 400
        assert second.json()["code"] == "ALREADY_CHECKED_IN"

    async def test_too_far_from_branch(self, client: AsyncClient, employee_headers, test_branch):
        response = await client.post(
            f"{BASE}/check-in",
            headers=employee_headers,
            json={"branch_id": str(test_branch.id), **FAR_AWAY},
        )
        assert response.status_code == 400

        data = response.json()
        assert data["code"] == "TOO_FAR_FROM_BRANCH"
        assert data["max_distance_meters"] == 100
        assert data["distance_meters"] > 1000

    async def test_invalid_coordinates(self, client: AsyncClient, employee_headers, test_branch):
        response = await client.post(
            f"{BASE}/check-in",
            headers=employee_headers,
            json={"branch_id": str(test_branch.id), "latitude": 95, "longitude": 100},
        )
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_COORDINATES"

    async def test_unknown_branch(self, client: AsyncClient, employee_headers):
        response = await client.post(
            f"{BASE}/check-in",
            headers=employee_headers,
            json={"branch_id": str(uuid4()), **AT_BRANCH},
        )
        assert response.status_code == 404
        assert response.json()["code"] == "BRANCH_NOT_FOUND"

    async def test_selfie_of_another_user(
        self, client: AsyncClient, employee_headers, test_branch
    ):
        response = await client.post(
            f"{BASE}/check-in",
            headers=employee_headers,
            json={
                "branch_id": str(test_branch.id),
                **AT_BRANCH,
                "selfie_url": f"https://cdn.example.com/selfies/checkin/{uuid4()}/1.jpg",
            },
        )
        assert response.status_code == 403
        assert response.json()["code"] == "SELFIE_NOT_OWNED"

    async def test_admin_cannot_check_in(self, client: AsyncClient, admin_headers, test_branch):
        response = await client.post(
            f"{BASE}/check-in",
            headers=admin_headers,
            json={"branch_id": str(test_branch.id), **AT_BRANCH},
        )
        assert response.status_code == 403
        assert response.json()["code"] == "EMPLOYEE_ONLY"

    async def test_requires_login(self, client: AsyncClient, test_branch):
        response = await client.post(
            f"{BASE}/check-in", json={"branch_id": str(test_branch.id), **AT_BRANCH}
        )
        assert response.status_code == 401


class TestCheckOut:
    async def test_check_out(self, client: AsyncClient, employee_headers, test_branch):
        await client.post(
            f"{BASE}/check-in",
            headers=employee_headers,
            json={"branch_id": str(test_branch.id), **AT_BRANCH},
        )
        response = await client.post(f"{BASE}/check-out", headers=employee_headers, json=AT_BRANCH)
        assert response.status_code == 200

        entry = response.json()["time_entry"]
        assert entry["check_out_time"] is not None
        assert entry["total_hours"] >= 0

        status = await client.get(f"{BASE}/status", headers=employee_headers)
        assert status.json() == {"is_checked_in": False, "time_entry": None}

    async def test_check_out_without_check_in(self, client: AsyncClient, employee_headers):
        response = await client.post(f"{BASE}/check-out", headers=employee_headers, json=AT_BRANCH)
        assert response.status_code == 400
        assert response.json()["code"] == "NOT_CHECKED_IN"

    async def test_check_out_far_away(self, client: AsyncClient, employee_headers, test_branch):
        await client.post(
            f"{BASE}/check-in",
            headers=employee_headers,
            json={"branch_id": str(test_branch.id), **AT_BRANCH},
        )
        response = await client.post(f"{BASE}/check-out", headers=employee_headers, json=FAR_AWAY)
        assert response.status_code == 400
        assert response.json()["code"] == "TOO_FAR_FROM_BRANCH"

        status = await client.get(f"{BASE}/status", headers=employee_headers)
        assert status.json()["is_checked_in"] is True
