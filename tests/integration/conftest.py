"""Integration test fixtures: the FastAPI app over the test database."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator
from uuid import UUID

import jwt
import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from employee_management.api.app import create_app
from employee_management.api.dependencies import get_db_session
from employee_management.config import Settings
from employee_management.models import User

JWT_SECRET = "test-secret-key-that-is-long-enough-for-hs256"
JWT_AUDIENCE = "authenticated"


def make_token(
    user_id: UUID | str,
    secret: str = JWT_SECRET,
    audience: str = JWT_AUDIENCE,
    expires_in: int = 3600,
) -> str:
    """Issue a token shaped like the auth provider's."""
    now = datetime.now(timezone.utc)
    return jwt.encode(
        {
            "sub": str(user_id),
            "aud": audience,
            "iat": now,
            "exp": now + timedelta(seconds=expires_in),
        },
        secret,
        algorithm="HS256",
    )


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user.id)}"}


@pytest.fixture
def rate_limit_enabled() -> bool:
    """Override in a module to exercise rate limiting."""
    return False


@pytest.fixture
def settings(database_url: str, rate_limit_enabled: bool) -> Settings:
    return Settings(
        database_url=database_url,
        database_url_sync="sqlite://",
        jwt_secret=JWT_SECRET,
        jwt_audience=JWT_AUDIENCE,
        rate_limit_enabled=rate_limit_enabled,
        max_checkin_distance_meters=100.0,
    )


@pytest.fixture
def app(settings: Settings, session_factory: async_sessionmaker[AsyncSession]) -> FastAPI:
    app = create_app(settings)

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_get_db_session
    return app


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def admin_headers(test_admin: User) -> dict[str, str]:
    return auth_headers(test_admin)


@pytest.fixture
def employee_headers(test_employee: User) -> dict[str, str]:
    return auth_headers(test_employee)


@pytest.fixture
def issue_token():
    return make_token


@pytest.fixture
def headers_for():
    return auth_headers
