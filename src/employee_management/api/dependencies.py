"""FastAPI dependencies for dependency injection."""

import logging
from collections.abc import AsyncGenerator
from typing import Annotated
from uuid import UUID

import jwt
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from employee_management import messages
from employee_management.config import Settings, get_settings
from employee_management.database import init_db
from employee_management.errors import AuthenticationError, AuthorizationError, RateLimitError
from employee_management.models import User
from employee_management.services.audit_service import RequestContext
from employee_management.services.rate_limiter import (
    RateLimiter,
    client_identifier,
    client_ip,
)

logger = logging.getLogger(__name__)


def get_app_settings(request: Request) -> Settings:
    """Settings the app was created with."""
    return getattr(request.app.state, "settings", None) or get_settings()


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency.

    Routes commit explicitly; anything left uncommitted is rolled back on close.
    """
    _, factory = init_db()
    async with factory() as session:
        try:
            yield session
        finally:
            await session.close()


def _extract_token(request: Request, cookie_name: str) -> str | None:
    authorization = request.headers.get("authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return request.cookies.get(cookie_name)


def decode_access_token(token: str, settings: Settings) -> UUID:
    """Verify an auth provider token and return its subject."""
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=["HS256"],
            audience=settings.jwt_audience,
            options={"require": ["sub", "exp"], "verify_aud": settings.jwt_audience is not None},
        )
        return UUID(claims["sub"])
    except (jwt.PyJWTError, ValueError) as e:
        logger.info("Rejected access token: %s", e)
        raise AuthenticationError() from e


async def get_current_user(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> User:
    """Resolve the signed-in user from the bearer token or session cookie."""
    token = _extract_token(request, settings.auth_cookie_name)
    if not token:
        raise AuthenticationError()

    user_id = decode_access_token(token, settings)
    user = await db.get(User, user_id)
    if user is None:
        raise AuthenticationError()
    if not user.is_active:
        raise AuthorizationError(messages.ACCOUNT_INACTIVE, code="ACCOUNT_INACTIVE")
    return user


async def require_admin(
    user: Annotated[User, Depends(get_current_user)],
) -> User:
    if not user.is_admin:
        raise AuthorizationError()
    return user


def get_audit_context(
    request: Request,
    user: Annotated[User, Depends(require_admin)],
) -> RequestContext:
    """Acting admin plus client address and agent, for audit entries."""
    fallback = request.client.host if request.client else None
    return RequestContext(
        user_id=user.id,
        ip_address=client_ip(request.headers, fallback),
        user_agent=request.headers.get("user-agent"),
    )


class RateLimit:
    """Route dependency enforcing one of the app's rate limit tiers."""

    def __init__(self, tier: str):
        self.tier = tier

    async def __call__(
        self,
        request: Request,
        settings: Annotated[Settings, Depends(get_app_settings)],
    ) -> None:
        if not settings.rate_limit_enabled:
            return
        limiters: dict[str, RateLimiter] = request.app.state.rate_limiters
        fallback = request.client.host if request.client else None
        decision = limiters[self.tier].check(client_identifier(request.headers, fallback))
        if not decision.allowed:
            raise RateLimitError(decision.retry_after)


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
CurrentUser = Annotated[User, Depends(get_current_user)]
AdminUser = Annotated[User, Depends(require_admin)]
AuditContext = Annotated[RequestContext, Depends(get_audit_context)]
