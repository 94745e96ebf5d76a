"""Liveness, readiness and health probes."""

import logging
from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError

from employee_management import __version__
from employee_management.api.dependencies import DbSession, get_app_settings
from employee_management.config import Settings
from employee_management.models import PayrollCycle

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

AppSettings = Annotated[Settings, Depends(get_app_settings)]


class ServiceHealth(BaseModel):
    status: str
    database: str
    rate_limiting: bool
    version: str
    timestamp: datetime


@router.get("/health", response_model=ServiceHealth)
async def health_check(db: DbSession, settings: AppSettings) -> ServiceHealth:
    """Report API status; a failing database degrades it instead of failing."""
    try:
        await db.execute(text("SELECT 1"))
        database = "healthy"
    except SQLAlchemyError as e:
        logger.warning("Database ping failed: %s", e)
        database = "unhealthy"

    return ServiceHealth(
        status="healthy" if database == "healthy" else "degraded",
        database=database,
        rate_limiting=settings.rate_limit_enabled,
        version=__version__,
        timestamp=datetime.now(timezone.utc),
    )


@router.get("/ready", responses={503: {"description": "Schema not reachable"}})
async def readiness_check(db: DbSession) -> JSONResponse:
    """Ready once the payroll tables can be queried."""
    try:
        cycles = await db.scalar(select(func.count()).select_from(PayrollCycle))
    except SQLAlchemyError as e:
        logger.warning("Readiness check failed: %s", e)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready"},
        )
    return JSONResponse(content={"status": "ready", "payroll_cycles": cycles or 0})


@router.get("/live")
async def liveness_check() -> dict[str, str]:
    return {"status": "alive"}
