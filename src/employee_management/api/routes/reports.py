"""Admin report endpoints."""

from datetime import date
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query

from employee_management import messages
from employee_management.api.dependencies import AdminUser, DbSession, RateLimit
from employee_management.api.schemas import ErrorResponse
from employee_management.calculators.report_rollup import DateRange, ReportWindow, resolve_window
from employee_management.errors import ValidationError
from employee_management.services.report_service import ReportService
from employee_management.services.validators import parse_uuid

router = APIRouter(
    prefix="/reports",
    tags=["reports"],
    dependencies=[Depends(RateLimit("important"))],
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)


def report_window(
    date_range: DateRange = DateRange.TODAY,
    start_date: date | None = None,
    end_date: date | None = None,
) -> ReportWindow:
    if start_date and end_date and end_date < start_date:
        raise ValidationError(
            messages.INVALID_DATE_RANGE_FILTER,
            code="INVALID_DATE_RANGE",
            context={"start_date": start_date.isoformat(), "end_date": end_date.isoformat()},
        )
    return resolve_window(date_range, start_date, end_date)


Window = Annotated[ReportWindow, Depends(report_window)]
BranchFilter = Annotated[str | None, Query(description="Restrict to one branch")]


@router.get("/branches", response_model=None)
async def branch_report(
    db: DbSession,
    admin: AdminUser,
    window: Window,
    branch_id: BranchFilter = None,
) -> dict[str, Any]:
    """Sales, staffing and hours per branch."""
    branch = parse_uuid(branch_id, "branch_id") if branch_id else None
    return await ReportService(db).branches(window, branch)


@router.get("/sales", response_model=None)
async def sales_report(
    db: DbSession,
    admin: AdminUser,
    window: Window,
    branch_id: BranchFilter = None,
    limit: Annotated[int, Query(ge=1, le=1000)] = 100,
) -> dict[str, Any]:
    """Daily and per-branch sales."""
    branch = parse_uuid(branch_id, "branch_id") if branch_id else None
    return await ReportService(db).sales(window, branch, limit)


@router.get("/materials", response_model=None)
async def materials_report(
    db: DbSession,
    admin: AdminUser,
    window: Window,
    branch_id: BranchFilter = None,
    limit: Annotated[int, Query(ge=1, le=5000)] = 1000,
) -> dict[str, Any]:
    """Material usage by material, branch and day."""
    branch = parse_uuid(branch_id, "branch_id") if branch_id else None
    return await ReportService(db).materials(window, branch, limit)
