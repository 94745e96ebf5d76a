"""Employee daily sales report endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, status

from employee_management import messages
from employee_management.api.dependencies import CurrentUser, DbSession, RateLimit
from employee_management.api.schemas import (
    ErrorResponse,
    SalesReportCreate,
    SalesReportCreateResponse,
    SalesReportListResponse,
    SalesReportResponse,
)
from employee_management.services.sales_report_service import SalesReportService

router = APIRouter(
    prefix="/sales-reports",
    tags=["sales-reports"],
    dependencies=[Depends(RateLimit("general"))],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
    },
)


@router.post(
    "",
    response_model=SalesReportCreateResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_sales_report(
    db: DbSession,
    user: CurrentUser,
    payload: SalesReportCreate,
) -> SalesReportCreateResponse:
    """Report today's sales for the branch checked in at today."""
    result = await SalesReportService(db).submit(
        user, payload.total_sales, payload.slip_image_url
    )
    await db.commit()

    report = SalesReportResponse.model_validate(result.report)
    return SalesReportCreateResponse(
        message=messages.SALES_REPORTED.format(total_sales=result.report.total_sales),
        sales_report=report.model_copy(update={"branch_name": result.branch.name}),
    )


@router.get("", response_model=SalesReportListResponse)
async def list_sales_reports(
    db: DbSession,
    user: CurrentUser,
    report_date: date | None = None,
) -> SalesReportListResponse:
    """The caller's own reports, newest first."""
    reports = await SalesReportService(db).list_for_user(user, report_date)
    return SalesReportListResponse(
        sales_reports=[
            SalesReportResponse.model_validate(report).model_copy(update={"branch_name": name})
            for report, name in reports
        ]
    )
