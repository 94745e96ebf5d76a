"""Admin payroll dashboard statistics."""

from fastapi import APIRouter, Depends

from employee_management.api.dependencies import AdminUser, DbSession, RateLimit
from employee_management.api.schemas import ErrorResponse, PayrollStatsResponse
from employee_management.services.payroll_stats_service import PayrollStatsService

router = APIRouter(
    prefix="/payroll",
    tags=["payroll-cycles"],
    dependencies=[Depends(RateLimit("auth"))],
    responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)


@router.get("/stats", response_model=PayrollStatsResponse)
async def payroll_stats(db: DbSession, admin: AdminUser) -> PayrollStatsResponse:
    """Open cycles, staff count and this month's completed payroll against last month's."""
    stats = await PayrollStatsService(db).stats()
    return PayrollStatsResponse.model_validate(stats)
