"""Payroll cycle API endpoints (admin only)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Response, status
from fastapi.responses import JSONResponse

from employee_management import messages
from employee_management.api.dependencies import AdminUser, AuditContext, DbSession, RateLimit
from employee_management.api.schemas import (
    BranchTotalsResponse,
    CalculationResponse,
    CalculationSummary,
    CycleInfo,
    CycleSummaryResponse,
    EmployeeCalculationResponse,
    EmployeeDetailResponse,
    ErrorResponse,
    ExportData,
    ExportInfo,
    ExportResponse,
    FinalizationDetails,
    FinalizationSummary,
    FinalizeResponse,
    PayrollCycleCreate,
    PayrollCycleCreatedResponse,
    PayrollCycleEnvelope,
    PayrollCycleListResponse,
    PayrollCycleResponse,
    PayrollSummaryResponse,
    PayrollTotalsResponse,
    ResetResponse,
    ValidationIssueResponse,
    ValidationResponse,
)
from employee_management.services.export_service import (
    ExportFormat,
    ExportService,
    parse_format,
)
from employee_management.services.payroll_cycle_service import (
    CycleSummary,
    PayrollCycleService,
)
from employee_management.services.validators import parse_uuid

router = APIRouter(prefix="/payroll-cycles", tags=["payroll-cycles"])

CycleId = Annotated[str, Path(description="Payroll cycle UUID")]

general_limit = [Depends(RateLimit("general"))]
important_limit = [Depends(RateLimit("important"))]
critical_limit = [Depends(RateLimit("critical"))]

error_responses = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
}


def summary_response(summary: CycleSummary) -> CycleSummaryResponse:
    return CycleSummaryResponse(
        cycle_info=CycleInfo.model_validate(summary.cycle),
        totals=PayrollTotalsResponse(**summary.totals.to_dict()),
        validation=ValidationResponse(
            can_finalize=summary.can_finalize,
            issues_count=len(summary.issues),
            issues=[ValidationIssueResponse(**issue.to_dict()) for issue in summary.issues],
        ),
        branch_breakdown={
            key: BranchTotalsResponse(**branch.to_dict())
            for key, branch in summary.branches.items()
        },
        employee_details=[EmployeeDetailResponse(**row.to_dict()) for row in summary.rows],
    )


# ============================================================================
# Payroll cycle CRUD
# ============================================================================


@router.post(
    "",
    response_model=PayrollCycleCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**error_responses, 409: {"model": ErrorResponse}},
    dependencies=general_limit,
)
async def create_payroll_cycle(
    db: DbSession,
    context: AuditContext,
    payload: PayrollCycleCreate,
) -> PayrollCycleCreatedResponse:
    """Create a new payroll cycle in active status."""
    service = PayrollCycleService(db, context)
    cycle = await service.create_cycle(
        payload.name, payload.start_date, payload.end_date, payload.pay_date
    )
    await db.commit()
    return PayrollCycleCreatedResponse(
        message=messages.CYCLE_CREATED,
        payroll_cycle=PayrollCycleResponse.model_validate(cycle),
    )


@router.get(
    "",
    response_model=PayrollCycleListResponse,
    responses=error_responses,
    dependencies=general_limit,
)
async def list_payroll_cycles(db: DbSession, admin: AdminUser) -> PayrollCycleListResponse:
    """List payroll cycles, newest first."""
    cycles = await PayrollCycleService(db).list_cycles()
    return PayrollCycleListResponse(
        payroll_cycles=[PayrollCycleResponse.model_validate(c) for c in cycles]
    )


@router.get(
    "/{cycle_id}",
    response_model=PayrollCycleEnvelope,
    responses=error_responses,
    dependencies=general_limit,
)
async def get_payroll_cycle(
    db: DbSession, admin: AdminUser, cycle_id: CycleId
) -> PayrollCycleEnvelope:
    cycle = await PayrollCycleService(db).get_cycle(parse_uuid(cycle_id, "payroll_cycle_id"))
    return PayrollCycleEnvelope(payroll_cycle=PayrollCycleResponse.model_validate(cycle))


# ============================================================================
# Calculation
# ============================================================================


@router.post(
    "/{cycle_id}/calculate",
    response_model=CalculationResponse,
    responses=error_responses,
    dependencies=critical_limit,
)
async def calculate_payroll(
    db: DbSession, context: AuditContext, cycle_id: CycleId
) -> CalculationResponse:
    """Compute base pay for every eligible employee from their time entries."""
    service = PayrollCycleService(db, context)
    outcome = await service.calculate(parse_uuid(cycle_id, "payroll_cycle_id"))
    await db.commit()
    return CalculationResponse(
        message=messages.CYCLE_CALCULATED,
        calculation_summary=CalculationSummary(
            cycle_id=outcome.cycle.id,
            total_employees=len(outcome.employees),
            total_base_pay=outcome.total_base_pay,
            calculated_at=outcome.calculated_at,
        ),
        employee_calculations=[
            EmployeeCalculationResponse(
                user_id=calc.user.id,
                full_name=calc.user.full_name,
                employee_code=calc.user.employee_code,
                total_hours=calc.pay.total_hours,
                total_days_worked=calc.pay.days_worked,
                base_pay=calc.pay.base_pay,
                calculation_method=calc.pay.method.value,
            )
            for calc in outcome.employees
        ],
    )


@router.delete(
    "/{cycle_id}/reset",
    response_model=ResetResponse,
    responses=error_responses,
    dependencies=critical_limit,
)
async def reset_payroll(
    db: DbSession, context: AuditContext, cycle_id: CycleId
) -> ResetResponse:
    """Remove calculated details so the cycle can be recalculated."""
    service = PayrollCycleService(db, context)
    deleted = await service.reset(parse_uuid(cycle_id, "payroll_cycle_id"))
    await db.commit()
    return ResetResponse(message=messages.CYCLE_RESET, deleted_details=deleted)


# ============================================================================
# Summary, finalization and export
# ============================================================================


@router.get(
    "/{cycle_id}/summary",
    response_model=PayrollSummaryResponse,
    responses=error_responses,
    dependencies=important_limit,
)
async def get_payroll_summary(
    db: DbSession, admin: AdminUser, cycle_id: CycleId
) -> PayrollSummaryResponse:
    """Totals, branch breakdown and finalization readiness for a cycle."""
    summary = await PayrollCycleService(db).build_summary(
        parse_uuid(cycle_id, "payroll_cycle_id")
    )
    return PayrollSummaryResponse(
        message=messages.CYCLE_SUMMARY,
        summary=summary_response(summary),
    )


@router.post(
    "/{cycle_id}/finalize",
    response_model=FinalizeResponse,
    responses=error_responses,
    dependencies=critical_limit,
)
async def finalize_payroll_cycle(
    db: DbSession, context: AuditContext, cycle_id: CycleId
) -> FinalizeResponse:
    """Validate every detail and lock the cycle. Irreversible."""
    service = PayrollCycleService(db, context)
    outcome = await service.finalize(parse_uuid(cycle_id, "payroll_cycle_id"), context.user_id)
    await db.commit()
    return FinalizeResponse(
        message=messages.CYCLE_FINALIZED,
        finalization_summary=FinalizationSummary(
            cycle_info=CycleInfo.model_validate(outcome.cycle),
            totals=PayrollTotalsResponse(**outcome.totals.to_dict()),
            finalization_details=FinalizationDetails(
                finalized_at=outcome.finalized_at,
                finalized_by_user_id=outcome.finalized_by,
                validation_passed=True,
                audit_log_created=True,
            ),
        ),
    )


@router.get(
    "/{cycle_id}/export",
    response_model=None,
    responses={**error_responses, 200: {"content": {"text/csv": {}}, "model": ExportResponse}},
    dependencies=important_limit,
)
async def export_payroll(
    db: DbSession,
    admin: AdminUser,
    cycle_id: CycleId,
    export_format: Annotated[str | None, Query(alias="format")] = "csv",
    include_details: bool = True,
) -> Response:
    """Download the cycle as a CSV attachment or return it as JSON."""
    fmt = parse_format(export_format)
    cycle_uuid = parse_uuid(cycle_id, "payroll_cycle_id")
    service = ExportService(db)

    if fmt is ExportFormat.CSV:
        export = await service.export_csv(cycle_uuid)
        return Response(
            content=export.content.encode("utf-8"),
            media_type="text/csv; charset=utf-8",
            headers={"Content-Disposition": export.content_disposition},
        )

    data = await service.export_json(cycle_uuid, include_details, admin.id)
    payload = ExportResponse(
        message=messages.CYCLE_EXPORTED,
        export_data=ExportData(
            cycle_info=CycleInfo.model_validate(data["cycle"]),
            summary=PayrollTotalsResponse(**data["summary"]),
            employee_details=(
                [EmployeeDetailResponse(**row) for row in data["employee_details"]]
                if data["employee_details"] is not None
                else None
            ),
            export_info=ExportInfo(**data["export_info"]),
        ),
    )
    return JSONResponse(content=payload.model_dump(mode="json"))
