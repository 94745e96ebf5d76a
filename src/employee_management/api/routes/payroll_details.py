"""Bonus and deduction endpoints for payroll details (admin only)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path

from employee_management.api.dependencies import AuditContext, DbSession, RateLimit
from employee_management.api.schemas import (
    BonusUpdate,
    DeductionUpdate,
    ErrorResponse,
    PayrollDetailResponse,
    PayrollDetailUpdateResponse,
)
from employee_management.services.payroll_detail_service import (
    BONUS,
    DEDUCTION,
    PayrollDetailService,
)
from employee_management.services.validators import parse_uuid

router = APIRouter(
    prefix="/payroll-details",
    tags=["payroll-details"],
    dependencies=[Depends(RateLimit("general"))],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)

DetailId = Annotated[str, Path(description="Payroll detail UUID")]


@router.put("/{detail_id}/bonus", response_model=PayrollDetailUpdateResponse)
async def update_bonus(
    db: DbSession,
    context: AuditContext,
    detail_id: DetailId,
    payload: BonusUpdate,
) -> PayrollDetailUpdateResponse:
    """Set the bonus; net pay is recomputed and must stay non-negative."""
    service = PayrollDetailService(db, context)
    detail = await service.update_bonus(
        parse_uuid(detail_id, "payroll_detail_id"), payload.bonus, payload.bonus_reason
    )
    await db.commit()
    return PayrollDetailUpdateResponse(
        message=BONUS.updated_message,
        data=PayrollDetailResponse.model_validate(detail),
    )


@router.delete("/{detail_id}/bonus", response_model=PayrollDetailUpdateResponse)
async def remove_bonus(
    db: DbSession,
    context: AuditContext,
    detail_id: DetailId,
) -> PayrollDetailUpdateResponse:
    service = PayrollDetailService(db, context)
    detail = await service.remove_bonus(parse_uuid(detail_id, "payroll_detail_id"))
    await db.commit()
    return PayrollDetailUpdateResponse(
        message=BONUS.removed_message,
        data=PayrollDetailResponse.model_validate(detail),
    )


@router.put("/{detail_id}/deduction", response_model=PayrollDetailUpdateResponse)
async def update_deduction(
    db: DbSession,
    context: AuditContext,
    detail_id: DetailId,
    payload: DeductionUpdate,
) -> PayrollDetailUpdateResponse:
    """Set the deduction; rejected if it would make net pay negative."""
    service = PayrollDetailService(db, context)
    detail = await service.update_deduction(
        parse_uuid(detail_id, "payroll_detail_id"),
        payload.deduction,
        payload.deduction_reason,
    )
    await db.commit()
    return PayrollDetailUpdateResponse(
        message=DEDUCTION.updated_message,
        data=PayrollDetailResponse.model_validate(detail),
    )


@router.delete("/{detail_id}/deduction", response_model=PayrollDetailUpdateResponse)
async def remove_deduction(
    db: DbSession,
    context: AuditContext,
    detail_id: DetailId,
) -> PayrollDetailUpdateResponse:
    service = PayrollDetailService(db, context)
    detail = await service.remove_deduction(parse_uuid(detail_id, "payroll_detail_id"))
    await db.commit()
    return PayrollDetailUpdateResponse(
        message=DEDUCTION.removed_message,
        data=PayrollDetailResponse.model_validate(detail),
    )
