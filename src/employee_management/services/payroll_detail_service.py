"""Bonus and deduction edits on payroll details."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from employee_management import messages
from employee_management.calculators.net_pay import ZERO, PayComponents, to_money
from employee_management.errors import NotFoundError, ValidationError
from employee_management.models import PayrollCycle, PayrollDetail, utcnow
from employee_management.services.audit_service import (
    AuditAction,
    AuditService,
    RequestContext,
)
from employee_management.services.state_machine import PayrollCycleStateMachine
from employee_management.services.validators import (
    MAX_AMOUNT,
    normalize_reason,
    validate_amount,
)

logger = logging.getLogger(__name__)

DETAIL_TABLE = "payroll_details"


@dataclass(frozen=True)
class Adjustment:
    """Which component is being edited and the messages that go with it."""

    field: str
    reason_field: str
    negative_message: str
    reason_required_message: str
    completed_message: str
    updated_message: str
    removed_message: str


BONUS = Adjustment(
    field="bonus",
    reason_field="bonus_reason",
    negative_message=messages.BONUS_NEGATIVE,
    reason_required_message=messages.BONUS_REASON_REQUIRED,
    completed_message=messages.BONUS_ON_COMPLETED_CYCLE,
    updated_message=messages.BONUS_UPDATED,
    removed_message=messages.BONUS_REMOVED,
)

DEDUCTION = Adjustment(
    field="deduction",
    reason_field="deduction_reason",
    negative_message=messages.DEDUCTION_NEGATIVE,
    reason_required_message=messages.DEDUCTION_REASON_REQUIRED,
    completed_message=messages.DEDUCTION_ON_COMPLETED_CYCLE,
    updated_message=messages.DEDUCTION_UPDATED,
    removed_message=messages.DEDUCTION_REMOVED,
)


def detail_snapshot(detail: PayrollDetail) -> dict[str, Any]:
    return {
        "base_pay": detail.base_pay,
        "overtime_pay": detail.overtime_pay,
        "bonus": detail.bonus,
        "bonus_reason": detail.bonus_reason,
        "deduction": detail.deduction,
        "deduction_reason": detail.deduction_reason,
        "net_pay": detail.net_pay,
    }


class PayrollDetailService:
    """Edits a single detail's bonus or deduction and keeps net pay in step."""

    def __init__(self, session: AsyncSession, context: RequestContext | None = None):
        self.session = session
        self.audit = AuditService(session, context)

    async def get_detail_for_update(self, detail_id: UUID) -> tuple[PayrollDetail, str]:
        """Load and row-lock a detail together with its cycle status."""
        result = await self.session.execute(
            select(PayrollDetail, PayrollCycle.status)
            .join(PayrollCycle, PayrollDetail.payroll_cycle_id == PayrollCycle.id)
            .where(PayrollDetail.id == detail_id)
            .with_for_update(of=PayrollDetail)
        )
        row = result.first()
        if row is None:
            raise NotFoundError(messages.DETAIL_NOT_FOUND, code="DETAIL_NOT_FOUND")
        return row[0], row[1]

    async def set_adjustment(
        self,
        adjustment: Adjustment,
        detail_id: UUID,
        amount: Decimal | None,
        reason: str | None,
    ) -> PayrollDetail:
        """Set bonus or deduction; a zero amount clears the reason."""
        amount = to_money(validate_amount(amount, adjustment.negative_message))
        stored_reason = normalize_reason(amount, reason, adjustment.reason_required_message)

        detail, cycle_status = await self.get_detail_for_update(detail_id)
        PayrollCycleStateMachine.ensure_details_editable(
            cycle_status, adjustment.completed_message
        )
        return await self._apply(
            adjustment, detail, amount, stored_reason, AuditAction.UPDATE
        )

    async def remove_adjustment(
        self, adjustment: Adjustment, detail_id: UUID
    ) -> PayrollDetail:
        detail, cycle_status = await self.get_detail_for_update(detail_id)
        PayrollCycleStateMachine.ensure_details_editable(
            cycle_status, adjustment.completed_message
        )
        return await self._apply(adjustment, detail, ZERO, None, AuditAction.DELETE)

    async def _apply(
        self,
        adjustment: Adjustment,
        detail: PayrollDetail,
        amount: Decimal,
        reason: str | None,
        action: AuditAction,
    ) -> PayrollDetail:
        components = PayComponents.from_detail(detail)
        if adjustment is BONUS:
            components = components.with_bonus(amount)
        else:
            components = components.with_deduction(amount)

        if components.is_negative:
            raise ValidationError(
                messages.NET_PAY_NEGATIVE,
                code="NEGATIVE_NET_PAY",
                context={"calculated_net_pay": components.net_pay},
            )
        if components.net_pay > MAX_AMOUNT:
            raise ValidationError(
                messages.AMOUNT_TOO_LARGE,
                code="INVALID_AMOUNT",
                context={"calculated_net_pay": components.net_pay},
            )

        old_values = detail_snapshot(detail)
        setattr(detail, adjustment.field, amount)
        setattr(detail, adjustment.reason_field, reason)
        detail.net_pay = components.net_pay
        detail.updated_at = utcnow()
        await self.session.flush()

        await self.audit.record(
            action,
            DETAIL_TABLE,
            detail.id,
            old_values=old_values,
            new_values=detail_snapshot(detail),
            description=f"{action.value} {adjustment.field} for user {detail.user_id}",
        )
        logger.info(
            "%s %s on payroll detail %s: %s (net %s)",
            action.value,
            adjustment.field,
            detail.id,
            amount,
            detail.net_pay,
        )
        return detail

    async def update_bonus(
        self, detail_id: UUID, bonus: Decimal | None, reason: str | None
    ) -> PayrollDetail:
        return await self.set_adjustment(BONUS, detail_id, bonus, reason)

    async def remove_bonus(self, detail_id: UUID) -> PayrollDetail:
        return await self.remove_adjustment(BONUS, detail_id)

    async def update_deduction(
        self, detail_id: UUID, deduction: Decimal | None, reason: str | None
    ) -> PayrollDetail:
        return await self.set_adjustment(DEDUCTION, detail_id, deduction, reason)

    async def remove_deduction(self, detail_id: UUID) -> PayrollDetail:
        return await self.remove_adjustment(DEDUCTION, detail_id)
