"""Payroll cycle service - lifecycle of a payroll cycle.

Operations:
- create_cycle: validate dates, overlap and name, then insert as active
- calculate: derive per-employee base pay from completed time entries
- reset: drop calculated details so the cycle can be recalculated
- build_summary: totals, branch breakdown and finalization readiness
- finalize: validate every detail and lock the cycle (active → completed)
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from employee_management import messages
from employee_management.calculators.base_pay import (
    EmployeePay,
    WorkSession,
    calculate_employee_pay,
)
from employee_management.calculators.net_pay import ZERO, calculate_net_pay
from employee_management.calculators.payroll_rollup import (
    BranchTotals,
    PayrollRow,
    PayrollTotals,
    ValidationIssue,
    branch_breakdown,
    calculate_totals,
    find_missing_data,
    find_negative_net_pay,
    find_validation_issues,
)
from employee_management.errors import ConflictError, NotFoundError, StateError, ValidationError
from employee_management.models import (
    Branch,
    PayrollCycle,
    PayrollDetail,
    TimeEntry,
    User,
    utcnow,
)
from employee_management.services.audit_service import (
    AuditAction,
    AuditService,
    RequestContext,
)
from employee_management.services.state_machine import (
    PayrollCycleStateMachine,
    PayrollCycleStatus,
)
from employee_management.services.validators import (
    date_ranges_overlap,
    require_fields,
    validate_date_order,
)

logger = logging.getLogger(__name__)

CYCLE_TABLE = "payroll_cycles"


def cycle_snapshot(cycle: PayrollCycle) -> dict[str, Any]:
    return {
        "name": cycle.name,
        "start_date": cycle.start_date,
        "end_date": cycle.end_date,
        "pay_date": cycle.pay_date,
        "status": cycle.status,
        "total_employees": cycle.total_employees,
        "total_amount": cycle.total_amount,
    }


@dataclass
class EmployeeCalculation:
    user: User
    pay: EmployeePay
    detail: PayrollDetail


@dataclass
class CalculationOutcome:
    cycle: PayrollCycle
    calculated_at: datetime
    employees: list[EmployeeCalculation] = field(default_factory=list)

    @property
    def total_base_pay(self) -> Decimal:
        return sum((e.pay.base_pay for e in self.employees), ZERO)


@dataclass
class CycleSummary:
    cycle: PayrollCycle
    rows: list[PayrollRow]
    totals: PayrollTotals
    issues: list[ValidationIssue]
    branches: dict[str, BranchTotals]

    @property
    def can_finalize(self) -> bool:
        return not self.issues and self.cycle.status == PayrollCycleStatus.ACTIVE


@dataclass
class FinalizationOutcome:
    cycle: PayrollCycle
    totals: PayrollTotals
    finalized_at: datetime
    finalized_by: UUID


def _invalid_employees(issues: list[ValidationIssue]) -> list[dict[str, Any]]:
    entries = []
    for issue in issues:
        entry = issue.to_dict()
        entry.pop("type")
        entries.append(entry)
    return entries


class PayrollCycleService:
    """Service for managing the payroll cycle lifecycle."""

    def __init__(self, session: AsyncSession, context: RequestContext | None = None):
        self.session = session
        self.audit = AuditService(session, context)

    # ----- Queries -----

    async def get_cycle(self, cycle_id: UUID) -> PayrollCycle:
        cycle = await self.session.get(PayrollCycle, cycle_id)
        if cycle is None:
            raise NotFoundError(messages.CYCLE_NOT_FOUND, code="CYCLE_NOT_FOUND")
        return cycle

    async def list_cycles(self) -> list[PayrollCycle]:
        result = await self.session.execute(
            select(PayrollCycle).order_by(PayrollCycle.created_at.desc())
        )
        return list(result.scalars().all())

    async def find_overlapping(
        self, start_date: date, end_date: date
    ) -> list[PayrollCycle]:
        """Cycles whose inclusive date range intersects [start_date, end_date]."""
        result = await self.session.execute(
            select(PayrollCycle)
            .where(
                date_ranges_overlap(
                    PayrollCycle.start_date, PayrollCycle.end_date, start_date, end_date
                )
            )
            .order_by(PayrollCycle.start_date)
        )
        return list(result.scalars().all())

    async def load_rows(self, cycle_id: UUID) -> list[PayrollRow]:
        """Details of a cycle joined with employee and branch, ordered by name."""
        result = await self.session.execute(
            select(
                PayrollDetail,
                User.full_name,
                User.employee_code,
                User.email,
                Branch.id,
                Branch.name,
            )
            .join(User, PayrollDetail.user_id == User.id)
            .outerjoin(Branch, User.branch_id == Branch.id)
            .where(PayrollDetail.payroll_cycle_id == cycle_id)
            .order_by(User.full_name, PayrollDetail.id)
        )
        return [
            PayrollRow(
                detail_id=detail.id,
                user_id=detail.user_id,
                full_name=full_name,
                employee_code=employee_code,
                email=email,
                branch_id=branch_id,
                branch_name=branch_name,
                base_pay=detail.base_pay,
                overtime_hours=detail.overtime_hours,
                overtime_pay=detail.overtime_pay,
                bonus=detail.bonus,
                bonus_reason=detail.bonus_reason,
                deduction=detail.deduction,
                deduction_reason=detail.deduction_reason,
                net_pay=detail.net_pay,
                calculation_method=detail.calculation_method,
                total_hours=detail.total_hours,
                total_days_worked=detail.total_days_worked,
            )
            for detail, full_name, employee_code, email, branch_id, branch_name in result.all()
        ]

    async def count_details(self, cycle_id: UUID) -> int:
        count = await self.session.scalar(
            select(func.count())
            .select_from(PayrollDetail)
            .where(PayrollDetail.payroll_cycle_id == cycle_id)
        )
        return count or 0

    # ----- Creation -----

    async def create_cycle(
        self,
        name: str | None,
        start_date: date | None,
        end_date: date | None,
        pay_date: date | None = None,
    ) -> PayrollCycle:
        """Create an active cycle after validating dates, overlap and name."""
        require_fields(
            {"name": name, "start_date": start_date, "end_date": end_date},
            ("name", "start_date", "end_date"),
            message=messages.CYCLE_REQUIRED_FIELDS,
        )
        name = name.strip()
        validate_date_order(start_date, end_date)

        overlapping = await self.find_overlapping(start_date, end_date)
        if overlapping:
            raise ConflictError(
                messages.CYCLE_OVERLAP,
                code="CYCLE_OVERLAP",
                context={
                    "conflicting_cycles": [
                        {
                            "id": c.id,
                            "name": c.name,
                            "start_date": c.start_date,
                            "end_date": c.end_date,
                        }
                        for c in overlapping
                    ]
                },
            )

        existing = await self.session.scalar(
            select(PayrollCycle.id).where(PayrollCycle.name == name)
        )
        if existing is not None:
            raise ConflictError(messages.CYCLE_DUPLICATE_NAME, code="CYCLE_DUPLICATE_NAME")

        cycle = PayrollCycle(
            name=name,
            start_date=start_date,
            end_date=end_date,
            pay_date=pay_date or end_date,
            status=PayrollCycleStatus.ACTIVE.value,
            total_employees=0,
            total_amount=ZERO,
        )
        self.session.add(cycle)
        try:
            await self.session.flush()
        except IntegrityError as e:
            # Lost a race with a concurrent create of the same name
            raise ConflictError(
                messages.CYCLE_DUPLICATE_NAME, code="CYCLE_DUPLICATE_NAME"
            ) from e

        await self.audit.record(
            AuditAction.CREATE,
            CYCLE_TABLE,
            cycle.id,
            new_values=cycle_snapshot(cycle),
            description=f"Created payroll cycle {name}",
        )
        logger.info("Created payroll cycle %s (%s to %s)", name, start_date, end_date)
        return cycle

    # ----- Calculation -----

    async def calculate(self, cycle_id: UUID) -> CalculationOutcome:
        """Create one detail per eligible employee from the cycle's time entries."""
        cycle = await self.get_cycle(cycle_id)
        PayrollCycleStateMachine.ensure_active(cycle.status)

        if await self.count_details(cycle_id):
            raise StateError(messages.CYCLE_ALREADY_CALCULATED, code="ALREADY_CALCULATED")

        employees_result = await self.session.execute(
            select(User)
            .where(
                User.role == "employee",
                User.is_active.is_(True),
                or_(User.hourly_rate.is_not(None), User.daily_rate.is_not(None)),
            )
            .order_by(User.full_name)
        )
        employees = list(employees_result.scalars().all())
        if not employees:
            raise ValidationError(
                messages.CYCLE_NO_ELIGIBLE_EMPLOYEES, code="NO_ELIGIBLE_EMPLOYEES"
            )

        period_start = datetime.combine(cycle.start_date, time.min, tzinfo=timezone.utc)
        period_end = datetime.combine(
            cycle.end_date + timedelta(days=1), time.min, tzinfo=timezone.utc
        )
        entries_result = await self.session.execute(
            select(TimeEntry).where(
                TimeEntry.user_id.in_([e.id for e in employees]),
                TimeEntry.check_in_time >= period_start,
                TimeEntry.check_in_time < period_end,
                TimeEntry.check_out_time.is_not(None),
            )
        )
        sessions: dict[UUID, list[WorkSession]] = defaultdict(list)
        for entry in entries_result.scalars().all():
            sessions[entry.user_id].append(WorkSession(entry.check_in_time, entry.check_out_time))

        outcome = CalculationOutcome(cycle=cycle, calculated_at=utcnow())
        for employee in employees:
            pay = calculate_employee_pay(
                sessions.get(employee.id, []),
                employee.hourly_rate,
                employee.daily_rate,
            )
            detail = PayrollDetail(
                payroll_cycle_id=cycle.id,
                user_id=employee.id,
                base_pay=pay.base_pay,
                overtime_hours=ZERO,
                overtime_rate=ZERO,
                overtime_pay=ZERO,
                bonus=ZERO,
                deduction=ZERO,
                net_pay=calculate_net_pay(pay.base_pay),
                calculation_method=pay.method.value,
                total_hours=pay.total_hours,
                total_days_worked=pay.days_worked,
            )
            self.session.add(detail)
            outcome.employees.append(EmployeeCalculation(employee, pay, detail))

        await self.session.flush()
        await self.audit.record(
            AuditAction.CALCULATE,
            CYCLE_TABLE,
            cycle.id,
            new_values={
                "total_employees": len(outcome.employees),
                "total_base_pay": outcome.total_base_pay,
            },
            description=f"Calculated payroll for {len(outcome.employees)} employees",
        )
        logger.info(
            "Calculated payroll cycle %s: %d employees, base pay %s",
            cycle.id,
            len(outcome.employees),
            outcome.total_base_pay,
        )
        return outcome

    async def reset(self, cycle_id: UUID) -> int:
        """Delete every detail of an active cycle; returns the number removed."""
        cycle = await self.get_cycle(cycle_id)
        PayrollCycleStateMachine.ensure_active(cycle.status)

        result = await self.session.execute(
            delete(PayrollDetail).where(PayrollDetail.payroll_cycle_id == cycle_id)
        )
        deleted = result.rowcount or 0
        await self.audit.record(
            AuditAction.RESET,
            CYCLE_TABLE,
            cycle.id,
            old_values={"details": deleted},
            new_values={"details": 0},
            description=f"Reset payroll calculation ({deleted} details removed)",
        )
        logger.info("Reset payroll cycle %s, removed %d details", cycle.id, deleted)
        return deleted

    # ----- Summary & finalization -----

    async def build_summary(self, cycle_id: UUID) -> CycleSummary:
        cycle = await self.get_cycle(cycle_id)
        rows = await self.load_rows(cycle_id)
        return CycleSummary(
            cycle=cycle,
            rows=rows,
            totals=calculate_totals(rows),
            issues=find_validation_issues(rows),
            branches=branch_breakdown(rows),
        )

    async def finalize(self, cycle_id: UUID, actor_id: UUID) -> FinalizationOutcome:
        """Lock the cycle once every detail is complete and non-negative."""
        cycle = await self.get_cycle(cycle_id)
        PayrollCycleStateMachine.ensure_active(cycle.status)

        rows = await self.load_rows(cycle_id)

        negative = find_negative_net_pay(rows)
        if negative:
            raise StateError(
                messages.CYCLE_HAS_NEGATIVE_NET_PAY,
                code="NEGATIVE_NET_PAY",
                context={"invalid_employees": _invalid_employees(negative)},
            )
        missing = find_missing_data(rows)
        if missing:
            raise StateError(
                messages.CYCLE_HAS_MISSING_DATA,
                code="MISSING_DATA",
                context={"invalid_employees": _invalid_employees(missing)},
            )

        PayrollCycleStateMachine.validate_transition(
            cycle.status, PayrollCycleStatus.COMPLETED
        )

        totals = calculate_totals(rows)
        old_values = cycle_snapshot(cycle)
        finalized_at = utcnow()

        # Conditional on status so concurrent finalizations cannot both write
        result = await self.session.execute(
            update(PayrollCycle)
            .where(
                PayrollCycle.id == cycle_id,
                PayrollCycle.status == PayrollCycleStatus.ACTIVE.value,
            )
            .values(
                status=PayrollCycleStatus.COMPLETED.value,
                finalized_at=finalized_at,
                finalized_by=actor_id,
                total_employees=totals.total_employees,
                total_amount=totals.total_net_pay,
                updated_at=finalized_at,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise StateError(
                messages.CYCLE_ALREADY_COMPLETED, code="CYCLE_ALREADY_COMPLETED"
            )

        cycle.status = PayrollCycleStatus.COMPLETED.value
        cycle.finalized_at = finalized_at
        cycle.finalized_by = actor_id
        cycle.total_employees = totals.total_employees
        cycle.total_amount = totals.total_net_pay
        cycle.updated_at = finalized_at

        await self.audit.record(
            AuditAction.FINALIZE,
            CYCLE_TABLE,
            cycle.id,
            old_values=old_values,
            new_values=cycle_snapshot(cycle),
            description=(
                f"Finalized payroll cycle {cycle.name}: "
                f"{totals.total_employees} employees, net {totals.total_net_pay}"
            ),
        )
        logger.info(
            "Finalized payroll cycle %s by %s (%d employees, total %s)",
            cycle.id,
            actor_id,
            totals.total_employees,
            totals.total_net_pay,
        )
        return FinalizationOutcome(
            cycle=cycle,
            totals=totals,
            finalized_at=finalized_at,
            finalized_by=actor_id,
        )
