"""Dashboard figures for the payroll admin page."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from employee_management.models import PayrollCycle, PayrollDetail, User, utcnow
from employee_management.services.state_machine import PayrollCycleStatus


@dataclass
class PayrollStats:
    active_cycles: int
    total_employees: int
    monthly_payroll: int
    pending_approvals: int
    growth_percentage: int
    last_updated: datetime


def month_start(day: date, months_back: int = 0) -> date:
    month = day.year * 12 + day.month - 1 - months_back
    return date(month // 12, month % 12 + 1, 1)


def growth_percentage(current: Decimal, previous: Decimal) -> int:
    """Whole-percent change from ``previous``; 0 when there is nothing to compare."""
    if previous <= 0:
        return 0
    change = (current - previous) / previous * 100
    return int(change.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class PayrollStatsService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _completed_net_pay(self, start: date, end: date) -> tuple[Decimal, int]:
        """Net pay of completed cycles ending in [start, end), and how many cycles."""
        row = (
            await self.session.execute(
                select(
                    func.coalesce(func.sum(PayrollDetail.net_pay), 0),
                    func.count(distinct(PayrollCycle.id)),
                )
                .select_from(PayrollCycle)
                .outerjoin(PayrollDetail, PayrollDetail.payroll_cycle_id == PayrollCycle.id)
                .where(
                    PayrollCycle.status == PayrollCycleStatus.COMPLETED.value,
                    PayrollCycle.end_date >= start,
                    PayrollCycle.end_date < end,
                )
            )
        ).one()
        return Decimal(str(row[0])), row[1]

    async def stats(self, now: datetime | None = None) -> PayrollStats:
        now = now or utcnow()
        this_month = month_start(now.date())
        next_month = month_start(now.date(), months_back=-1)
        last_month = month_start(now.date(), months_back=1)

        active_cycles = await self.session.scalar(
            select(func.count())
            .select_from(PayrollCycle)
            .where(PayrollCycle.status == PayrollCycleStatus.ACTIVE.value)
        )
        total_employees = await self.session.scalar(
            select(func.count())
            .select_from(User)
            .where(User.role == "employee", User.is_active.is_(True))
        )
        # Active cycles already calculated but not yet finalized
        pending_approvals = await self.session.scalar(
            select(func.count(distinct(PayrollDetail.payroll_cycle_id)))
            .join(PayrollCycle, PayrollCycle.id == PayrollDetail.payroll_cycle_id)
            .where(PayrollCycle.status == PayrollCycleStatus.ACTIVE.value)
        )

        current_total, current_cycles = await self._completed_net_pay(this_month, next_month)
        previous_total, _ = await self._completed_net_pay(last_month, this_month)

        return PayrollStats(
            active_cycles=active_cycles or 0,
            total_employees=total_employees or 0,
            monthly_payroll=int(current_total.quantize(Decimal("1"), rounding=ROUND_HALF_UP)),
            pending_approvals=pending_approvals or 0,
            growth_percentage=(
                growth_percentage(current_total, previous_total) if current_cycles else 0
            ),
            last_updated=now,
        )
