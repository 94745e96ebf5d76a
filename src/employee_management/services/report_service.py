"""Admin reports: branches, sales and material usage."""

from __future__ import annotations

from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from employee_management.calculators.report_rollup import (
    BranchInfo,
    ReportWindow,
    SalesRow,
    SessionRow,
    UsageRow,
    branch_report,
    materials_report,
    sales_report,
)
from employee_management.models import (
    Branch,
    MaterialUsage,
    RawMaterial,
    SalesReport,
    TimeEntry,
    User,
)


def _within(query: Select, column: Any, window: ReportWindow) -> Select:
    if window.start is not None:
        query = query.where(column >= window.start)
    if window.end is not None:
        query = query.where(column < window.end)
    return query


class ReportService:
    """Fetches report rows and hands them to the pure aggregators."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def branches(
        self, window: ReportWindow, branch_id: UUID | None = None
    ) -> dict[str, Any]:
        employee_counts = (
            select(User.branch_id, func.count(User.id).label("employee_count"))
            .where(User.role == "employee", User.is_active.is_(True))
            .group_by(User.branch_id)
            .subquery()
        )
        branch_query = (
            select(Branch, employee_counts.c.employee_count)
            .outerjoin(employee_counts, employee_counts.c.branch_id == Branch.id)
            .order_by(Branch.name)
        )
        if branch_id:
            branch_query = branch_query.where(Branch.id == branch_id)
        branches = [
            BranchInfo(branch.id, branch.name, branch.address, count or 0)
            for branch, count in (await self.session.execute(branch_query)).all()
        ]
        branch_ids = [b.id for b in branches]

        sales_query = _within(
            select(SalesReport.branch_id, func.sum(SalesReport.total_sales))
            .where(SalesReport.branch_id.in_(branch_ids))
            .group_by(SalesReport.branch_id),
            SalesReport.created_at,
            window,
        )
        sales_by_branch: dict[UUID, Decimal] = {
            bid: total for bid, total in (await self.session.execute(sales_query)).all()
        }

        sessions_query = _within(
            select(TimeEntry.branch_id, TimeEntry.total_hours, TimeEntry.check_out_time)
            .where(TimeEntry.branch_id.in_(branch_ids)),
            TimeEntry.check_in_time,
            window,
        )
        sessions = [
            SessionRow(bid, hours, check_out is None)
            for bid, hours, check_out in (await self.session.execute(sessions_query)).all()
        ]

        report = branch_report(branches, sales_by_branch, sessions)
        report["date_range"] = window.to_dict()
        return report

    async def sales(
        self, window: ReportWindow, branch_id: UUID | None = None, limit: int = 100
    ) -> dict[str, Any]:
        query = (
            select(SalesReport, Branch.name, User.full_name, User.employee_code)
            .join(Branch, SalesReport.branch_id == Branch.id)
            .join(User, SalesReport.user_id == User.id)
        )
        if branch_id:
            query = query.where(SalesReport.branch_id == branch_id)
        query = _within(query, SalesReport.created_at, window)
        query = query.order_by(SalesReport.created_at.desc()).limit(limit)

        rows = [
            SalesRow(
                id=report.id,
                branch_id=report.branch_id,
                branch_name=branch_name,
                user_id=report.user_id,
                employee_name=full_name,
                employee_code=employee_code,
                report_date=report.report_date,
                total_sales=report.total_sales,
                created_at=report.created_at,
            )
            for report, branch_name, full_name, employee_code in (
                await self.session.execute(query)
            ).all()
        ]
        report = sales_report(rows)
        report["date_range"] = window.to_dict()
        return report

    async def materials(
        self, window: ReportWindow, branch_id: UUID | None = None, limit: int = 1000
    ) -> dict[str, Any]:
        query = (
            select(
                MaterialUsage,
                RawMaterial.name,
                RawMaterial.unit,
                RawMaterial.supplier,
                Branch.id,
                Branch.name,
                User.full_name,
            )
            .outerjoin(RawMaterial, MaterialUsage.material_id == RawMaterial.id)
            .outerjoin(TimeEntry, MaterialUsage.time_entry_id == TimeEntry.id)
            .outerjoin(Branch, TimeEntry.branch_id == Branch.id)
            .outerjoin(User, TimeEntry.user_id == User.id)
        )
        if branch_id:
            query = query.where(TimeEntry.branch_id == branch_id)
        query = _within(query, MaterialUsage.created_at, window)
        query = query.order_by(MaterialUsage.created_at.desc()).limit(limit)

        rows = [
            UsageRow(
                id=usage.id,
                material_id=usage.material_id,
                material_name=material_name,
                unit=unit,
                supplier=supplier,
                branch_id=bid,
                branch_name=branch_name,
                employee_name=employee_name,
                quantity_used=usage.quantity_used,
                total_cost=usage.total_cost,
                created_at=usage.created_at,
            )
            for usage, material_name, unit, supplier, bid, branch_name, employee_name in (
                await self.session.execute(query)
            ).all()
        ]
        report = materials_report(rows)
        report["date_range"] = window.to_dict()
        return report
