"""Daily sales reports submitted by employees."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from employee_management import messages
from employee_management.calculators.net_pay import to_money
from employee_management.errors import AuthorizationError, StateError, ValidationError
from employee_management.models import Branch, SalesReport, TimeEntry, User, utcnow
from employee_management.services.validators import MAX_AMOUNT

logger = logging.getLogger(__name__)

SLIP_BUCKET = "sales-slips"


@dataclass
class SalesReportResult:
    report: SalesReport
    branch: Branch


def slip_belongs_to(slip_image_url: str, user_id: UUID) -> bool:
    """Slips are uploaded under ``/sales-slips/{user_id}/``."""
    return f"/{SLIP_BUCKET}/{user_id}/" in slip_image_url


def validate_total_sales(total_sales: Decimal | None) -> Decimal:
    if total_sales is None or not total_sales.is_finite():
        raise ValidationError(messages.SALES_AMOUNT_INVALID, code="INVALID_SALES_AMOUNT")
    if total_sales <= 0 or total_sales > MAX_AMOUNT:
        raise ValidationError(
            messages.SALES_AMOUNT_INVALID,
            code="INVALID_SALES_AMOUNT",
            context={"max_amount": MAX_AMOUNT},
        )
    return to_money(total_sales)


class SalesReportService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def branch_checked_in_on(self, user_id: UUID, day: date) -> UUID | None:
        """Branch of the user's latest check-in on ``day`` (UTC)."""
        start = datetime.combine(day, time.min, tzinfo=timezone.utc)
        result = await self.session.execute(
            select(TimeEntry.branch_id)
            .where(
                TimeEntry.user_id == user_id,
                TimeEntry.check_in_time >= start,
                TimeEntry.check_in_time < start + timedelta(days=1),
            )
            .order_by(TimeEntry.check_in_time.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def submit(
        self,
        user: User,
        total_sales: Decimal | None,
        slip_image_url: str | None,
        now: datetime | None = None,
    ) -> SalesReportResult:
        """Record today's sales for the branch the employee last checked in at."""
        if user.role != "employee":
            raise AuthorizationError(messages.EMPLOYEE_ACCESS_REQUIRED, code="EMPLOYEE_ONLY")

        report_date = (now or utcnow()).astimezone(timezone.utc).date()
        branch_id = await self.branch_checked_in_on(user.id, report_date)
        if branch_id is None:
            raise ValidationError(messages.SALES_CHECK_IN_REQUIRED, code="CHECK_IN_REQUIRED")

        slip_image_url = (slip_image_url or "").strip()
        if total_sales is None or not slip_image_url:
            raise ValidationError(messages.SALES_REQUIRED_FIELDS, code="MISSING_FIELDS")
        total_sales = validate_total_sales(total_sales)

        if not slip_belongs_to(slip_image_url, user.id):
            logger.warning("User %s submitted a slip outside their folder", user.id)
            raise AuthorizationError(messages.SALES_SLIP_NOT_OWNED, code="SLIP_NOT_OWNED")

        existing = await self.session.scalar(
            select(SalesReport.id).where(
                SalesReport.user_id == user.id,
                SalesReport.branch_id == branch_id,
                SalesReport.report_date == report_date,
            )
        )
        if existing is not None:
            raise StateError(
                messages.SALES_ALREADY_REPORTED,
                code="SALES_ALREADY_REPORTED",
                context={"report_id": existing},
            )

        report = SalesReport(
            branch_id=branch_id,
            user_id=user.id,
            report_date=report_date,
            total_sales=total_sales,
            slip_image_url=slip_image_url,
        )
        self.session.add(report)
        await self.session.flush()

        branch = await self.session.get(Branch, branch_id)
        logger.info(
            "User %s reported sales of %s for branch %s on %s",
            user.id,
            total_sales,
            branch_id,
            report_date,
        )
        return SalesReportResult(report, branch)

    async def list_for_user(
        self, user: User, report_date: date | None = None
    ) -> list[tuple[SalesReport, str]]:
        """The employee's own reports with branch names, newest first."""
        if user.role != "employee":
            raise AuthorizationError(messages.EMPLOYEE_ACCESS_REQUIRED, code="EMPLOYEE_ONLY")

        query = (
            select(SalesReport, Branch.name)
            .join(Branch, Branch.id == SalesReport.branch_id)
            .where(SalesReport.user_id == user.id)
            .order_by(SalesReport.created_at.desc(), SalesReport.report_date.desc())
        )
        if report_date is not None:
            query = query.where(SalesReport.report_date == report_date)
        result = await self.session.execute(query)
        return [(report, branch_name) for report, branch_name in result.all()]
