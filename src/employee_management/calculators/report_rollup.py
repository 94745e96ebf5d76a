"""Admin report aggregations over branch, sales and material usage rows."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable
from uuid import UUID

from employee_management.calculators.net_pay import ZERO, to_money

UNKNOWN_MATERIAL = "ไม่ระบุวัตถุดิบ"
UNKNOWN_BRANCH = "ไม่ระบุสาขา"
UNKNOWN_EMPLOYEE = "ไม่ระบุ"
RECENT_REPORTS_LIMIT = 20


class DateRange(str, Enum):
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    CUSTOM = "custom"
    ALL = "all"


@dataclass(frozen=True)
class ReportWindow:
    """Inclusive lower bound and exclusive upper bound, both optional."""

    date_range: DateRange
    start: datetime | None
    end: datetime | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.date_range.value,
            "start": self.start,
            "end": self.end,
        }


def resolve_window(
    date_range: DateRange,
    start_date: date | None = None,
    end_date: date | None = None,
    now: datetime | None = None,
) -> ReportWindow:
    """Translate a named range into datetime bounds (UTC)."""
    now = now or datetime.now(timezone.utc)
    today = datetime.combine(now.date(), time.min, tzinfo=timezone.utc)

    if date_range is DateRange.ALL:
        return ReportWindow(date_range, None, None)
    if date_range is DateRange.WEEK:
        return ReportWindow(date_range, now - timedelta(days=7), None)
    if date_range is DateRange.MONTH:
        return ReportWindow(date_range, now - timedelta(days=30), None)
    if date_range is DateRange.CUSTOM:
        start = (
            datetime.combine(start_date, time.min, tzinfo=timezone.utc)
            if start_date
            else today
        )
        end = (
            datetime.combine(end_date + timedelta(days=1), time.min, tzinfo=timezone.utc)
            if end_date
            else None
        )
        return ReportWindow(date_range, start, end)
    return ReportWindow(DateRange.TODAY, today, None)


def _ratio(numerator: Decimal, denominator: Decimal | int) -> Decimal:
    if not denominator:
        return ZERO
    return to_money(Decimal(numerator) / Decimal(denominator))


# ===== Branch report =====


@dataclass(frozen=True)
class BranchInfo:
    id: UUID
    name: str
    address: str | None
    employee_count: int


@dataclass(frozen=True)
class SessionRow:
    branch_id: UUID
    total_hours: Decimal | None
    is_open: bool


def branch_report(
    branches: Iterable[BranchInfo],
    sales_by_branch: dict[UUID, Decimal],
    sessions: Iterable[SessionRow],
) -> dict[str, Any]:
    """Per-branch sales, staffing and hours, ordered by sales descending."""
    sessions_by_branch: dict[UUID, list[SessionRow]] = {}
    for session in sessions:
        sessions_by_branch.setdefault(session.branch_id, []).append(session)

    reports = []
    for branch in branches:
        branch_sessions = sessions_by_branch.get(branch.id, [])
        total_sales = to_money(sales_by_branch.get(branch.id))
        total_hours = to_money(sum((to_money(s.total_hours) for s in branch_sessions), ZERO))
        active_now = sum(1 for s in branch_sessions if s.is_open)
        session_count = len(branch_sessions)

        reports.append(
            {
                "branch_id": branch.id,
                "branch_name": branch.name,
                "address": branch.address,
                "sales": {"total": total_sales, "currency": "THB"},
                "employees": {
                    "total": branch.employee_count,
                    "active_now": active_now,
                    "attendance_rate": (
                        round(active_now * 100 / branch.employee_count)
                        if branch.employee_count
                        else 0
                    ),
                },
                "work_hours": {
                    "total": total_hours,
                    "sessions": session_count,
                    "average_per_session": _ratio(total_hours, session_count),
                },
                "performance": {
                    "sales_per_employee": _ratio(total_sales, branch.employee_count),
                    "sales_per_hour": _ratio(total_sales, total_hours),
                },
            }
        )

    reports.sort(key=lambda r: r["sales"]["total"], reverse=True)

    branch_count = len(reports)
    total_sales = sum((r["sales"]["total"] for r in reports), ZERO)
    total_employees = sum(r["employees"]["total"] for r in reports)
    summary = {
        "total_branches": branch_count,
        "total_sales": total_sales,
        "total_employees": total_employees,
        "total_active_now": sum(r["employees"]["active_now"] for r in reports),
        "total_work_hours": sum((r["work_hours"]["total"] for r in reports), ZERO),
        "average_sales_per_branch": _ratio(total_sales, branch_count),
        "average_employees_per_branch": _ratio(Decimal(total_employees), branch_count),
    }
    return {"summary": summary, "branches": reports}


# ===== Sales report =====


@dataclass(frozen=True)
class SalesRow:
    id: UUID
    branch_id: UUID
    branch_name: str
    user_id: UUID
    employee_name: str | None
    employee_code: str | None
    report_date: date
    total_sales: Decimal
    created_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "branch_id": self.branch_id,
            "branch_name": self.branch_name,
            "user_id": self.user_id,
            "employee_name": self.employee_name,
            "employee_code": self.employee_code,
            "report_date": self.report_date,
            "total_sales": self.total_sales,
            "created_at": self.created_at,
        }


def sales_report(rows: list[SalesRow]) -> dict[str, Any]:
    """Daily and per-branch sales breakdown; rows are newest first."""
    daily: dict[date, dict[str, Any]] = {}
    by_branch: dict[UUID, dict[str, Any]] = {}

    for row in rows:
        day = daily.setdefault(
            row.report_date,
            {"date": row.report_date, "total_sales": ZERO, "report_count": 0, "branches": set()},
        )
        day["total_sales"] += to_money(row.total_sales)
        day["report_count"] += 1
        day["branches"].add(row.branch_name)

        branch = by_branch.setdefault(
            row.branch_id,
            {
                "branch_id": row.branch_id,
                "branch_name": row.branch_name,
                "total_sales": ZERO,
                "report_count": 0,
                "employees": set(),
            },
        )
        branch["total_sales"] += to_money(row.total_sales)
        branch["report_count"] += 1
        branch["employees"].add(row.employee_name or UNKNOWN_EMPLOYEE)

    daily_breakdown = sorted(
        (
            {
                **day,
                "branches": sorted(day["branches"]),
                "average_sale_per_report": _ratio(day["total_sales"], day["report_count"]),
            }
            for day in daily.values()
        ),
        key=lambda d: d["date"],
        reverse=True,
    )
    branch_breakdown = sorted(
        (
            {
                **branch,
                "employees": sorted(branch["employees"]),
                "average_sale_per_report": _ratio(branch["total_sales"], branch["report_count"]),
            }
            for branch in by_branch.values()
        ),
        key=lambda b: b["total_sales"],
        reverse=True,
    )

    total_sales = sum((to_money(r.total_sales) for r in rows), ZERO)
    top = branch_breakdown[0] if branch_breakdown else None
    summary = {
        "total_sales": total_sales,
        "total_reports": len(rows),
        "unique_branches": len({r.branch_id for r in rows}),
        "unique_employees": len({r.user_id for r in rows}),
        "average_sale_per_report": _ratio(total_sales, len(rows)),
        "top_performing_branch": top["branch_name"] if top else None,
        "top_performing_branch_sales": top["total_sales"] if top else ZERO,
    }
    return {
        "summary": summary,
        "daily_breakdown": daily_breakdown,
        "branch_breakdown": branch_breakdown,
        "recent_reports": [r.to_dict() for r in rows[:RECENT_REPORTS_LIMIT]],
    }


# ===== Materials report =====


@dataclass(frozen=True)
class UsageRow:
    id: UUID
    material_id: UUID
    material_name: str | None
    unit: str | None
    supplier: str | None
    branch_id: UUID | None
    branch_name: str | None
    employee_name: str | None
    quantity_used: Decimal
    total_cost: Decimal
    created_at: datetime


def materials_report(rows: list[UsageRow]) -> dict[str, Any]:
    """Material usage grouped by material, branch and day."""
    by_material: dict[UUID, dict[str, Any]] = {}
    by_branch: dict[str, dict[str, Any]] = {}
    daily: dict[date, dict[str, Any]] = {}

    for row in rows:
        material_name = row.material_name or UNKNOWN_MATERIAL
        branch_name = row.branch_name or UNKNOWN_BRANCH
        employee_name = row.employee_name or UNKNOWN_EMPLOYEE
        cost = to_money(row.total_cost)
        quantity = Decimal(row.quantity_used or 0)

        material = by_material.setdefault(
            row.material_id,
            {
                "material_id": row.material_id,
                "material_name": material_name,
                "unit": row.unit,
                "supplier": row.supplier,
                "total_quantity": Decimal(0),
                "total_cost": ZERO,
                "usage_count": 0,
                "branches": set(),
                "employees": set(),
            },
        )
        material["total_quantity"] += quantity
        material["total_cost"] += cost
        material["usage_count"] += 1
        material["branches"].add(branch_name)
        material["employees"].add(employee_name)

        branch_key = str(row.branch_id) if row.branch_id else "unknown"
        branch = by_branch.setdefault(
            branch_key,
            {
                "branch_id": row.branch_id,
                "branch_name": branch_name,
                "total_cost": ZERO,
                "usage_count": 0,
                "materials": set(),
                "employees": set(),
            },
        )
        branch["total_cost"] += cost
        branch["usage_count"] += 1
        branch["materials"].add(material_name)
        branch["employees"].add(employee_name)

        day_key = row.created_at.date()
        day = daily.setdefault(
            day_key,
            {"date": day_key, "total_cost": ZERO, "usage_count": 0, "materials": set()},
        )
        day["total_cost"] += cost
        day["usage_count"] += 1
        day["materials"].add(material_name)

    material_breakdown = sorted(
        (
            {
                **m,
                "branches": sorted(m["branches"]),
                "employees": sorted(m["employees"]),
                "average_cost_per_usage": _ratio(m["total_cost"], m["usage_count"]),
                "average_quantity_per_usage": _ratio(m["total_quantity"], m["usage_count"]),
            }
            for m in by_material.values()
        ),
        key=lambda m: m["total_cost"],
        reverse=True,
    )
    branch_breakdown = sorted(
        (
            {
                **b,
                "materials": sorted(b["materials"]),
                "employees": sorted(b["employees"]),
                "average_cost_per_usage": _ratio(b["total_cost"], b["usage_count"]),
            }
            for b in by_branch.values()
        ),
        key=lambda b: b["total_cost"],
        reverse=True,
    )
    daily_breakdown = sorted(
        ({**d, "materials": sorted(d["materials"])} for d in daily.values()),
        key=lambda d: d["date"],
        reverse=True,
    )

    total_cost = sum((to_money(r.total_cost) for r in rows), ZERO)
    summary = {
        "total_cost": total_cost,
        "total_usages": len(rows),
        "unique_materials": len(by_material),
        "unique_branches": len(by_branch),
        "average_cost_per_usage": _ratio(total_cost, len(rows)),
        "most_used_material": material_breakdown[0]["material_name"] if material_breakdown else None,
    }
    return {
        "summary": summary,
        "material_breakdown": material_breakdown,
        "branch_breakdown": branch_breakdown,
        "daily_breakdown": daily_breakdown,
    }
