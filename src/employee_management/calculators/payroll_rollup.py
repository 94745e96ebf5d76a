"""Aggregation over a cycle's payroll details.

Summary, finalization and export all work on the same joined rows
(detail + employee + branch), represented by ``PayrollRow``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable
from uuid import UUID

from employee_management import messages
from employee_management.calculators.net_pay import ZERO, to_money

NO_BRANCH_KEY = "no_branch"


class IssueType(str, Enum):
    NEGATIVE_NET_PAY = "negative_net_pay"
    MISSING_DATA = "missing_data"


@dataclass(frozen=True)
class PayrollRow:
    """A payroll detail joined with its employee and branch."""

    detail_id: UUID
    user_id: UUID
    full_name: str | None
    employee_code: str | None
    email: str | None
    branch_id: UUID | None
    branch_name: str | None
    base_pay: Decimal | None
    overtime_hours: Decimal
    overtime_pay: Decimal
    bonus: Decimal
    bonus_reason: str | None
    deduction: Decimal
    deduction_reason: str | None
    net_pay: Decimal | None
    calculation_method: str
    total_hours: Decimal = ZERO
    total_days_worked: int = 0

    @property
    def display_name(self) -> str:
        return self.full_name or "Unknown"

    def missing_fields(self) -> list[str]:
        missing = []
        if not self.full_name:
            missing.append("full_name")
        if self.base_pay is None:
            missing.append("base_pay")
        if self.net_pay is None:
            missing.append("net_pay")
        return missing

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.detail_id,
            "user_id": self.user_id,
            "full_name": self.full_name,
            "employee_code": self.employee_code,
            "email": self.email,
            "branch_id": self.branch_id,
            "branch_name": self.branch_name,
            "base_pay": self.base_pay,
            "overtime_hours": self.overtime_hours,
            "overtime_pay": self.overtime_pay,
            "bonus": self.bonus,
            "bonus_reason": self.bonus_reason,
            "deduction": self.deduction,
            "deduction_reason": self.deduction_reason,
            "net_pay": self.net_pay,
            "calculation_method": self.calculation_method,
            "total_hours": self.total_hours,
            "total_days_worked": self.total_days_worked,
        }


@dataclass
class PayrollTotals:
    total_employees: int = 0
    total_base_pay: Decimal = ZERO
    total_overtime_pay: Decimal = ZERO
    total_bonus: Decimal = ZERO
    total_deduction: Decimal = ZERO
    total_net_pay: Decimal = ZERO
    average_net_pay: Decimal = ZERO

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_employees": self.total_employees,
            "total_base_pay": self.total_base_pay,
            "total_overtime_pay": self.total_overtime_pay,
            "total_bonus": self.total_bonus,
            "total_deduction": self.total_deduction,
            "total_net_pay": self.total_net_pay,
            "average_net_pay": self.average_net_pay,
        }


@dataclass
class ValidationIssue:
    issue_type: IssueType
    user_id: UUID
    name: str
    employee_code: str | None
    net_pay: Decimal | None = None
    missing_data: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": self.issue_type.value,
            "user_id": self.user_id,
            "name": self.name,
            "employee_code": self.employee_code,
        }
        if self.issue_type is IssueType.NEGATIVE_NET_PAY:
            data["net_pay"] = self.net_pay
        else:
            data["missing_data"] = self.missing_data
        return data


@dataclass
class BranchTotals:
    branch_id: UUID | None
    branch_name: str
    employee_count: int = 0
    total_base_pay: Decimal = ZERO
    total_overtime_pay: Decimal = ZERO
    total_bonus: Decimal = ZERO
    total_deduction: Decimal = ZERO
    total_net_pay: Decimal = ZERO

    def to_dict(self) -> dict[str, Any]:
        return {
            "branch_id": self.branch_id,
            "branch_name": self.branch_name,
            "employee_count": self.employee_count,
            "total_base_pay": self.total_base_pay,
            "total_overtime_pay": self.total_overtime_pay,
            "total_bonus": self.total_bonus,
            "total_deduction": self.total_deduction,
            "total_net_pay": self.total_net_pay,
        }


def calculate_totals(rows: Iterable[PayrollRow]) -> PayrollTotals:
    """Sum every pay component and average net pay across rows."""
    totals = PayrollTotals()
    for row in rows:
        totals.total_employees += 1
        totals.total_base_pay += to_money(row.base_pay)
        totals.total_overtime_pay += to_money(row.overtime_pay)
        totals.total_bonus += to_money(row.bonus)
        totals.total_deduction += to_money(row.deduction)
        totals.total_net_pay += to_money(row.net_pay)

    if totals.total_employees:
        totals.average_net_pay = to_money(totals.total_net_pay / totals.total_employees)
    return totals


def find_negative_net_pay(rows: Iterable[PayrollRow]) -> list[ValidationIssue]:
    return [
        ValidationIssue(
            issue_type=IssueType.NEGATIVE_NET_PAY,
            user_id=row.user_id,
            name=row.display_name,
            employee_code=row.employee_code,
            net_pay=row.net_pay,
        )
        for row in rows
        if row.net_pay is not None and row.net_pay < 0
    ]


def find_missing_data(rows: Iterable[PayrollRow]) -> list[ValidationIssue]:
    issues = []
    for row in rows:
        missing = row.missing_fields()
        if missing:
            issues.append(
                ValidationIssue(
                    issue_type=IssueType.MISSING_DATA,
                    user_id=row.user_id,
                    name=row.display_name,
                    employee_code=row.employee_code,
                    missing_data=missing,
                )
            )
    return issues


def find_validation_issues(rows: list[PayrollRow]) -> list[ValidationIssue]:
    """All issues that block finalization."""
    return find_negative_net_pay(rows) + find_missing_data(rows)


def branch_breakdown(rows: Iterable[PayrollRow]) -> dict[str, BranchTotals]:
    """Group totals by branch id; rows without a branch land under ``no_branch``."""
    breakdown: dict[str, BranchTotals] = {}
    for row in rows:
        key = str(row.branch_id) if row.branch_id else NO_BRANCH_KEY
        bucket = breakdown.get(key)
        if bucket is None:
            bucket = BranchTotals(
                branch_id=row.branch_id,
                branch_name=row.branch_name or messages.NO_BRANCH_NAME,
            )
            breakdown[key] = bucket
        bucket.employee_count += 1
        bucket.total_base_pay += to_money(row.base_pay)
        bucket.total_overtime_pay += to_money(row.overtime_pay)
        bucket.total_bonus += to_money(row.bonus)
        bucket.total_deduction += to_money(row.deduction)
        bucket.total_net_pay += to_money(row.net_pay)
    return breakdown
