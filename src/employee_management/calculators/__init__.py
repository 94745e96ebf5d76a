"""Pure payroll and reporting calculations (no database access)."""

from employee_management.calculators.base_pay import (
    CalculationMethod,
    EmployeePay,
    WorkSession,
    calculate_employee_pay,
)
from employee_management.calculators.net_pay import (
    PayComponents,
    calculate_net_pay,
    to_money,
)
from employee_management.calculators.payroll_rollup import (
    PayrollRow,
    PayrollTotals,
    ValidationIssue,
    branch_breakdown,
    calculate_totals,
    find_validation_issues,
)

__all__ = [
    "CalculationMethod",
    "EmployeePay",
    "PayComponents",
    "PayrollRow",
    "PayrollTotals",
    "ValidationIssue",
    "WorkSession",
    "branch_breakdown",
    "calculate_employee_pay",
    "calculate_net_pay",
    "calculate_totals",
    "find_validation_issues",
    "to_money",
]
