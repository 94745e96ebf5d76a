"""ORM models."""

from employee_management.models.base import Base, utcnow
from employee_management.models.operations import (
    MaterialUsage,
    RawMaterial,
    SalesReport,
    TimeEntry,
)
from employee_management.models.organization import Branch, User
from employee_management.models.payroll import AuditLog, PayrollCycle, PayrollDetail

__all__ = [
    "AuditLog",
    "Base",
    "Branch",
    "MaterialUsage",
    "PayrollCycle",
    "PayrollDetail",
    "RawMaterial",
    "SalesReport",
    "TimeEntry",
    "User",
    "utcnow",
]
