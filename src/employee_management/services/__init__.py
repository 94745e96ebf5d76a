"""Business services. Each service wraps an ``AsyncSession`` and never commits."""

from employee_management.services.audit_service import AuditAction, AuditService, RequestContext
from employee_management.services.export_service import ExportService
from employee_management.services.payroll_cycle_service import PayrollCycleService
from employee_management.services.payroll_detail_service import PayrollDetailService
from employee_management.services.report_service import ReportService
from employee_management.services.state_machine import (
    InvalidTransitionError,
    PayrollCycleStateMachine,
    PayrollCycleStatus,
)
from employee_management.services.time_entry_service import TimeEntryService

__all__ = [
    "AuditAction",
    "AuditService",
    "ExportService",
    "InvalidTransitionError",
    "PayrollCycleService",
    "PayrollCycleStateMachine",
    "PayrollCycleStatus",
    "PayrollDetailService",
    "ReportService",
    "RequestContext",
    "TimeEntryService",
]
