"""API routes."""

from employee_management.api.routes.audit_logs import router as audit_logs_router
from employee_management.api.routes.health import router as health_router
from employee_management.api.routes.material_usage import router as material_usage_router
from employee_management.api.routes.payroll_cycles import router as payroll_cycles_router
from employee_management.api.routes.payroll_details import router as payroll_details_router
from employee_management.api.routes.payroll_stats import router as payroll_stats_router
from employee_management.api.routes.reports import router as reports_router
from employee_management.api.routes.sales_reports import router as sales_reports_router
from employee_management.api.routes.time_entries import router as time_entries_router

__all__ = [
    "audit_logs_router",
    "health_router",
    "material_usage_router",
    "payroll_cycles_router",
    "payroll_details_router",
    "payroll_stats_router",
    "reports_router",
    "sales_reports_router",
    "time_entries_router",
]
