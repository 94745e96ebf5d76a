"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

# Amounts are Decimal internally and plain JSON numbers on the wire
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
Quantity = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


# ============================================================================
# Errors
# ============================================================================


class ErrorResponse(BaseModel):
    """Standard error response. Extra keys carry error context."""

    model_config = ConfigDict(extra="allow")

    detail: str
    code: str


# ============================================================================
# Payroll cycle schemas
# ============================================================================


class PayrollCycleCreate(BaseModel):
    """Schema for creating a payroll cycle.

    Fields are optional here so missing values are reported together with a
    single message by the service.
    """

    name: str | None = Field(default=None, max_length=200)
    start_date: date | None = None
    end_date: date | None = None
    pay_date: date | None = None


class PayrollCycleResponse(BaseModel):
    """Schema for payroll cycle response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    start_date: date
    end_date: date
    pay_date: date | None = None
    status: str
    finalized_at: datetime | None = None
    finalized_by: UUID | None = None
    total_employees: int
    total_amount: Money
    created_at: datetime
    updated_at: datetime


class PayrollCycleCreatedResponse(BaseModel):
    message: str
    payroll_cycle: PayrollCycleResponse


class PayrollCycleListResponse(BaseModel):
    payroll_cycles: list[PayrollCycleResponse]


class PayrollCycleEnvelope(BaseModel):
    payroll_cycle: PayrollCycleResponse


class CycleInfo(BaseModel):
    """Cycle header embedded in summary, finalize and export responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    start_date: date
    end_date: date
    pay_date: date | None = None
    status: str
    finalized_at: datetime | None = None
    finalized_by: UUID | None = None


# ============================================================================
# Calculation schemas
# ============================================================================


class EmployeeCalculationResponse(BaseModel):
    user_id: UUID
    full_name: str
    employee_code: str | None = None
    total_hours: Money
    total_days_worked: int
    base_pay: Money
    calculation_method: str


class CalculationSummary(BaseModel):
    cycle_id: UUID
    total_employees: int
    total_base_pay: Money
    calculated_at: datetime


class CalculationResponse(BaseModel):
    message: str
    calculation_summary: CalculationSummary
    employee_calculations: list[EmployeeCalculationResponse]


class ResetResponse(BaseModel):
    message: str
    deleted_details: int


# ============================================================================
# Payroll detail schemas
# ============================================================================


class PayrollDetailResponse(BaseModel):
    """Schema for payroll detail response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    payroll_cycle_id: UUID
    user_id: UUID
    base_pay: Money | None = None
    overtime_hours: Money
    overtime_rate: Money
    overtime_pay: Money
    bonus: Money
    bonus_reason: str | None = None
    deduction: Money
    deduction_reason: str | None = None
    net_pay: Money | None = None
    calculation_method: str
    total_hours: Money
    total_days_worked: int
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


class PayrollDetailUpdateResponse(BaseModel):
    message: str
    data: PayrollDetailResponse


class BonusUpdate(BaseModel):
    bonus: Decimal | None = None
    bonus_reason: str | None = None


class DeductionUpdate(BaseModel):
    deduction: Decimal | None = None
    deduction_reason: str | None = None


# ============================================================================
# Summary / finalization schemas
# ============================================================================


class PayrollTotalsResponse(BaseModel):
    total_employees: int
    total_base_pay: Money
    total_overtime_pay: Money
    total_bonus: Money
    total_deduction: Money
    total_net_pay: Money
    average_net_pay: Money


class ValidationIssueResponse(BaseModel):
    type: str
    user_id: UUID
    name: str
    employee_code: str | None = None
    net_pay: Money | None = None
    missing_data: list[str] | None = None


class ValidationResponse(BaseModel):
    can_finalize: bool
    issues_count: int
    issues: list[ValidationIssueResponse]


class BranchTotalsResponse(BaseModel):
    branch_id: UUID | None = None
    branch_name: str
    employee_count: int
    total_base_pay: Money
    total_overtime_pay: Money
    total_bonus: Money
    total_deduction: Money
    total_net_pay: Money


class EmployeeDetailResponse(BaseModel):
    id: UUID
    user_id: UUID
    full_name: str | None = None
    employee_code: str | None = None
    email: str | None = None
    branch_id: UUID | None = None
    branch_name: str | None = None
    base_pay: Money | None = None
    overtime_hours: Money
    overtime_pay: Money
    bonus: Money
    bonus_reason: str | None = None
    deduction: Money
    deduction_reason: str | None = None
    net_pay: Money | None = None
    calculation_method: str
    total_hours: Money
    total_days_worked: int


class CycleSummaryResponse(BaseModel):
    cycle_info: CycleInfo
    totals: PayrollTotalsResponse
    validation: ValidationResponse
    branch_breakdown: dict[str, BranchTotalsResponse]
    employee_details: list[EmployeeDetailResponse]


class PayrollSummaryResponse(BaseModel):
    message: str
    summary: CycleSummaryResponse


class FinalizationDetails(BaseModel):
    finalized_at: datetime
    finalized_by_user_id: UUID
    validation_passed: bool
    audit_log_created: bool


class FinalizationSummary(BaseModel):
    cycle_info: CycleInfo
    totals: PayrollTotalsResponse
    finalization_details: FinalizationDetails


class FinalizeResponse(BaseModel):
    message: str
    finalization_summary: FinalizationSummary


# ============================================================================
# Export schemas
# ============================================================================


class ExportInfo(BaseModel):
    exported_at: datetime
    exported_by: UUID | None = None
    format: str
    include_details: bool


class ExportData(BaseModel):
    cycle_info: CycleInfo
    summary: PayrollTotalsResponse
    employee_details: list[EmployeeDetailResponse] | None = None
    export_info: ExportInfo


class ExportResponse(BaseModel):
    message: str
    export_data: ExportData


# ============================================================================
# Audit log schemas
# ============================================================================


class AuditLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID | None = None
    action: str
    table_name: str
    record_id: UUID | None = None
    old_values: dict[str, Any] | None = None
    new_values: dict[str, Any] | None = None
    description: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: datetime


class AuditLogListResponse(BaseModel):
    audit_logs: list[AuditLogResponse]


# ============================================================================
# Time entry schemas
# ============================================================================


class CheckInRequest(BaseModel):
    branch_id: UUID
    latitude: float
    longitude: float
    selfie_url: str | None = None


class CheckOutRequest(BaseModel):
    latitude: float
    longitude: float
    selfie_url: str | None = None


class TimeEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    branch_id: UUID
    check_in_time: datetime
    check_out_time: datetime | None = None
    check_in_selfie_url: str | None = None
    check_out_selfie_url: str | None = None
    break_duration: int
    total_hours: Money | None = None
    notes: str | None = None


class TimeEntryActionResponse(BaseModel):
    message: str
    time_entry: TimeEntryResponse
    branch_name: str
    distance_meters: float


class TimeEntryStatusResponse(BaseModel):
    is_checked_in: bool
    time_entry: TimeEntryResponse | None = None


# ============================================================================
# Sales report schemas
# ============================================================================


class SalesReportCreate(BaseModel):
    """Slip images are uploaded to object storage first; only the URL is sent."""

    total_sales: Decimal | None = None
    slip_image_url: str | None = None


class SalesReportResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    branch_id: UUID
    user_id: UUID
    report_date: date
    total_sales: Money
    slip_image_url: str | None = None
    created_at: datetime
    branch_name: str | None = None


class SalesReportCreateResponse(BaseModel):
    message: str
    sales_report: SalesReportResponse


class SalesReportListResponse(BaseModel):
    sales_reports: list[SalesReportResponse]


# ============================================================================
# Material usage schemas
# ============================================================================


class RawMaterialSummary(BaseModel):
    """Catalogue entry as employees see it, without cost data."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    unit: str


class RawMaterialListResponse(BaseModel):
    raw_materials: list[RawMaterialSummary]


class MaterialUsageItem(BaseModel):
    material_id: UUID
    quantity_used: Decimal


class MaterialUsageCreate(BaseModel):
    materials: list[MaterialUsageItem] = Field(default_factory=list)


class MaterialUsageRecord(BaseModel):
    id: UUID
    time_entry_id: UUID
    material: RawMaterialSummary
    quantity_used: Quantity
    created_at: datetime


class MaterialUsageCostedRecord(MaterialUsageRecord):
    unit_cost: Money
    total_cost: Money


class MaterialUsageCreateResponse(BaseModel):
    time_entry_id: UUID
    records: list[MaterialUsageCostedRecord]


class CurrentMaterialUsageResponse(BaseModel):
    has_active_session: bool
    message: str | None = None
    time_entry_id: UUID | None = None
    records: list[MaterialUsageRecord] = Field(default_factory=list)
    can_add_materials: bool = False


# ============================================================================
# Payroll stats schemas
# ============================================================================


class PayrollStatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    active_cycles: int
    total_employees: int
    monthly_payroll: int
    pending_approvals: int
    growth_percentage: int
    last_updated: datetime
