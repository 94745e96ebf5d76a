"""Payroll cycle, payroll detail and audit log models."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any
from uuid import UUID

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from employee_management.models.base import (
    Base,
    JSONType,
    TimestampMixin,
    UpdatedAtMixin,
    UUIDPrimaryKeyMixin,
)

if TYPE_CHECKING:
    from employee_management.models.organization import User


class PayrollCycle(Base, UUIDPrimaryKeyMixin, TimestampMixin, UpdatedAtMixin):
    """A named date range over which payroll is computed and finalized."""

    __tablename__ = "payroll_cycles"

    name: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    pay_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(String, nullable=False, default="active")
    finalized_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    finalized_by: Mapped[UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    total_employees: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False, default=0)

    __table_args__ = (
        CheckConstraint(
            "status IN ('active', 'completed')",
            name="payroll_cycles_status_check",
        ),
        CheckConstraint("end_date > start_date", name="payroll_cycles_dates_check"),
    )

    # Relationships
    details: Mapped[list[PayrollDetail]] = relationship(
        back_populates="payroll_cycle",
        cascade="all, delete-orphan",
    )


class PayrollDetail(Base, UUIDPrimaryKeyMixin, TimestampMixin, UpdatedAtMixin):
    """Per-employee computed pay within a payroll cycle."""

    __tablename__ = "payroll_details"

    payroll_cycle_id: Mapped[UUID] = mapped_column(
        ForeignKey("payroll_cycles.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    # base_pay and net_pay stay nullable so incomplete imports surface as
    # missing data during summary and finalization
    base_pay: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    overtime_hours: Mapped[Decimal] = mapped_column(Numeric(6, 2), nullable=False, default=0)
    overtime_rate: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    overtime_pay: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    bonus: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    bonus_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    deduction: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    deduction_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    net_pay: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    calculation_method: Mapped[str] = mapped_column(String, nullable=False, default="hourly")
    total_hours: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False, default=0)
    total_days_worked: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "payroll_cycle_id", "user_id", name="payroll_details_cycle_user_unique"
        ),
        CheckConstraint(
            "calculation_method IN ('hourly', 'daily', 'mixed')",
            name="payroll_details_method_check",
        ),
        CheckConstraint("bonus >= 0", name="payroll_details_bonus_check"),
        CheckConstraint("deduction >= 0", name="payroll_details_deduction_check"),
    )

    # Relationships
    payroll_cycle: Mapped[PayrollCycle] = relationship(back_populates="details")
    user: Mapped[User] = relationship()


class AuditLog(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Audit trail entry for admin mutations."""

    __tablename__ = "audit_logs"

    user_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    action: Mapped[str] = mapped_column(String, nullable=False)
    table_name: Mapped[str] = mapped_column(String, nullable=False)
    record_id: Mapped[UUID | None] = mapped_column(nullable=True)
    old_values: Mapped[dict[str, Any] | None] = mapped_column(JSONType, nullable=True)
    new_values: Mapped[dict[str, Any] | None] = mapped_column(JSONType, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String, nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "action IN ('CREATE', 'UPDATE', 'DELETE', 'CALCULATE', 'FINALIZE', 'RESET')",
            name="audit_logs_action_check",
        ),
        Index("audit_logs_table_record_idx", "table_name", "record_id"),
    )
