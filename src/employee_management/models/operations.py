"""Day-to-day branch operation models: time entries, materials and sales."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from employee_management.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


# ===== Attendance =====


class TimeEntry(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A check-in/check-out session at a branch."""

    __tablename__ = "time_entries"

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    branch_id: Mapped[UUID] = mapped_column(
        ForeignKey("branches.id", ondelete="RESTRICT"),
        nullable=False,
    )
    check_in_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    check_out_time: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    check_in_selfie_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    check_out_selfie_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Minutes
    break_duration: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_hours: Mapped[Decimal | None] = mapped_column(Numeric(6, 2), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("time_entries_user_check_in_idx", "user_id", "check_in_time"),
        CheckConstraint(
            "check_out_time IS NULL OR check_out_time >= check_in_time",
            name="time_entries_check_out_after_check_in",
        ),
    )

    @property
    def is_open(self) -> bool:
        return self.check_out_time is None


# ===== Materials =====


class RawMaterial(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Raw material catalogue entry."""

    __tablename__ = "raw_materials"

    name: Mapped[str] = mapped_column(String, nullable=False)
    unit: Mapped[str] = mapped_column(String, nullable=False)
    cost_per_unit: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    supplier: Mapped[str | None] = mapped_column(String, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class MaterialUsage(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Quantity of a raw material used during a time entry."""

    __tablename__ = "material_usage"

    time_entry_id: Mapped[UUID] = mapped_column(
        ForeignKey("time_entries.id", ondelete="CASCADE"),
        nullable=False,
    )
    material_id: Mapped[UUID] = mapped_column(
        ForeignKey("raw_materials.id", ondelete="RESTRICT"),
        nullable=False,
    )
    quantity_used: Mapped[Decimal] = mapped_column(Numeric(12, 3), nullable=False)
    unit_cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    total_cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("quantity_used >= 0", name="material_usage_quantity_check"),
    )


# ===== Sales =====


class SalesReport(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Daily sales figure submitted by an employee for a branch."""

    __tablename__ = "sales_reports"

    branch_id: Mapped[UUID] = mapped_column(
        ForeignKey("branches.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    report_date: Mapped[date] = mapped_column(Date, nullable=False)
    total_sales: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    slip_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("total_sales >= 0", name="sales_reports_total_sales_check"),
        Index("sales_reports_branch_date_idx", "branch_id", "report_date"),
    )
