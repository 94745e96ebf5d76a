"""Branch and user models."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    Float,
    ForeignKey,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from employee_management.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Branch(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Physical branch where employees check in."""

    __tablename__ = "branches"

    name: Mapped[str] = mapped_column(String, nullable=False)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)

    __table_args__ = (
        CheckConstraint("latitude BETWEEN -90 AND 90", name="branches_latitude_check"),
        CheckConstraint("longitude BETWEEN -180 AND 180", name="branches_longitude_check"),
    )

    # Relationships
    users: Mapped[list[User]] = relationship(back_populates="branch")


class User(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Application user profile.

    ``id`` is the subject of the auth provider's access token.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    full_name: Mapped[str] = mapped_column(String, nullable=False, default="")
    role: Mapped[str] = mapped_column(String, nullable=False, default="employee")
    branch_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("branches.id", ondelete="SET NULL"),
        nullable=True,
    )
    employee_code: Mapped[str | None] = mapped_column(String, nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String, nullable=True)
    hire_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    hourly_rate: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    daily_rate: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint("role IN ('employee', 'admin')", name="users_role_check"),
        CheckConstraint("hourly_rate IS NULL OR hourly_rate >= 0", name="users_hourly_rate_check"),
        CheckConstraint("daily_rate IS NULL OR daily_rate >= 0", name="users_daily_rate_check"),
    )

    # Relationships
    branch: Mapped[Branch | None] = relationship(back_populates="users")

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
