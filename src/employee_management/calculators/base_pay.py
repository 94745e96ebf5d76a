"""Base pay from completed time entries.

Each working day is paid by one of two rules:

- more than ``DAILY_RATE_THRESHOLD_HOURS`` hours and a daily rate: the daily rate
- otherwise, with an hourly rate: hours worked x hourly rate
- otherwise the daily rate (or nothing when the employee has neither)

A detail's calculation method is ``hourly`` or ``daily`` when every day used
the same rule, and ``mixed`` when both appear.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Iterable

from employee_management.calculators.net_pay import ZERO, to_money

DAILY_RATE_THRESHOLD_HOURS = Decimal("12")
SECONDS_PER_HOUR = Decimal("3600")


class CalculationMethod(str, Enum):
    """How a detail's base pay was derived."""

    HOURLY = "hourly"
    DAILY = "daily"
    MIXED = "mixed"


@dataclass(frozen=True)
class WorkSession:
    """A completed check-in/check-out pair, paid from check-in to check-out."""

    check_in: datetime
    check_out: datetime

    @property
    def work_date(self) -> date:
        return _as_utc(self.check_in).date()

    @property
    def seconds(self) -> Decimal:
        elapsed = _as_utc(self.check_out) - _as_utc(self.check_in)
        return max(Decimal(str(elapsed.total_seconds())), ZERO)

    @property
    def hours(self) -> Decimal:
        """Unrounded; callers round the totals they store."""
        return self.seconds / SECONDS_PER_HOUR


@dataclass
class DayPay:
    work_date: date
    hours: Decimal
    amount: Decimal
    method: CalculationMethod | None


@dataclass
class EmployeePay:
    """Result of computing one employee's base pay for a period."""

    total_hours: Decimal = ZERO
    days_worked: int = 0
    base_pay: Decimal = ZERO
    method: CalculationMethod = CalculationMethod.HOURLY
    days: list[DayPay] = field(default_factory=list)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def group_hours_by_date(sessions: Iterable[WorkSession]) -> dict[date, Decimal]:
    """Sum session hours per UTC check-in date, unrounded."""
    seconds: dict[date, Decimal] = defaultdict(lambda: ZERO)
    for session in sessions:
        seconds[session.work_date] += session.seconds
    return {day: total / SECONDS_PER_HOUR for day, total in seconds.items()}


def calculate_day_pay(
    hours: Decimal,
    hourly_rate: Decimal | None,
    daily_rate: Decimal | None,
) -> tuple[Decimal, CalculationMethod | None]:
    """Pay for a single day and the rule that produced it."""
    if hours > DAILY_RATE_THRESHOLD_HOURS and daily_rate:
        return to_money(daily_rate), CalculationMethod.DAILY
    if hourly_rate:
        return to_money(hours * to_money(hourly_rate)), CalculationMethod.HOURLY
    if daily_rate:
        return to_money(daily_rate), CalculationMethod.DAILY
    return ZERO, None


def calculate_employee_pay(
    sessions: Iterable[WorkSession],
    hourly_rate: Decimal | None,
    daily_rate: Decimal | None,
) -> EmployeePay:
    """Compute base pay, hours and method across all of an employee's sessions."""
    result = EmployeePay()
    methods: set[CalculationMethod] = set()

    for work_date, hours in sorted(group_hours_by_date(sessions).items()):
        amount, method = calculate_day_pay(hours, hourly_rate, daily_rate)
        result.days.append(DayPay(work_date, hours, amount, method))
        result.total_hours += hours
        result.base_pay += amount
        if method is not None:
            methods.add(method)

    result.days_worked = len(result.days)
    result.total_hours = to_money(result.total_hours)
    result.base_pay = to_money(result.base_pay)

    if len(methods) > 1:
        result.method = CalculationMethod.MIXED
    elif methods:
        result.method = methods.pop()
    elif daily_rate and not hourly_rate:
        result.method = CalculationMethod.DAILY

    return result
