"""Tests for base pay calculation from time entries."""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from employee_management.calculators.base_pay import (
    CalculationMethod,
    WorkSession,
    calculate_day_pay,
    calculate_employee_pay,
    group_hours_by_date,
)


def shift(day: int, hours: float, start_hour: int = 8) -> WorkSession:
    check_in = datetime(2025, 1, day, start_hour, 0, tzinfo=timezone.utc)
    return WorkSession(check_in, check_in + timedelta(hours=hours))


class TestWorkSession:
    def test_hours(self):
        assert shift(1, 8).hours == Decimal("8.00")

    def test_hours_are_not_rounded(self):
        assert shift(1, 1 / 3).hours < Decimal("0.34")
        assert shift(1, 1 / 3).hours > Decimal("0.33")

    def test_check_out_before_check_in_is_zero(self):
        check_in = datetime(2025, 1, 1, 8, 0, tzinfo=timezone.utc)
        assert WorkSession(check_in, check_in - timedelta(hours=1)).hours == Decimal("0")

    def test_naive_datetimes_are_utc(self):
        session = WorkSession(datetime(2025, 1, 1, 23, 0), datetime(2025, 1, 2, 1, 0))
        assert session.work_date == date(2025, 1, 1)
        assert session.hours == Decimal("2.00")

    def test_work_date_uses_utc(self):
        bangkok = timezone(timedelta(hours=7))
        check_in = datetime(2025, 1, 2, 6, 0, tzinfo=bangkok)  # 2025-01-01 23:00 UTC
        session = WorkSession(check_in, check_in + timedelta(hours=1))
        assert session.work_date == date(2025, 1, 1)


class TestDayPay:
    def test_hourly_rate(self):
        amount, method = calculate_day_pay(Decimal("8"), Decimal("100"), Decimal("1000"))
        assert amount == Decimal("800.00")
        assert method is CalculationMethod.HOURLY

    def test_exactly_twelve_hours_is_still_hourly(self):
        amount, method = calculate_day_pay(Decimal("12"), Decimal("100"), Decimal("1000"))
        assert amount == Decimal("1200.00")
        assert method is CalculationMethod.HOURLY

    def test_over_twelve_hours_uses_daily_rate(self):
        amount, method = calculate_day_pay(Decimal("12.5"), Decimal("100"), Decimal("1000"))
        assert amount == Decimal("1000.00")
        assert method is CalculationMethod.DAILY

    def test_long_day_without_daily_rate_is_hourly(self):
        amount, method = calculate_day_pay(Decimal("13"), Decimal("100"), None)
        assert amount == Decimal("1300.00")
        assert method is CalculationMethod.HOURLY

    def test_daily_rate_only(self):
        amount, method = calculate_day_pay(Decimal("4"), None, Decimal("600"))
        assert amount == Decimal("600.00")
        assert method is CalculationMethod.DAILY

    def test_no_rates(self):
        amount, method = calculate_day_pay(Decimal("8"), None, None)
        assert amount == Decimal("0.00")
        assert method is None


class TestEmployeePay:
    def test_sessions_on_same_day_are_summed(self):
        hours = group_hours_by_date([shift(1, 4), shift(1, 5, start_hour=14), shift(2, 8)])
        assert hours == {date(2025, 1, 1): Decimal("9.00"), date(2025, 1, 2): Decimal("8.00")}

    def test_split_shift_over_threshold_gets_daily_rate(self):
        pay = calculate_employee_pay(
            [shift(1, 7, start_hour=6), shift(1, 6, start_hour=14)],
            Decimal("100"),
            Decimal("1000"),
        )
        assert pay.days_worked == 1
        assert pay.total_hours == Decimal("13.00")
        assert pay.base_pay == Decimal("1000.00")
        assert pay.method is CalculationMethod.DAILY

    def test_mixed_method(self):
        pay = calculate_employee_pay(
            [shift(1, 8), shift(2, 13)],
            Decimal("100"),
            Decimal("1000"),
        )
        assert pay.days_worked == 2
        assert pay.total_hours == Decimal("21.00")
        assert pay.base_pay == Decimal("1800.00")
        assert pay.method is CalculationMethod.MIXED
        assert [d.method for d in pay.days] == [
            CalculationMethod.HOURLY,
            CalculationMethod.DAILY,
        ]

    def test_short_sessions_are_rounded_once(self):
        sessions = [shift(1, 1 / 3, start_hour=9 + i) for i in range(3)]

        pay = calculate_employee_pay(sessions, Decimal("100"), None)

        assert pay.total_hours == Decimal("1.00")
        assert pay.base_pay == Decimal("100.00")

    def test_no_sessions(self):
        pay = calculate_employee_pay([], Decimal("100"), None)
        assert pay.base_pay == Decimal("0.00")
        assert pay.days_worked == 0
        assert pay.method is CalculationMethod.HOURLY

    def test_no_sessions_daily_only_employee(self):
        pay = calculate_employee_pay([], None, Decimal("600"))
        assert pay.method is CalculationMethod.DAILY
