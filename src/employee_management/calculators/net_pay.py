"""Net pay arithmetic for payroll details.

``net_pay = base_pay + overtime_pay + bonus - deduction``. Every edit of a
payroll detail recomputes net pay from the stored components through this
module so the identity holds for every persisted row.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value: Any) -> Decimal:
    """Coerce a stored or submitted amount to a 2-place Decimal.

    ``None`` counts as zero.
    """
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class PayComponents:
    """The four inputs of a payroll detail's net pay."""

    base_pay: Decimal = ZERO
    overtime_pay: Decimal = ZERO
    bonus: Decimal = ZERO
    deduction: Decimal = ZERO

    @classmethod
    def from_detail(cls, detail: Any) -> PayComponents:
        """Read the stored components of a PayrollDetail (or anything shaped like one)."""
        return cls(
            base_pay=to_money(detail.base_pay),
            overtime_pay=to_money(detail.overtime_pay),
            bonus=to_money(detail.bonus),
            deduction=to_money(detail.deduction),
        )

    @property
    def net_pay(self) -> Decimal:
        return calculate_net_pay(
            self.base_pay, self.overtime_pay, self.bonus, self.deduction
        )

    @property
    def is_negative(self) -> bool:
        return self.net_pay < ZERO

    def with_bonus(self, bonus: Any) -> PayComponents:
        return PayComponents(self.base_pay, self.overtime_pay, to_money(bonus), self.deduction)

    def with_deduction(self, deduction: Any) -> PayComponents:
        return PayComponents(self.base_pay, self.overtime_pay, self.bonus, to_money(deduction))


def calculate_net_pay(
    base_pay: Any,
    overtime_pay: Any = ZERO,
    bonus: Any = ZERO,
    deduction: Any = ZERO,
) -> Decimal:
    """Return base + overtime + bonus - deduction, rounded to 2 places."""
    total = to_money(base_pay) + to_money(overtime_pay) + to_money(bonus) - to_money(deduction)
    return total.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
