"""Input validation helpers shared by services and routes.

All helpers raise ``ValidationError`` with a client-facing message.
"""

from __future__ import annotations

import re
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Mapping
from uuid import UUID

from employee_management import messages
from employee_management.errors import ValidationError

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)

MAX_REASON_LENGTH = 500

# Largest value a Numeric(12, 2) column holds
MAX_AMOUNT = Decimal("9999999999.99")


def is_valid_uuid(value: str | None) -> bool:
    return bool(value) and UUID_PATTERN.match(value) is not None


def parse_uuid(value: str | UUID, field: str = "ID") -> UUID:
    """Parse a path/query identifier, accepting versions 1-5 only."""
    if isinstance(value, UUID):
        return value
    if not is_valid_uuid(value):
        raise ValidationError(
            messages.INVALID_UUID.format(field=field),
            code="INVALID_UUID",
            context={"field": field},
        )
    return UUID(value)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def missing_fields(data: Mapping[str, Any], required: Iterable[str]) -> list[str]:
    return [name for name in required if _is_blank(data.get(name))]


def require_fields(
    data: Mapping[str, Any],
    required: Iterable[str],
    message: str | None = None,
) -> None:
    """Raise if any required field is absent or blank."""
    missing = missing_fields(data, required)
    if missing:
        raise ValidationError(
            message or messages.MISSING_FIELDS.format(fields=", ".join(missing)),
            code="MISSING_FIELDS",
            context={"missing_fields": missing},
        )


def validate_date_order(start_date: date, end_date: date) -> None:
    """Start must be strictly before end."""
    if start_date >= end_date:
        raise ValidationError(
            messages.CYCLE_INVALID_DATE_RANGE,
            code="INVALID_DATE_RANGE",
            context={"start_date": start_date.isoformat(), "end_date": end_date.isoformat()},
        )


def date_ranges_overlap(start_a, end_a, start_b, end_b):
    """Inclusive range intersection.

    Takes plain dates or SQLAlchemy columns; with columns the result is the
    equivalent WHERE clause.
    """
    return (start_a <= end_b) & (start_b <= end_a)


def validate_amount(amount: Decimal | None, message: str) -> Decimal:
    if amount is None or not amount.is_finite() or amount < 0:
        raise ValidationError(message, code="INVALID_AMOUNT")
    if amount > MAX_AMOUNT:
        raise ValidationError(
            messages.AMOUNT_TOO_LARGE,
            code="INVALID_AMOUNT",
            context={"max_amount": MAX_AMOUNT},
        )
    return amount


def normalize_reason(
    amount: Decimal,
    reason: str | None,
    required_message: str,
) -> str | None:
    """Return the reason to store for an amount.

    Zero amounts never keep a reason; positive amounts require one.
    """
    if amount == 0:
        return None
    if _is_blank(reason):
        raise ValidationError(required_message, code="REASON_REQUIRED")
    reason = reason.strip()
    if len(reason) > MAX_REASON_LENGTH:
        raise ValidationError(
            messages.REASON_TOO_LONG.format(max_length=MAX_REASON_LENGTH),
            code="REASON_TOO_LONG",
        )
    return reason


def validate_coordinates(latitude: float, longitude: float) -> None:
    if not (-90 <= latitude <= 90) or not (-180 <= longitude <= 180):
        raise ValidationError(
            messages.INVALID_COORDINATES,
            code="INVALID_COORDINATES",
            context={"latitude": latitude, "longitude": longitude},
        )
