"""Payroll cycle state machine with transition validation."""

from __future__ import annotations

from enum import Enum

from employee_management import messages
from employee_management.errors import StateError


class PayrollCycleStatus(str, Enum):
    """Payroll cycle status values."""

    ACTIVE = "active"
    COMPLETED = "completed"


class InvalidTransitionError(StateError):
    """Raised when an invalid state transition is attempted."""

    code = "INVALID_TRANSITION"

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason
        msg = f"Invalid transition from '{from_status}' to '{to_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(
            msg,
            context={"from_status": str(from_status), "to_status": str(to_status)},
        )


class PayrollCycleStateMachine:
    """State machine for payroll cycle status transitions.

    Allowed transitions:
    - active → completed (finalize, irreversible)
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        PayrollCycleStatus.ACTIVE: [PayrollCycleStatus.COMPLETED],
        PayrollCycleStatus.COMPLETED: [],  # Terminal state
    }

    # Statuses where details may be calculated, reset or edited
    DETAILS_MUTABLE = {PayrollCycleStatus.ACTIVE}

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        allowed = cls.VALID_TRANSITIONS.get(from_status, [])
        return to_status in allowed

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """Validate a transition, raising InvalidTransitionError if invalid."""
        if not cls.can_transition(from_status, to_status):
            raise InvalidTransitionError(from_status, to_status)

    @classmethod
    def can_modify_details(cls, status: str) -> bool:
        return status in cls.DETAILS_MUTABLE

    @classmethod
    def ensure_active(cls, status: str) -> None:
        """Raise unless the cycle is still open for payroll work."""
        if status == PayrollCycleStatus.COMPLETED:
            raise StateError(
                messages.CYCLE_ALREADY_COMPLETED,
                code="CYCLE_ALREADY_COMPLETED",
                context={"status": status},
            )
        if not cls.can_modify_details(status):
            raise StateError(
                messages.CYCLE_NOT_ACTIVE,
                code="CYCLE_NOT_ACTIVE",
                context={"status": status},
            )

    @classmethod
    def ensure_details_editable(cls, status: str, message: str) -> None:
        """Raise a 403 when a detail's cycle no longer accepts edits."""
        if not cls.can_modify_details(status):
            raise StateError(
                message,
                code="CYCLE_COMPLETED",
                status_code=403,
                context={"status": status},
            )
