"""Exception taxonomy.

Services raise these; the API layer maps each class to an HTTP status and a
``{"detail", "code", ...context}`` JSON body.
"""

from __future__ import annotations

from typing import Any

from employee_management import messages


class AppError(Exception):
    """Base class for errors that are safe to show to clients."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        context: dict[str, Any] | None = None,
        status_code: int | None = None,
    ):
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.context = context or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for a JSON error response."""
        return {"detail": self.message, "code": self.code, **self.context}


class AuthenticationError(AppError):
    """No valid session."""

    status_code = 401
    code = "AUTHENTICATION_REQUIRED"

    def __init__(self, message: str = messages.UNAUTHENTICATED, **kwargs: Any):
        super().__init__(message, **kwargs)


class AuthorizationError(AppError):
    """Authenticated, but the role does not allow the action."""

    status_code = 403
    code = "FORBIDDEN"

    def __init__(self, message: str = messages.ADMIN_REQUIRED, **kwargs: Any):
        super().__init__(message, **kwargs)


class ValidationError(AppError):
    """Malformed input or a violated business rule."""

    status_code = 400
    code = "VALIDATION_ERROR"


class ConflictError(AppError):
    """Overlapping or duplicate resource."""

    status_code = 409
    code = "CONFLICT"


class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND"


class StateError(AppError):
    """Operation not allowed in the resource's current state."""

    status_code = 400
    code = "INVALID_STATE"


class RateLimitError(AppError):
    """Client exceeded its request budget."""

    status_code = 429
    code = "RATE_LIMITED"

    def __init__(self, retry_after: int, message: str = messages.RATE_LIMITED):
        self.retry_after = retry_after
        super().__init__(message, context={"retry_after": retry_after})


class InternalError(AppError):
    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str = messages.INTERNAL_ERROR, **kwargs: Any):
        super().__init__(message, **kwargs)
