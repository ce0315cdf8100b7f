# movment/core/errors.py
"""
Domain errors raised by the service layer.

Routes let them propagate; ``movment.main`` turns them into JSON responses
of the form ``{"detail": <message>, "code": <CODE>}``.
"""


class AppError(Exception):
    status_code: int = 400
    code: str = "APP_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(AppError):
    status_code = 400
    code = "VALIDATION_ERROR"


class StateConflict(AppError):
    """Action not valid for the current status (already handled, illegal transition)."""

    status_code = 400
    code = "STATE_CONFLICT"


class PermissionDenied(AppError):
    status_code = 403
    code = "FORBIDDEN"


class NotFound(AppError):
    status_code = 404
    code = "NOT_FOUND"
