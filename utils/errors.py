"""
Application error taxonomy.

Models raise these; app.py turns them into JSON responses with the
matching HTTP status code.
"""


class AppError(Exception):
    """Base class for errors that map to an HTTP status."""

    status_code = 500

    def __init__(self, message: str, **details):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(AppError):
    """Missing or malformed input."""

    status_code = 400


class InvalidStatusTransitionError(ValidationError):
    """Reservation status change not allowed by the transition table."""

    def __init__(self, current_status: str, new_status: str, message: str = None):
        self.current_status = current_status
        self.new_status = new_status
        super().__init__(
            message or f'Cannot change reservation status from {current_status} to {new_status}',
            current_status=current_status,
            new_status=new_status,
        )


class ConflictError(AppError):
    """Uniqueness collision, double link or double booking."""

    status_code = 409


class NotFoundError(AppError):
    """Referenced restaurant, table, link or reservation is absent."""

    status_code = 404


class InternalError(AppError):
    """Unexpected storage failure."""

    status_code = 500
