"""
Domain-specific exceptions for the complaints app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class ComplaintsServiceError(Exception):
    """Base exception for all complaint service errors."""
    pass


class InvalidComplaintError(ComplaintsServiceError):
    """Raised when complaint input fails a business rule."""
    pass


class ComplaintNotFoundError(ComplaintsServiceError):
    """Raised when a complaint does not exist."""
    pass


class ComplaintTargetNotFoundError(ComplaintsServiceError):
    """Raised when the complained-about record or user does not exist."""
    pass


class ComplaintPermissionError(ComplaintsServiceError):
    """Raised when the user is neither the complaint author nor an admin."""
    pass


class InvalidComplaintTransitionError(ComplaintsServiceError):
    """Raised when a status change is not allowed from the current status."""
    pass


class TooManyProofsError(ComplaintsServiceError):
    """Raised when adding proofs would exceed the per-complaint limit."""

    def __init__(self, current: int, adding: int, limit: int):
        self.current = current
        self.adding = adding
        self.limit = limit
        self.allowed_more = max(limit - current, 0)
        if current >= limit:
            message = f"Maximum {limit} documents per complaint. You already have {current}."
        else:
            message = (
                f"Maximum {limit} documents per complaint. "
                f"You have {current}; adding {adding} would exceed the limit."
            )
        super().__init__(message)


class ComplaintAlreadyRefundedError(ComplaintsServiceError):
    """Raised when a complaint has already been refunded."""
    pass
