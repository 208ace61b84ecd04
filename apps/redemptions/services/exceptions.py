"""
Domain-specific exceptions for the redemptions app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class RedemptionServiceError(Exception):
    """Base exception for all redemption service errors."""
    pass


class InvalidRedemptionAmountError(RedemptionServiceError):
    """Raised when the coin amount is outside the allowed range."""
    pass


class PendingRedemptionExistsError(RedemptionServiceError):
    """Raised when the user already has an open redemption request."""
    pass


class PayoutMethodNotFoundError(RedemptionServiceError):
    """Raised when a payout method does not exist."""
    pass


class PayoutMethodPermissionError(RedemptionServiceError):
    """Raised when a payout method belongs to another user."""
    pass


class PayoutMethodInUseError(RedemptionServiceError):
    """Raised when deleting a payout method an open request depends on."""
    pass


class RedemptionNotAllowedError(RedemptionServiceError):
    """Raised when the account is too new or over its daily limit."""
    pass


class RedemptionInsufficientCoinsError(RedemptionServiceError):
    """Raised when the spendable balance cannot cover the request."""

    def __init__(self, available: int, requested: int):
        self.available = available
        self.requested = requested
        super().__init__(f"Insufficient coins. Available: {available}, Requested: {requested}")


class RedemptionNotFoundError(RedemptionServiceError):
    """Raised when a redemption request does not exist."""
    pass


class InvalidRedemptionStateError(RedemptionServiceError):
    """Raised when a request cannot be approved or rejected in its status."""
    pass


class PayoutFailedError(RedemptionServiceError):
    """Raised when the payout transfer failed and the coins were returned."""
    pass
