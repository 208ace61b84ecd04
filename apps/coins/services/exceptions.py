"""Domain-specific exceptions for coin services."""


class CoinsServiceError(Exception):
    """Base exception for coin services."""
    pass


class InvalidAmountError(CoinsServiceError):
    """Raised when a coin amount is not a positive integer."""
    pass


class InsufficientCoinsError(CoinsServiceError):
    """Raised when a balance cannot cover a debit."""

    def __init__(self, available: int, required: int, message: str = None):
        self.available = available
        self.required = required
        super().__init__(
            message or f"Insufficient coins. Available: {available}, Required: {required}"
        )


class WalletUserNotFoundError(CoinsServiceError):
    """Raised when the wallet owner does not exist."""
    pass


class CurrencyNotFoundError(CoinsServiceError):
    """Raised when a currency rate is missing or inactive."""
    pass


class InvalidCurrencyRateError(CoinsServiceError):
    """Raised when a currency rate payload is invalid."""
    pass


class PackageNotFoundError(CoinsServiceError):
    """Raised when a coin package does not exist."""
    pass


class InvalidPackageError(CoinsServiceError):
    """Raised when a package payload is invalid."""
    pass


class PackageInUseError(CoinsServiceError):
    """Raised when deleting a package that has purchases."""
    pass


class PaymentsNotConfiguredError(CoinsServiceError):
    """Raised when Stripe keys are missing."""
    pass


class PaymentProviderError(CoinsServiceError):
    """Raised when a Stripe API call fails."""
    pass


class WebhookVerificationError(CoinsServiceError):
    """Raised when a webhook payload fails signature verification."""
    pass


class PurchaseNotFoundError(CoinsServiceError):
    """Raised when a webhook references an unknown checkout session."""
    pass
