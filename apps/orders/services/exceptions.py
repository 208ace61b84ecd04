"""
Domain-specific exceptions for the orders app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class OrdersServiceError(Exception):
    """Base exception for all order service errors."""
    pass


class OrderNotFoundError(OrdersServiceError):
    """Raised when an order does not exist."""
    pass


class FieldNotFoundError(OrdersServiceError):
    """Raised when the ordered field does not exist."""
    pass


class OwnFieldPurchaseError(OrdersServiceError):
    """Raised when a farmer tries to buy from their own field."""
    pass


class InvalidOrderStatusError(OrdersServiceError):
    """Raised when a status is not one of the allowed values."""
    pass


class OrderPermissionError(OrdersServiceError):
    """Raised when the user may not change the order."""
    pass


class OrderPaymentError(OrdersServiceError):
    """Raised when the coins for an order cannot be moved."""

    def __init__(self, message: str, details: str = ''):
        self.details = details
        super().__init__(message)
