"""
Orders app services layer.

Order placement and status changes move coins through the coin ledger and
notify both parties inside one transaction.
"""

from .exceptions import (
    OrdersServiceError,
    OrderNotFoundError,
    FieldNotFoundError,
    OwnFieldPurchaseError,
    InvalidOrderStatusError,
    OrderPermissionError,
    OrderPaymentError,
)
from .order_management import (
    place_order,
    change_order_status,
)

__all__ = [
    # Exceptions
    'OrdersServiceError',
    'OrderNotFoundError',
    'FieldNotFoundError',
    'OwnFieldPurchaseError',
    'InvalidOrderStatusError',
    'OrderPermissionError',
    'OrderPaymentError',
    # Orders
    'place_order',
    'change_order_status',
]
