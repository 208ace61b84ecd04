"""
Redemptions app services layer.

Coin redemption requests, their admin review and the payout methods they
pay out to. Balance changes lock the user row and write the coin ledger in
the same transaction.
"""

from .exceptions import (
    RedemptionServiceError,
    InvalidRedemptionAmountError,
    PendingRedemptionExistsError,
    PayoutMethodNotFoundError,
    PayoutMethodPermissionError,
    PayoutMethodInUseError,
    RedemptionNotAllowedError,
    RedemptionInsufficientCoinsError,
    RedemptionNotFoundError,
    InvalidRedemptionStateError,
    PayoutFailedError,
)
from .payout_methods import (
    get_payout_methods,
    get_owned_payout_method,
    add_payout_method,
    delete_payout_method,
)
from .redemption_requests import (
    get_redemption_config,
    quote_redemption,
    create_redemption_request,
)
from .redemption_review import (
    approve_redemption,
    reject_redemption,
    unlock_failed_redemptions,
)

__all__ = [
    # Exceptions
    'RedemptionServiceError',
    'InvalidRedemptionAmountError',
    'PendingRedemptionExistsError',
    'PayoutMethodNotFoundError',
    'PayoutMethodPermissionError',
    'PayoutMethodInUseError',
    'RedemptionNotAllowedError',
    'RedemptionInsufficientCoinsError',
    'RedemptionNotFoundError',
    'InvalidRedemptionStateError',
    'PayoutFailedError',
    # Payout methods
    'get_payout_methods',
    'get_owned_payout_method',
    'add_payout_method',
    'delete_payout_method',
    # Requests
    'get_redemption_config',
    'quote_redemption',
    'create_redemption_request',
    # Review
    'approve_redemption',
    'reject_redemption',
    'unlock_failed_redemptions',
]
