"""
Coin ledger service.

Every balance change locks the user row, validates, updates the balance and
appends exactly one CoinTransaction inside the same database transaction.
Callers that need several movements to succeed or fail together (orders,
complaint refunds) wrap them in their own ``transaction.atomic`` block; the
nested savepoints here then join the outer transaction.
"""

import logging
import math
from decimal import Decimal
from typing import Optional, Union
from uuid import UUID

from django.db import transaction

from apps.accounts.models import User
from apps.coins.models import CoinTransaction, TransactionType, RefType

from .exceptions import (
    InvalidAmountError,
    InsufficientCoinsError,
    WalletUserNotFoundError,
)
from .packages import get_coins_per_currency_unit

logger = logging.getLogger(__name__)


def _validate_amount(amount) -> int:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise InvalidAmountError("Amount must be a positive integer")
    return amount


def lock_user(user_id: UUID) -> User:
    """Fetch a user with a row lock. Must be called inside a transaction."""
    try:
        return User.objects.select_for_update().get(id=user_id)
    except User.DoesNotExist:
        raise WalletUserNotFoundError(f"User with ID {user_id} not found")


@transaction.atomic
def deduct_coins(
    *,
    user_id: UUID,
    amount: int,
    reason: str = "",
    ref_type: Optional[str] = None,
    ref_id: Optional[UUID] = None
) -> CoinTransaction:
    """
    Debit coins from a user's spendable balance.

    Args:
        user_id: Wallet owner
        amount: Positive number of coins
        reason: Human readable ledger reason
        ref_type: What the movement refers to (order, admin, ...)
        ref_id: ID of the referenced object

    Returns:
        The debit CoinTransaction

    Raises:
        InvalidAmountError: If amount is not a positive integer
        WalletUserNotFoundError: If the user does not exist
        InsufficientCoinsError: If the balance is lower than amount
    """
    amount = _validate_amount(amount)
    user = lock_user(user_id)

    if user.coins < amount:
        raise InsufficientCoinsError(available=user.coins, required=amount)

    user.coins -= amount
    user.save(update_fields=['coins'])

    entry = CoinTransaction.objects.create(
        user=user,
        type=TransactionType.DEBIT,
        amount=amount,
        balance_after=user.coins,
        reason=reason,
        ref_type=ref_type,
        ref_id=ref_id,
    )
    logger.info("Debited %s coins from %s (%s), balance %s", amount, user.id, reason, user.coins)
    return entry


@transaction.atomic
def credit_coins(
    *,
    user_id: UUID,
    amount: int,
    reason: str = "",
    ref_type: Optional[str] = None,
    ref_id: Optional[UUID] = None
) -> CoinTransaction:
    """
    Credit coins to a user's spendable balance.

    Raises:
        InvalidAmountError: If amount is not a positive integer
        WalletUserNotFoundError: If the user does not exist
    """
    amount = _validate_amount(amount)
    user = lock_user(user_id)

    user.coins += amount
    user.save(update_fields=['coins'])

    entry = CoinTransaction.objects.create(
        user=user,
        type=TransactionType.CREDIT,
        amount=amount,
        balance_after=user.coins,
        reason=reason,
        ref_type=ref_type,
        ref_id=ref_id,
    )
    logger.info("Credited %s coins to %s (%s), balance %s", amount, user.id, reason, user.coins)
    return entry


def refund_coins(*, user_id: UUID, amount: int, ref_id: Optional[UUID] = None,
                 reason: str = "Refund") -> CoinTransaction:
    """Credit coins back to a user as a refund."""
    return credit_coins(
        user_id=user_id,
        amount=amount,
        reason=reason,
        ref_type=RefType.REFUND,
        ref_id=ref_id,
    )


@transaction.atomic
def set_balance(*, user_id: UUID, coins: int, admin: User) -> CoinTransaction:
    """
    Overwrite a user's spendable balance (admin only).

    The difference is written to the ledger as an adjustment so the ledger
    still explains the balance.

    Raises:
        InvalidAmountError: If coins is negative or not an integer
        WalletUserNotFoundError: If the user does not exist
    """
    if isinstance(coins, bool) or not isinstance(coins, int) or coins < 0:
        raise InvalidAmountError("Coins must be a non-negative integer")

    user = lock_user(user_id)
    delta = coins - user.coins
    user.coins = coins
    user.save(update_fields=['coins'])

    entry = CoinTransaction.objects.create(
        user=user,
        type=TransactionType.ADJUSTMENT,
        amount=abs(delta),
        balance_after=coins,
        reason=f"Balance set by admin ({delta:+d})",
        ref_type=RefType.ADMIN,
        ref_id=admin.id,
    )
    logger.info("Admin %s set balance of %s to %s (%+d)", admin.id, user.id, coins, delta)
    return entry


def calculate_coin_cost(amount: Union[Decimal, int, float, str], currency: str = 'USD') -> int:
    """
    Convert a fiat amount to coins, rounding up to the next whole coin.

    Raises:
        CurrencyNotFoundError: If the currency is unknown or inactive
    """
    coins_per_unit = get_coins_per_currency_unit(currency)
    return int(math.ceil(Decimal(str(amount)) * coins_per_unit))
