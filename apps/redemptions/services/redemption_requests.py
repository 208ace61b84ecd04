"""
Redemption requests: converting coins into a fiat payout.

Creating a request moves the coins from the user's spendable balance into
``locked_coins``. They stay locked until an admin approves (coins leave the
wallet) or rejects (coins return to the balance) the request.
"""

import logging
from datetime import timedelta
from decimal import Decimal
from typing import Any, Dict, Optional
from uuid import UUID

from django.conf import settings
from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from apps.accounts.models import User
from apps.coins.models import CoinTransaction, TransactionType, RefType
from apps.coins.services import lock_user
from apps.redemptions.models import RedemptionRequest, RedemptionStatus, OPEN_STATUSES

from .exceptions import (
    InvalidRedemptionAmountError,
    PendingRedemptionExistsError,
    RedemptionNotAllowedError,
    RedemptionInsufficientCoinsError,
)
from .payout_methods import get_owned_payout_method

logger = logging.getLogger(__name__)


def get_redemption_config() -> Dict[str, Any]:
    """Limits and rates the frontend needs to build a redemption form."""
    return {
        'min_coins': settings.REDEMPTION_MIN_COINS,
        'max_coins': settings.REDEMPTION_MAX_COINS,
        'max_fiat_cents_per_day': settings.REDEMPTION_MAX_FIAT_CENTS_PER_DAY,
        'coins_per_usd': settings.REDEMPTION_COINS_PER_USD,
        'platform_fee_percent': settings.REDEMPTION_PLATFORM_FEE_PERCENT,
        'min_age_days': settings.REDEMPTION_MIN_AGE_DAYS,
    }


def quote_redemption(coins: int) -> Dict[str, Any]:
    """
    Convert coins to cents, rounding down at each step.

    Returns:
        Dict with conversion_rate, fiat_amount_cents, platform_fee_cents
        and payout_amount_cents
    """
    coins_per_usd = settings.REDEMPTION_COINS_PER_USD
    fiat_amount_cents = (coins * 100) // coins_per_usd
    platform_fee_cents = (fiat_amount_cents * settings.REDEMPTION_PLATFORM_FEE_PERCENT) // 100
    return {
        'conversion_rate': (Decimal(1) / Decimal(coins_per_usd)).quantize(Decimal('0.000001')),
        'fiat_amount_cents': fiat_amount_cents,
        'platform_fee_cents': platform_fee_cents,
        'payout_amount_cents': fiat_amount_cents - platform_fee_cents,
    }


def _check_account_age(user: User) -> None:
    min_age = timedelta(days=settings.REDEMPTION_MIN_AGE_DAYS)
    if timezone.now() - user.created_at < min_age:
        raise RedemptionNotAllowedError(
            f"Your account must be at least {settings.REDEMPTION_MIN_AGE_DAYS} days old to redeem coins"
        )


def _check_daily_limit(user: User, fiat_amount_cents: int) -> None:
    since = timezone.now() - timedelta(days=1)
    already = (
        RedemptionRequest.objects
        .filter(user=user, created_at__gte=since)
        .exclude(status__in=[RedemptionStatus.REJECTED, RedemptionStatus.FAILED])
        .aggregate(total=Sum('fiat_amount_cents'))['total']
    ) or 0

    limit = settings.REDEMPTION_MAX_FIAT_CENTS_PER_DAY
    if already + fiat_amount_cents > limit:
        raise RedemptionNotAllowedError(
            f"Daily redemption limit exceeded. Remaining today: {max(limit - already, 0)} cents"
        )


@transaction.atomic
def create_redemption_request(
    *,
    user: User,
    coins_requested: int,
    payout_method_id: Optional[UUID] = None
) -> RedemptionRequest:
    """
    Lock coins and open a redemption request.

    Args:
        user: User redeeming coins
        coins_requested: Whole number of coins within the configured range
        payout_method_id: Optional payout method owned by the user

    Returns:
        The pending RedemptionRequest

    Raises:
        InvalidRedemptionAmountError: If the amount is out of range
        PendingRedemptionExistsError: If an open request already exists
        PayoutMethodNotFoundError: If the payout method does not exist
        PayoutMethodPermissionError: If the payout method is not the user's
        RedemptionNotAllowedError: If the account is too new or the daily
            limit would be exceeded
        RedemptionInsufficientCoinsError: If the balance is too low
    """
    min_coins = settings.REDEMPTION_MIN_COINS
    max_coins = settings.REDEMPTION_MAX_COINS
    if (
        isinstance(coins_requested, bool)
        or not isinstance(coins_requested, int)
        or not min_coins <= coins_requested <= max_coins
    ):
        raise InvalidRedemptionAmountError(f"Coins must be between {min_coins} and {max_coins}")

    # Serializes concurrent requests of the same user.
    locked_user = lock_user(user.id)

    if RedemptionRequest.objects.filter(user=locked_user, status__in=OPEN_STATUSES).exists():
        raise PendingRedemptionExistsError("You already have a pending redemption request")

    payout_method = None
    if payout_method_id:
        payout_method = get_owned_payout_method(user=locked_user, payout_method_id=payout_method_id)

    quote = quote_redemption(coins_requested)
    _check_account_age(locked_user)
    _check_daily_limit(locked_user, quote['fiat_amount_cents'])

    if locked_user.coins < coins_requested:
        raise RedemptionInsufficientCoinsError(available=locked_user.coins, requested=coins_requested)

    locked_user.coins -= coins_requested
    locked_user.locked_coins += coins_requested
    locked_user.save(update_fields=['coins', 'locked_coins'])

    redemption = RedemptionRequest.objects.create(
        user=locked_user,
        coins_requested=coins_requested,
        currency='USD',
        payout_method=payout_method,
        status=RedemptionStatus.PENDING,
        **quote
    )

    CoinTransaction.objects.create(
        user=locked_user,
        type=TransactionType.REDEEM_REQUEST,
        amount=coins_requested,
        balance_after=locked_user.coins,
        reason='Redemption request',
        ref_type=RefType.REDEMPTION_REQUEST,
        ref_id=redemption.id,
    )

    logger.info(
        "Redemption %s requested by %s: %s coins, payout %s cents",
        redemption.id, locked_user.id, coins_requested, redemption.payout_amount_cents
    )
    return redemption
