"""
Coin purchases through Stripe Checkout.

A purchase is recorded as pending when the Checkout session is created and
completed exactly once when the ``checkout.session.completed`` webhook
arrives. The purchase row is locked while it is completed, so concurrent or
replayed webhook deliveries cannot credit the same session twice.
"""

import logging
from typing import Any, Dict, Optional, Tuple
from uuid import UUID

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.coins.models import CoinPurchase, PurchaseStatus, RefType

from . import gateway
from .exceptions import PurchaseNotFoundError, PackageNotFoundError
from .ledger import credit_coins
from .packages import get_active_packages

logger = logging.getLogger(__name__)

CHECKOUT_COMPLETED = 'checkout.session.completed'


def _with_session_placeholder(url: str) -> str:
    separator = '&' if '?' in url else '?'
    return f"{url}{separator}session_id={{CHECKOUT_SESSION_ID}}"


def create_checkout_session(
    *,
    user: User,
    package_id: UUID,
    success_url: Optional[str] = None,
    cancel_url: Optional[str] = None
) -> Tuple[CoinPurchase, str]:
    """
    Start a Stripe Checkout session for an active coin package.

    Args:
        user: Buyer of the coins
        package_id: Active package to buy
        success_url: Redirect after payment, defaults to settings
        cancel_url: Redirect on cancel, defaults to settings

    Returns:
        Tuple of the pending CoinPurchase and the hosted checkout URL

    Raises:
        PackageNotFoundError: If the package is unknown or inactive
        PaymentsNotConfiguredError: If Stripe is not configured
        PaymentProviderError: If Stripe rejects the session
    """
    package = get_active_packages().filter(id=package_id).first()
    if package is None:
        raise PackageNotFoundError("Package not found")

    session = gateway.create_checkout_session(
        amount_cents=package.amount_cents,
        currency=package.currency_id,
        product_name=f"{package.name} ({package.coins} coins)",
        success_url=_with_session_placeholder(success_url or settings.COIN_PURCHASE_SUCCESS_URL),
        cancel_url=cancel_url or settings.COIN_PURCHASE_CANCEL_URL,
        client_reference_id=str(user.id),
        metadata={
            'user_id': user.id,
            'package_id': package.id,
            'coins': package.coins,
        },
    )

    purchase = CoinPurchase.objects.create(
        user=user,
        package=package,
        amount_cents=package.amount_cents,
        currency=package.currency_id,
        coins_granted=package.coins,
        stripe_session_id=session['id'],
        status=PurchaseStatus.PENDING,
    )
    logger.info("Pending coin purchase %s for user %s (session %s)", purchase.id, user.id, session['id'])
    return purchase, session['url']


@transaction.atomic
def fulfill_checkout_session(*, session_id: str) -> Tuple[CoinPurchase, bool]:
    """
    Credit the coins of a completed Checkout session.

    Returns:
        Tuple of the purchase and whether coins were credited by this call
        (False when the session had already been processed)

    Raises:
        PurchaseNotFoundError: If no purchase matches the session
    """
    purchase = (
        CoinPurchase.objects
        .select_for_update()
        .filter(stripe_session_id=session_id)
        .first()
    )
    if purchase is None:
        raise PurchaseNotFoundError("Purchase record not found")

    if purchase.status == PurchaseStatus.COMPLETED:
        logger.info("Checkout session %s already processed", session_id)
        return purchase, False

    credit_coins(
        user_id=purchase.user_id,
        amount=purchase.coins_granted,
        reason='Coin purchase',
        ref_type=RefType.COIN_PURCHASE,
        ref_id=purchase.id,
    )

    purchase.status = PurchaseStatus.COMPLETED
    purchase.completed_at = timezone.now()
    purchase.save(update_fields=['status', 'completed_at'])

    logger.info("Coin purchase %s completed: %s coins", purchase.id, purchase.coins_granted)
    return purchase, True


def handle_webhook_event(*, payload: bytes, signature: str) -> Dict[str, Any]:
    """
    Verify and process a Stripe webhook delivery.

    Returns:
        Acknowledgement body for the webhook response

    Raises:
        PaymentsNotConfiguredError: If the webhook secret is missing
        WebhookVerificationError: If verification fails
        PurchaseNotFoundError: If the session has no purchase record
    """
    event = gateway.construct_event(payload=payload, signature=signature)
    event_type = event.get('type')

    if event_type != CHECKOUT_COMPLETED:
        logger.debug("Ignoring webhook event %s", event_type)
        return {'received': True}

    session = event.get('data', {}).get('object', {})
    _, credited = fulfill_checkout_session(session_id=session.get('id'))
    if not credited:
        return {'received': True, 'already_processed': True}
    return {'received': True}
