"""
Thin wrapper around the Stripe SDK.

All Stripe calls in the project go through this module so that keys are
configured in one place, SDK errors are translated into domain exceptions
and tests can patch a single seam.
"""

import json
import logging
from typing import Any, Dict, Optional

import stripe
from django.conf import settings

from .exceptions import (
    PaymentsNotConfiguredError,
    PaymentProviderError,
    WebhookVerificationError,
)

logger = logging.getLogger(__name__)


def is_configured() -> bool:
    return bool(settings.STRIPE_SECRET_KEY)


def _configure() -> None:
    if not is_configured():
        raise PaymentsNotConfiguredError("Payment processing is not configured")
    stripe.api_key = settings.STRIPE_SECRET_KEY
    stripe.api_version = settings.STRIPE_API_VERSION


def create_checkout_session(
    *,
    amount_cents: int,
    currency: str,
    product_name: str,
    success_url: str,
    cancel_url: str,
    client_reference_id: str,
    metadata: Dict[str, Any]
) -> Dict[str, str]:
    """
    Create a one-off payment Checkout session.

    Returns:
        Dict with the session ``id`` and hosted ``url``

    Raises:
        PaymentsNotConfiguredError: If no secret key is set
        PaymentProviderError: If Stripe rejects the request
    """
    _configure()
    try:
        session = stripe.checkout.Session.create(
            mode='payment',
            payment_method_types=['card'],
            line_items=[{
                'price_data': {
                    'currency': currency.lower(),
                    'product_data': {'name': product_name},
                    'unit_amount': amount_cents,
                },
                'quantity': 1,
            }],
            success_url=success_url,
            cancel_url=cancel_url,
            client_reference_id=client_reference_id,
            metadata={key: str(value) for key, value in metadata.items()},
        )
    except stripe.StripeError as e:
        logger.error("Stripe checkout session creation failed: %s", e)
        raise PaymentProviderError(str(e))

    logger.info("Created Stripe checkout session %s", session.id)
    return {'id': session.id, 'url': session.url}


def create_transfer(
    *,
    amount_cents: int,
    destination: str,
    idempotency_key: str,
    currency: str = 'usd',
    metadata: Optional[Dict[str, Any]] = None
) -> str:
    """
    Transfer funds to a connected account.

    The idempotency key makes a retried approval reuse the first transfer
    instead of paying twice.

    Returns:
        The Stripe transfer ID

    Raises:
        PaymentsNotConfiguredError: If no secret key is set
        PaymentProviderError: If Stripe rejects the transfer
    """
    _configure()
    try:
        transfer = stripe.Transfer.create(
            amount=amount_cents,
            currency=currency.lower(),
            destination=destination,
            metadata={key: str(value) for key, value in (metadata or {}).items()},
            idempotency_key=idempotency_key,
        )
    except stripe.StripeError as e:
        logger.error("Stripe transfer to %s failed: %s", destination, e)
        raise PaymentProviderError(str(e))

    logger.info("Created Stripe transfer %s to %s", transfer.id, destination)
    return transfer.id


def construct_event(*, payload: bytes, signature: str) -> Dict[str, Any]:
    """
    Verify a webhook payload and return the decoded event.

    Raises:
        PaymentsNotConfiguredError: If the secret key or the webhook
            secret is not set
        WebhookVerificationError: If the payload or signature is invalid
    """
    secret = settings.STRIPE_WEBHOOK_SECRET
    if not (is_configured() and secret):
        raise PaymentsNotConfiguredError("Webhook secret not configured")

    try:
        stripe.Webhook.construct_event(
            payload=payload,
            sig_header=signature,
            secret=secret,
        )
    except stripe.SignatureVerificationError as e:
        logger.warning("Webhook signature verification failed: %s", e)
        raise WebhookVerificationError(f"Webhook signature verification failed: {e}")
    except ValueError as e:
        logger.warning("Invalid webhook payload: %s", e)
        raise WebhookVerificationError(f"Invalid webhook payload: {e}")

    return json.loads(payload)
