import logging
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.redemptions.models import PayoutMethod, RedemptionRequest, OPEN_STATUSES

from .exceptions import (
    PayoutMethodNotFoundError,
    PayoutMethodPermissionError,
    PayoutMethodInUseError,
)

logger = logging.getLogger(__name__)


def get_payout_methods(*, user: User) -> QuerySet:
    return PayoutMethod.objects.filter(user=user)


def get_owned_payout_method(*, user: User, payout_method_id: UUID) -> PayoutMethod:
    """
    Fetch a payout method and check it belongs to ``user``.

    Raises:
        PayoutMethodNotFoundError: If it does not exist
        PayoutMethodPermissionError: If another user owns it
    """
    payout_method = PayoutMethod.objects.filter(id=payout_method_id).first()
    if payout_method is None:
        raise PayoutMethodNotFoundError("Payout method not found")
    if payout_method.user_id != user.id:
        raise PayoutMethodPermissionError("Payout method does not belong to you")
    return payout_method


@transaction.atomic
def add_payout_method(
    *,
    user: User,
    method_type: str,
    display_label: str = '',
    stripe_account_id: str = '',
    stripe_external_account_id: str = '',
    is_default: bool = False
) -> PayoutMethod:
    """
    Register a payout method. The first method of a user becomes the default,
    and a new default replaces the previous one.
    """
    existing = PayoutMethod.objects.select_for_update().filter(user=user)
    if not existing.exists():
        is_default = True
    elif is_default:
        existing.filter(is_default=True).update(is_default=False)

    payout_method = PayoutMethod.objects.create(
        user=user,
        method_type=method_type,
        display_label=display_label,
        stripe_account_id=stripe_account_id,
        stripe_external_account_id=stripe_external_account_id,
        is_default=is_default,
    )
    logger.info("Payout method %s (%s) added for user %s", payout_method.id, method_type, user.id)
    return payout_method


@transaction.atomic
def delete_payout_method(*, user: User, payout_method_id: UUID) -> None:
    """
    Remove a payout method.

    Raises:
        PayoutMethodNotFoundError: If it does not exist
        PayoutMethodPermissionError: If another user owns it
        PayoutMethodInUseError: If an open redemption request uses it
    """
    payout_method = get_owned_payout_method(user=user, payout_method_id=payout_method_id)

    in_use = RedemptionRequest.objects.filter(
        payout_method=payout_method,
        status__in=OPEN_STATUSES,
    ).exists()
    if in_use:
        raise PayoutMethodInUseError("Payout method is used by an open redemption request")

    payout_method.delete()
    logger.info("Payout method %s deleted by user %s", payout_method_id, user.id)
