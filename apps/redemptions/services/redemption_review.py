"""
Admin review of redemption requests.

Approval is split in two: the request is marked approved and committed, then
the Stripe transfer runs outside any transaction so no row lock is held
while waiting on the payment provider. The outcome is recorded in a second
transaction. A failed transfer returns the locked coins to the user.
"""

import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from django.db import DatabaseError, transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.coins.models import CoinTransaction, TransactionType, RefType
from apps.coins.services import lock_user, gateway, PaymentsNotConfiguredError, PaymentProviderError
from apps.redemptions.models import RedemptionRequest, RedemptionStatus, OPEN_STATUSES

from .exceptions import (
    RedemptionNotFoundError,
    InvalidRedemptionStateError,
    PayoutFailedError,
)

logger = logging.getLogger(__name__)

APPROVABLE_STATUSES = OPEN_STATUSES + (RedemptionStatus.APPROVED,)


def _lock_redemption(redemption_id: UUID) -> RedemptionRequest:
    redemption = (
        RedemptionRequest.objects
        .select_for_update(of=('self',))
        .select_related('user', 'payout_method')
        .filter(id=redemption_id)
        .first()
    )
    if redemption is None:
        raise RedemptionNotFoundError("Redemption request not found")
    return redemption


def _ledger_entry_exists(redemption: RedemptionRequest, tx_type: str) -> bool:
    return CoinTransaction.objects.filter(
        ref_type=RefType.REDEMPTION_REQUEST,
        ref_id=redemption.id,
        type=tx_type,
    ).exists()


def _write_ledger(redemption: RedemptionRequest, tx_type: str, balance_after: int, reason: str) -> None:
    CoinTransaction.objects.create(
        user_id=redemption.user_id,
        type=tx_type,
        amount=redemption.coins_requested,
        balance_after=balance_after,
        reason=reason,
        ref_type=RefType.REDEMPTION_REQUEST,
        ref_id=redemption.id,
    )


def _unlock_coins(redemption: RedemptionRequest, reason: str) -> None:
    """Return locked coins to the spendable balance. Caller holds the transaction."""
    user = lock_user(redemption.user_id)
    user.coins += redemption.coins_requested
    user.locked_coins -= redemption.coins_requested
    user.save(update_fields=['coins', 'locked_coins'])
    _write_ledger(redemption, TransactionType.REDEEM_REJECTED, user.coins, reason)


def _append_note(existing: str, note: str) -> str:
    return f"{existing}\n{note}" if existing else note


@transaction.atomic
def reject_redemption(
    *,
    redemption_id: UUID,
    admin: User,
    admin_notes: Optional[str] = None
) -> Dict[str, Any]:
    """
    Reject an open request and unlock its coins.

    Raises:
        RedemptionNotFoundError: If the request does not exist
        InvalidRedemptionStateError: If it is not pending or under review
    """
    redemption = _lock_redemption(redemption_id)
    if redemption.status not in OPEN_STATUSES:
        raise InvalidRedemptionStateError(f"Cannot reject redemption with status: {redemption.status}")

    _unlock_coins(redemption, 'Redemption rejected')

    redemption.status = RedemptionStatus.REJECTED
    redemption.reviewed_at = timezone.now()
    redemption.reviewed_by = admin
    redemption.admin_notes = admin_notes or ''
    redemption.save(update_fields=['status', 'reviewed_at', 'reviewed_by', 'admin_notes', 'updated_at'])

    logger.info("Redemption %s rejected by %s", redemption.id, admin.id)
    return {'status': redemption.status}


def approve_redemption(
    *,
    redemption_id: UUID,
    admin: User,
    admin_notes: Optional[str] = None
) -> Dict[str, Any]:
    """
    Approve a request and pay it out.

    With a known Stripe connected account the payout is a Stripe transfer;
    the request ends ``paid``. Without one the payout is manual: the locked
    coins leave the wallet and the request stays ``approved``. Approving a
    request that is already paid or settled returns the earlier result.

    Args:
        redemption_id: Request to approve
        admin: Reviewing admin
        admin_notes: Optional notes stored on the request

    Returns:
        Dict describing the outcome (message and/or stripe_transfer_id)

    Raises:
        RedemptionNotFoundError: If the request does not exist
        InvalidRedemptionStateError: If it is rejected or failed
        PayoutFailedError: If the transfer failed and the request was not
            paid by a concurrent approval
    """
    with transaction.atomic():
        redemption = _lock_redemption(redemption_id)

        if redemption.status == RedemptionStatus.PAID:
            return {'message': 'Already paid', 'stripe_transfer_id': redemption.stripe_transfer_id}

        if redemption.status not in APPROVABLE_STATUSES:
            raise InvalidRedemptionStateError(f"Cannot approve redemption with status: {redemption.status}")

        if (
            redemption.status == RedemptionStatus.APPROVED
            and _ledger_entry_exists(redemption, TransactionType.REDEEM_APPROVED)
        ):
            return {'message': 'Already approved (manual payout)'}

        redemption.status = RedemptionStatus.APPROVED
        redemption.reviewed_at = timezone.now()
        redemption.reviewed_by = admin
        if admin_notes:
            redemption.admin_notes = admin_notes
        redemption.save(update_fields=['status', 'reviewed_at', 'reviewed_by', 'admin_notes', 'updated_at'])

    destination = redemption.user.stripe_connect_account_id or (
        redemption.payout_method.stripe_account_id if redemption.payout_method else ''
    )

    if not destination:
        logger.warning(
            "No Stripe connected account for redemption %s (user %s), manual payout required",
            redemption.id, redemption.user_id
        )
        _settle(redemption_id, reason='Redemption approved (manual payout)')
        return {'message': 'Approved (manual payout required - coins deducted)'}

    try:
        transfer_id = gateway.create_transfer(
            amount_cents=redemption.payout_amount_cents,
            destination=destination,
            idempotency_key=f"redemption-{redemption.id}",
            currency=redemption.currency,
            metadata={'redemption_id': redemption.id, 'user_id': redemption.user_id},
        )
    except (PaymentsNotConfiguredError, PaymentProviderError) as e:
        logger.error("Payout for redemption %s failed: %s", redemption.id, e)
        if _fail(redemption_id, str(e)):
            raise PayoutFailedError(
                f"Stripe transfer failed: {e}. Coins have been returned to user's account."
            )

        settled = RedemptionRequest.objects.get(id=redemption_id)
        if settled.status == RedemptionStatus.PAID:
            return {'message': 'Already paid', 'stripe_transfer_id': settled.stripe_transfer_id}
        raise PayoutFailedError(f"Stripe transfer failed: {e}")

    _settle(redemption_id, reason='Redemption paid', transfer_id=transfer_id, account_id=destination)
    return {'stripe_transfer_id': transfer_id}


@transaction.atomic
def _settle(
    redemption_id: UUID,
    *,
    reason: str,
    transfer_id: str = '',
    account_id: str = ''
) -> None:
    """Release the locked coins of an approved request, once."""
    redemption = _lock_redemption(redemption_id)

    if transfer_id:
        redemption.status = RedemptionStatus.PAID
        redemption.stripe_transfer_id = transfer_id
        redemption.stripe_account_id = account_id
        redemption.save(update_fields=['status', 'stripe_transfer_id', 'stripe_account_id', 'updated_at'])

    if _ledger_entry_exists(redemption, TransactionType.REDEEM_APPROVED):
        return

    user = lock_user(redemption.user_id)
    user.locked_coins -= redemption.coins_requested
    user.save(update_fields=['locked_coins'])
    _write_ledger(redemption, TransactionType.REDEEM_APPROVED, user.locked_coins, reason)

    logger.info("Redemption %s settled (%s)", redemption.id, reason)


def _fail(redemption_id: UUID, error: str) -> bool:
    """
    Mark an approved request failed and give the coins back.

    Returns False, leaving the request untouched, when it is no longer an
    unsettled approval (a concurrent approval already paid or failed it).
    """
    try:
        with transaction.atomic():
            redemption = _lock_redemption(redemption_id)
            if (
                redemption.status != RedemptionStatus.APPROVED
                or _ledger_entry_exists(redemption, TransactionType.REDEEM_APPROVED)
            ):
                logger.warning(
                    "Redemption %s was already settled (%s), not failing it",
                    redemption_id, redemption.status
                )
                return False

            _unlock_coins(redemption, 'Redemption failed - Stripe transfer error')
            redemption.status = RedemptionStatus.FAILED
            redemption.admin_notes = _append_note(redemption.admin_notes, f"Stripe error: {error}")
            redemption.save(update_fields=['status', 'admin_notes', 'updated_at'])
    except DatabaseError:
        logger.exception("Could not unlock coins of failed redemption %s", redemption_id)
        RedemptionRequest.objects.filter(
            id=redemption_id, status=RedemptionStatus.APPROVED
        ).update(status=RedemptionStatus.FAILED)
        return False

    logger.info("Redemption %s marked failed, coins returned", redemption_id)
    return True


def unlock_failed_redemptions(*, dry_run: bool = False) -> List[RedemptionRequest]:
    """
    Return coins still locked by failed requests.

    A failed request is skipped when its coins were already returned or
    paid out (a ``redeem_rejected`` or ``redeem_approved`` ledger entry
    exists) or the user no longer has enough locked coins.

    Returns:
        The requests whose coins were (or, with dry_run, would be) unlocked
    """
    unlocked = []
    with transaction.atomic():
        failed = (
            RedemptionRequest.objects
            .filter(status=RedemptionStatus.FAILED)
            .order_by('-created_at')
        )
        for redemption in failed:
            if (
                _ledger_entry_exists(redemption, TransactionType.REDEEM_REJECTED)
                or _ledger_entry_exists(redemption, TransactionType.REDEEM_APPROVED)
            ):
                continue

            user = lock_user(redemption.user_id)
            if user.locked_coins < redemption.coins_requested:
                logger.info("Skipping redemption %s: coins are not locked", redemption.id)
                continue

            if not dry_run:
                _unlock_coins(redemption, 'Redemption failed - coins unlocked')
            unlocked.append(redemption)

    logger.info("Unlocked coins for %s failed redemption(s)%s", len(unlocked), ' (dry run)' if dry_run else '')
    return unlocked
