"""
Admin handling of complaints: status workflow, remarks and coin refunds.
"""

import logging
from typing import Any, Dict, Optional
from uuid import UUID

from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.coins.models import RefType
from apps.coins.services import credit_coins
from apps.complaints.models import Complaint, ComplaintStatus
from apps.notifications.models import NotificationType
from apps.notifications.services import notify

from .exceptions import (
    InvalidComplaintError,
    ComplaintNotFoundError,
    InvalidComplaintTransitionError,
    ComplaintAlreadyRefundedError,
)

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    ComplaintStatus.OPEN: {ComplaintStatus.IN_REVIEW, ComplaintStatus.RESOLVED},
    ComplaintStatus.IN_REVIEW: {ComplaintStatus.RESOLVED},
    ComplaintStatus.RESOLVED: set(),
}


def _lock_complaint(complaint_id: UUID) -> Complaint:
    complaint = Complaint.objects.select_for_update().filter(id=complaint_id).first()
    if complaint is None:
        raise ComplaintNotFoundError("Complaint not found")
    return complaint


@transaction.atomic
def update_complaint_status(
    *,
    complaint_id: UUID,
    status: str,
    admin_remarks: Optional[str] = None
) -> Complaint:
    """
    Move a complaint along open -> in_review -> resolved.

    Args:
        complaint_id: Complaint to update
        status: Target status
        admin_remarks: Replaces the stored remarks when given

    Raises:
        InvalidComplaintError: If the status is missing or unknown
        ComplaintNotFoundError: If the complaint does not exist
        InvalidComplaintTransitionError: If the transition is not allowed
    """
    if not status:
        raise InvalidComplaintError("Missing status")
    if status not in ComplaintStatus.values:
        raise InvalidComplaintError("Invalid status")

    complaint = _lock_complaint(complaint_id)
    if status not in ALLOWED_TRANSITIONS[complaint.status]:
        raise InvalidComplaintTransitionError(
            f"Invalid transition from {complaint.status} to {status}"
        )

    complaint.status = status
    if admin_remarks is not None:
        complaint.admin_remarks = admin_remarks
    complaint.save(update_fields=['status', 'admin_remarks', 'updated_at'])

    logger.info("Complaint %s moved to %s", complaint.id, status)
    return complaint


@transaction.atomic
def update_admin_remarks(*, complaint_id: UUID, remarks: Optional[str]) -> Complaint:
    """Replace the admin remarks of a complaint."""
    complaint = _lock_complaint(complaint_id)
    complaint.admin_remarks = remarks or ''
    complaint.save(update_fields=['admin_remarks', 'updated_at'])
    return complaint


@transaction.atomic
def refund_complaint(*, complaint_id: UUID, coins: int, admin: User) -> Dict[str, Any]:
    """
    Credit coins to the author of a complaint and resolve it.

    A complaint is refunded at most once. The credit is recorded in the coin
    ledger with the complaint as reference.

    Returns:
        Dict with the refunded amount and the author's balance before and after

    Raises:
        InvalidComplaintError: If coins is not a positive integer
        ComplaintNotFoundError: If the complaint does not exist
        ComplaintAlreadyRefundedError: If it was refunded before
    """
    if isinstance(coins, bool) or not isinstance(coins, int) or coins <= 0:
        raise InvalidComplaintError("Invalid or missing coins amount (positive integer required)")

    complaint = _lock_complaint(complaint_id)
    if complaint.refunded_at is not None:
        raise ComplaintAlreadyRefundedError("This complaint has already been refunded")

    entry = credit_coins(
        user_id=complaint.created_by_id,
        amount=coins,
        reason='Complaint refund',
        ref_type=RefType.COMPLAINT,
        ref_id=complaint.id,
    )

    complaint.refund_coins = coins
    complaint.refunded_at = timezone.now()
    complaint.status = ComplaintStatus.RESOLVED
    complaint.save(update_fields=['refund_coins', 'refunded_at', 'status', 'updated_at'])

    notify(
        user=complaint.created_by,
        message=f"You received {coins} coins as a refund for your complaint.",
        type=NotificationType.SUCCESS,
    )

    logger.info(
        "Complaint %s refunded: %s coins to %s by admin %s (balance %s)",
        complaint.id, coins, complaint.created_by_id, admin.id, entry.balance_after
    )
    return {
        'id': complaint.id,
        'refund_coins': coins,
        'user_id': complaint.created_by_id,
        'balance_before': entry.balance_after - coins,
        'balance_after': entry.balance_after,
        'message': 'Refund credited to complainant successfully',
    }
