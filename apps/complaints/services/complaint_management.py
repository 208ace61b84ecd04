"""
Filing complaints and adding evidence.

Complaints about a field, an order or a user must reference an existing
record; the user the complaint is against is derived from that record
unless the author names one explicitly.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from django.conf import settings
from django.db import transaction

from apps.accounts.models import User
from apps.complaints.models import (
    Complaint,
    ComplaintProof,
    ComplaintRemark,
    ComplaintTargetType,
    GENERAL_TARGET_ID,
    RECORD_TARGET_TYPES,
)
from apps.farms.models import Field
from apps.orders.models import Order

from .exceptions import (
    InvalidComplaintError,
    ComplaintNotFoundError,
    ComplaintTargetNotFoundError,
    ComplaintPermissionError,
    TooManyProofsError,
)

logger = logging.getLogger(__name__)


def _target_owner_id(target_type: str, target_id: UUID) -> Optional[UUID]:
    """Return the user a record target belongs to, or None if it does not exist."""
    if target_type == ComplaintTargetType.USER:
        return User.objects.filter(id=target_id).values_list('id', flat=True).first()
    if target_type == ComplaintTargetType.FIELD:
        return Field.objects.filter(id=target_id).values_list('owner_id', flat=True).first()
    return Order.objects.filter(id=target_id).values_list('field__owner_id', flat=True).first()


@transaction.atomic
def create_complaint(
    *,
    author: User,
    target_type: str,
    description: str,
    target_id: Optional[UUID] = None,
    category: str = '',
    complained_against_user_id: Optional[UUID] = None
) -> Complaint:
    """
    File a complaint.

    Args:
        author: User filing the complaint
        target_type: One of the ComplaintTargetType values (any case)
        description: Complaint text, stored trimmed
        target_id: Record the complaint is about; required for field,
            order and user targets
        category: Free-form category label
        complained_against_user_id: Explicit user the complaint is against

    Returns:
        The open Complaint

    Raises:
        InvalidComplaintError: If a field is missing or invalid
        ComplaintTargetNotFoundError: If the target or the complained-against
            user does not exist
    """
    description = (description or '').strip()
    if not description:
        raise InvalidComplaintError("description is required and cannot be empty")

    if not target_type:
        raise InvalidComplaintError("target_type is required")
    normalized_type = target_type.lower()
    if normalized_type not in ComplaintTargetType.values:
        raise InvalidComplaintError(
            f"Invalid target_type. Must be one of: {', '.join(ComplaintTargetType.values)}"
        )

    if complained_against_user_id:
        if complained_against_user_id == author.id:
            raise InvalidComplaintError("You cannot complain against yourself")
        if not User.objects.filter(id=complained_against_user_id).exists():
            raise ComplaintTargetNotFoundError("User to complain against not found")

    if normalized_type in RECORD_TARGET_TYPES:
        if not target_id:
            raise InvalidComplaintError(f"target_id is required for target_type: {normalized_type}")
        owner_id = _target_owner_id(normalized_type, target_id)
        if owner_id is None:
            raise ComplaintTargetNotFoundError(f"Target {normalized_type} with id {target_id} not found")
        if not complained_against_user_id and owner_id != author.id:
            complained_against_user_id = owner_id

    complaint = Complaint.objects.create(
        created_by=author,
        target_type=normalized_type,
        target_id=target_id or GENERAL_TARGET_ID,
        category=category or '',
        description=description,
        complained_against_user_id=complained_against_user_id,
    )
    logger.info("Complaint %s filed by %s (%s)", complaint.id, author.id, normalized_type)
    return complaint


def _get_for_participant(complaint_id: UUID, user: User, action: str) -> Complaint:
    complaint = Complaint.objects.select_for_update().filter(id=complaint_id).first()
    if complaint is None:
        raise ComplaintNotFoundError("Complaint not found")
    if complaint.created_by_id != user.id and not user.is_platform_admin:
        raise ComplaintPermissionError(f"Only the complaint author or an admin can add {action}")
    return complaint


@transaction.atomic
def add_proofs(
    *,
    complaint_id: UUID,
    user: User,
    proofs: List[Dict[str, Any]]
) -> Tuple[List[ComplaintProof], int]:
    """
    Attach proof files to a complaint.

    Entries without a ``file_url`` are skipped. The complaint row is locked
    so concurrent uploads cannot exceed the limit.

    Returns:
        Tuple of the created proofs and the complaint's proof count

    Raises:
        InvalidComplaintError: If no proofs were given
        ComplaintNotFoundError: If the complaint does not exist
        ComplaintPermissionError: If the user is not the author or an admin
        TooManyProofsError: If the limit would be exceeded
    """
    if not proofs:
        raise InvalidComplaintError("Provide a proofs list or a single file_name and file_url")

    complaint = _get_for_participant(complaint_id, user, 'proofs')

    limit = settings.COMPLAINT_MAX_PROOFS
    current = complaint.proofs.count()
    if current + len(proofs) > limit:
        raise TooManyProofsError(current=current, adding=len(proofs), limit=limit)

    created = [
        ComplaintProof.objects.create(
            complaint=complaint,
            file_name=proof.get('file_name') or 'file',
            file_url=proof['file_url'],
            file_type=proof.get('file_type') or '',
        )
        for proof in proofs
        if proof.get('file_url')
    ]
    logger.info("%s proof(s) added to complaint %s by %s", len(created), complaint.id, user.id)
    return created, current + len(created)


@transaction.atomic
def add_remark(*, complaint_id: UUID, user: User, message: str) -> ComplaintRemark:
    """
    Add a message to a complaint's thread.

    Raises:
        InvalidComplaintError: If the message is empty
        ComplaintNotFoundError: If the complaint does not exist
        ComplaintPermissionError: If the user is not the author or an admin
    """
    message = (message or '').strip()
    if not message:
        raise InvalidComplaintError("message is required and cannot be empty")

    complaint = _get_for_participant(complaint_id, user, 'remarks')
    return ComplaintRemark.objects.create(complaint=complaint, author=user, message=message)
