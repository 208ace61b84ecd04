"""
Complaints app services layer.

Complaint filing, evidence and the admin review workflow. Refunds credit
coins through the coin ledger.
"""

from .exceptions import (
    ComplaintsServiceError,
    InvalidComplaintError,
    ComplaintNotFoundError,
    ComplaintTargetNotFoundError,
    ComplaintPermissionError,
    InvalidComplaintTransitionError,
    TooManyProofsError,
    ComplaintAlreadyRefundedError,
)
from .complaint_management import (
    create_complaint,
    add_proofs,
    add_remark,
)
from .complaint_review import (
    update_complaint_status,
    update_admin_remarks,
    refund_complaint,
)

__all__ = [
    # Exceptions
    'ComplaintsServiceError',
    'InvalidComplaintError',
    'ComplaintNotFoundError',
    'ComplaintTargetNotFoundError',
    'ComplaintPermissionError',
    'InvalidComplaintTransitionError',
    'TooManyProofsError',
    'ComplaintAlreadyRefundedError',
    # Complaints
    'create_complaint',
    'add_proofs',
    'add_remark',
    # Review
    'update_complaint_status',
    'update_admin_remarks',
    'refund_complaint',
]
