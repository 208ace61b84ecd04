import uuid

import pytest

from apps.coins.models import CoinTransaction
from apps.complaints.models import ComplaintStatus, GENERAL_TARGET_ID
from apps.complaints.services import (
    create_complaint,
    add_proofs,
    add_remark,
    update_complaint_status,
    update_admin_remarks,
    refund_complaint,
    InvalidComplaintError,
    ComplaintNotFoundError,
    ComplaintTargetNotFoundError,
    ComplaintPermissionError,
    InvalidComplaintTransitionError,
    TooManyProofsError,
    ComplaintAlreadyRefundedError,
)
from apps.notifications.models import Notification


# =============================================================================
# Filing
# =============================================================================

@pytest.mark.django_db
class TestCreateComplaint:

    def test_field_complaint_is_against_owner(self, complaint, farmer):
        assert complaint.status == ComplaintStatus.OPEN
        assert complaint.target_type == 'field'
        assert complaint.complained_against_user == farmer

    def test_order_complaint_is_against_field_owner(self, buyer, farmer, order):
        complaint = create_complaint(
            author=buyer, target_type='ORDER', target_id=order.id, description='Late'
        )
        assert complaint.target_type == 'order'
        assert complaint.complained_against_user == farmer

    def test_user_complaint(self, buyer, bystander):
        complaint = create_complaint(
            author=buyer, target_type='user', target_id=bystander.id, description='Rude'
        )
        assert complaint.complained_against_user == bystander

    def test_general_complaint(self, buyer):
        complaint = create_complaint(author=buyer, target_type='service', description='  Slow site  ')

        assert complaint.target_id == GENERAL_TARGET_ID
        assert complaint.description == 'Slow site'
        assert complaint.complained_against_user is None

    def test_explicit_complained_against_user(self, buyer, bystander, field):
        complaint = create_complaint(
            author=buyer,
            target_type='field',
            target_id=field.id,
            description='Bystander trampled it',
            complained_against_user_id=bystander.id,
        )
        assert complaint.complained_against_user == bystander

    @pytest.mark.parametrize('description', ['', '   ', None])
    def test_description_required(self, buyer, description):
        with pytest.raises(InvalidComplaintError, match='description is required'):
            create_complaint(author=buyer, target_type='service', description=description)

    def test_unknown_target_type(self, buyer):
        with pytest.raises(InvalidComplaintError, match='Must be one of: field, order, user'):
            create_complaint(author=buyer, target_type='weather', description='Too much rain')

    def test_record_target_requires_id(self, buyer):
        with pytest.raises(InvalidComplaintError, match='target_id is required for target_type: order'):
            create_complaint(author=buyer, target_type='order', description='Where is it?')

    def test_missing_target(self, buyer):
        with pytest.raises(ComplaintTargetNotFoundError):
            create_complaint(
                author=buyer, target_type='field', target_id=uuid.uuid4(), description='Gone'
            )

    def test_cannot_complain_against_self(self, buyer):
        with pytest.raises(InvalidComplaintError, match='against yourself'):
            create_complaint(
                author=buyer, target_type='service', description='Me',
                complained_against_user_id=buyer.id,
            )

    def test_complained_against_user_must_exist(self, buyer):
        with pytest.raises(ComplaintTargetNotFoundError, match='User to complain against not found'):
            create_complaint(
                author=buyer, target_type='service', description='Ghost',
                complained_against_user_id=uuid.uuid4(),
            )


@pytest.mark.django_db
class TestProofsAndRemarks:

    def _proofs(self, count):
        return [{'file_name': f'photo{i}.jpg', 'file_url': f'https://cdn.example.com/{i}.jpg'} for i in range(count)]

    def test_add_proofs(self, complaint, buyer):
        created, total = add_proofs(complaint_id=complaint.id, user=buyer, proofs=self._proofs(2))

        assert len(created) == 2
        assert total == 2

    def test_entries_without_url_are_skipped(self, complaint, buyer):
        created, total = add_proofs(
            complaint_id=complaint.id,
            user=buyer,
            proofs=[{'file_name': 'empty'}, {'file_url': 'https://cdn.example.com/x.pdf'}],
        )
        assert total == 1
        assert created[0].file_name == 'file'

    def test_limit(self, complaint, buyer, settings):
        settings.COMPLAINT_MAX_PROOFS = 3
        add_proofs(complaint_id=complaint.id, user=buyer, proofs=self._proofs(2))

        with pytest.raises(TooManyProofsError) as exc_info:
            add_proofs(complaint_id=complaint.id, user=buyer, proofs=self._proofs(2))
        assert exc_info.value.allowed_more == 1

        add_proofs(complaint_id=complaint.id, user=buyer, proofs=self._proofs(1))
        with pytest.raises(TooManyProofsError, match='You already have 3'):
            add_proofs(complaint_id=complaint.id, user=buyer, proofs=self._proofs(1))

    def test_only_author_or_admin(self, complaint, farmer, admin_user):
        with pytest.raises(ComplaintPermissionError):
            add_proofs(complaint_id=complaint.id, user=farmer, proofs=self._proofs(1))

        _, total = add_proofs(complaint_id=complaint.id, user=admin_user, proofs=self._proofs(1))
        assert total == 1

    def test_empty_proofs(self, complaint, buyer):
        with pytest.raises(InvalidComplaintError):
            add_proofs(complaint_id=complaint.id, user=buyer, proofs=[])

    def test_add_remark(self, complaint, buyer):
        remark = add_remark(complaint_id=complaint.id, user=buyer, message='  Any news?  ')
        assert remark.message == 'Any news?'
        assert remark.author == buyer

    def test_remark_needs_message(self, complaint, buyer):
        with pytest.raises(InvalidComplaintError):
            add_remark(complaint_id=complaint.id, user=buyer, message='   ')

    def test_remark_unknown_complaint(self, buyer):
        with pytest.raises(ComplaintNotFoundError):
            add_remark(complaint_id=uuid.uuid4(), user=buyer, message='Hello')


# =============================================================================
# Review
# =============================================================================

@pytest.mark.django_db
class TestStatusWorkflow:

    @pytest.mark.parametrize('path', [
        ['in_review', 'resolved'],
        ['resolved'],
    ])
    def test_allowed_transitions(self, complaint, path):
        for status in path:
            complaint = update_complaint_status(complaint_id=complaint.id, status=status)
        assert complaint.status == 'resolved'

    @pytest.mark.parametrize('start,target', [
        ('in_review', 'open'),
        ('resolved', 'open'),
        ('resolved', 'in_review'),
        ('open', 'open'),
    ])
    def test_forbidden_transitions(self, complaint, start, target):
        complaint.status = start
        complaint.save()

        with pytest.raises(InvalidComplaintTransitionError):
            update_complaint_status(complaint_id=complaint.id, status=target)

    def test_invalid_status(self, complaint):
        with pytest.raises(InvalidComplaintError, match='Invalid status'):
            update_complaint_status(complaint_id=complaint.id, status='closed')

    def test_remarks_kept_unless_given(self, complaint):
        update_complaint_status(complaint_id=complaint.id, status='in_review', admin_remarks='Checking')
        complaint = update_complaint_status(complaint_id=complaint.id, status='resolved')
        assert complaint.admin_remarks == 'Checking'

    def test_update_admin_remarks(self, complaint):
        assert update_admin_remarks(complaint_id=complaint.id, remarks='Called farmer').admin_remarks == 'Called farmer'
        assert update_admin_remarks(complaint_id=complaint.id, remarks=None).admin_remarks == ''


@pytest.mark.django_db
class TestRefund:

    def test_refund_credits_author(self, complaint, buyer, admin_user):
        result = refund_complaint(complaint_id=complaint.id, coins=40, admin=admin_user)

        assert result['balance_before'] == 100
        assert result['balance_after'] == 140
        assert result['user_id'] == buyer.id
        buyer.refresh_from_db()
        assert buyer.coins == 140

        complaint.refresh_from_db()
        assert complaint.status == ComplaintStatus.RESOLVED
        assert complaint.refund_coins == 40
        assert complaint.refunded_at is not None

        entry = CoinTransaction.objects.get(user=buyer)
        assert entry.type == 'credit'
        assert entry.ref_type == 'complaint'
        assert entry.ref_id == complaint.id
        assert Notification.objects.filter(user=buyer, type='success').exists()

    def test_refund_only_once(self, complaint, buyer, admin_user):
        refund_complaint(complaint_id=complaint.id, coins=40, admin=admin_user)

        with pytest.raises(ComplaintAlreadyRefundedError):
            refund_complaint(complaint_id=complaint.id, coins=40, admin=admin_user)

        buyer.refresh_from_db()
        assert buyer.coins == 140

    @pytest.mark.parametrize('coins', [0, -5, 2.5, '10', True])
    def test_invalid_amount(self, complaint, admin_user, coins):
        with pytest.raises(InvalidComplaintError):
            refund_complaint(complaint_id=complaint.id, coins=coins, admin=admin_user)

    def test_unknown_complaint(self, admin_user):
        with pytest.raises(ComplaintNotFoundError):
            refund_complaint(complaint_id=uuid.uuid4(), coins=10, admin=admin_user)
