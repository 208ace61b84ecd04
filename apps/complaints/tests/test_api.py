import uuid

import pytest
from django.urls import reverse
from rest_framework import status

from apps.complaints.models import Complaint, ComplaintProof
from apps.complaints.services import create_complaint


@pytest.mark.django_db
class TestComplaintEndpoints:

    def test_create(self, buyer, farmer, field, buyer_client):
        response = buyer_client.post(
            reverse('complaints:complaint-list'),
            {'target_type': 'Field', 'target_id': str(field.id), 'description': 'Weeds everywhere'},
            format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['message'] == 'Complaint submitted successfully'
        assert response.data['created_by'] == str(buyer.id)
        assert response.data['target_type'] == 'field'
        assert response.data['complained_against_user_id'] == str(farmer.id)
        assert response.data['complained_against_user_name'] == 'Fiona Farmer'

    def test_create_general_with_blank_target(self, buyer_client):
        response = buyer_client.post(
            reverse('complaints:complaint-list'),
            {'target_type': 'payment', 'target_id': '', 'description': 'Charged twice'},
            format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['target_id'] == '00000000-0000-0000-0000-000000000000'

    def test_create_without_description(self, buyer_client):
        response = buyer_client.post(
            reverse('complaints:complaint-list'), {'target_type': 'service'}, format='json'
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'description is required and cannot be empty'

    def test_create_unknown_target(self, buyer_client):
        response = buyer_client.post(
            reverse('complaints:complaint-list'),
            {'target_type': 'order', 'target_id': str(uuid.uuid4()), 'description': 'Lost'},
            format='json'
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_list_is_scoped(self, complaint, bystander, buyer_client, farmer_client, bystander_client, admin_client):
        create_complaint(author=bystander, target_type='service', description='Slow')
        url = reverse('complaints:complaint-list')

        assert [c['id'] for c in buyer_client.get(url).data] == [str(complaint.id)]
        # The farmer sees the complaint against them.
        assert [c['id'] for c in farmer_client.get(url).data] == [str(complaint.id)]
        assert len(bystander_client.get(url).data) == 1
        assert len(admin_client.get(url).data) == 2
        assert admin_client.get(url, {'status': 'resolved'}).data == []

    def test_list_rejects_malformed_filters(self, complaint, admin_client, buyer_client):
        url = reverse('complaints:complaint-list')

        response = admin_client.get(url, {'user_id': 'abc'})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'user_id' in response.data

        response = buyer_client.get(url, {'complained_against_user_id': '42'})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

        response = admin_client.get(reverse('complaints:admin-complaints'), {'status': 'closed'})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_retrieve_with_proofs_and_remarks(self, complaint, buyer, buyer_client):
        ComplaintProof.objects.create(complaint=complaint, file_name='a.jpg', file_url='https://cdn.example.com/a.jpg')
        buyer_client.post(
            reverse('complaints:complaint-remarks', args=[complaint.id]), {'message': 'Photo attached'}, format='json'
        )

        response = buyer_client.get(reverse('complaints:complaint-detail', args=[complaint.id]))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['proofs'][0]['file_name'] == 'a.jpg'
        assert response.data['remarks'][0]['message'] == 'Photo attached'
        assert response.data['remarks'][0]['author_name'] == 'Bob Buyer'
        assert response.data['refund_coins'] is None

    def test_retrieve_by_stranger(self, complaint, bystander_client):
        response = bystander_client.get(reverse('complaints:complaint-detail', args=[complaint.id]))
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_add_single_proof(self, complaint, buyer_client):
        response = buyer_client.post(
            reverse('complaints:complaint-proofs', args=[complaint.id]),
            {'file_name': 'receipt.pdf', 'file_url': 'https://cdn.example.com/r.pdf', 'file_type': 'application/pdf'},
            format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['totalProofs'] == 1
        assert response.data['proofs'][0]['file_type'] == 'application/pdf'

    def test_too_many_proofs(self, complaint, buyer_client, settings):
        settings.COMPLAINT_MAX_PROOFS = 2
        proofs = [{'file_name': f'{i}.jpg', 'file_url': f'https://cdn.example.com/{i}.jpg'} for i in range(3)]

        response = buyer_client.post(
            reverse('complaints:complaint-proofs', args=[complaint.id]), {'proofs': proofs}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['currentCount'] == 0
        assert response.data['allowedMore'] == 2

    def test_proofs_by_other_user(self, complaint, farmer_client):
        response = farmer_client.post(
            reverse('complaints:complaint-proofs', args=[complaint.id]),
            {'file_name': 'x.jpg', 'file_url': 'https://cdn.example.com/x.jpg'},
            format='json'
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_proofs_missing_body(self, complaint, buyer_client):
        response = buyer_client.post(
            reverse('complaints:complaint-proofs', args=[complaint.id]), {}, format='json'
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_empty_remark(self, complaint, buyer_client):
        response = buyer_client.post(
            reverse('complaints:complaint-remarks', args=[complaint.id]), {'message': ' '}, format='json'
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestAdminComplaintEndpoints:

    def test_requires_admin(self, buyer_client):
        response = buyer_client.get(reverse('complaints:admin-complaints'))
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_list_newest_update_first(self, complaint, buyer, admin_client):
        other = create_complaint(author=buyer, target_type='service', description='Website down')
        Complaint.objects.filter(id=complaint.id).update(status='in_review')
        other.save()

        response = admin_client.get(reverse('complaints:admin-complaints'))
        assert [c['id'] for c in response.data] == [str(other.id), str(complaint.id)]

        response = admin_client.get(reverse('complaints:admin-complaints'), {'status': 'in_review'})
        assert [c['id'] for c in response.data] == [str(complaint.id)]

    def test_status_transition(self, complaint, admin_client):
        url = reverse('complaints:admin-complaint-status', args=[complaint.id])

        response = admin_client.patch(url, {'status': 'in_review', 'admin_remarks': 'Looking'}, format='json')
        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'id': complaint.id, 'status': 'in_review'}

        response = admin_client.patch(url, {'status': 'open'}, format='json')
        assert response.status_code == status.HTTP_409_CONFLICT

    def test_status_missing(self, complaint, admin_client):
        response = admin_client.patch(
            reverse('complaints:admin-complaint-status', args=[complaint.id]), {}, format='json'
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Missing status'

    def test_status_unknown_complaint(self, admin_client):
        response = admin_client.patch(
            reverse('complaints:admin-complaint-status', args=[uuid.uuid4()]), {'status': 'resolved'}, format='json'
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_remarks(self, complaint, admin_client):
        response = admin_client.patch(
            reverse('complaints:admin-complaint-remarks', args=[complaint.id]), {'remarks': 'Refund planned'}, format='json'
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.data['admin_remarks'] == 'Refund planned'

    def test_refund(self, complaint, buyer, admin_client):
        url = reverse('complaints:admin-complaint-refund', args=[complaint.id])

        response = admin_client.post(url, {'coins': '25'}, format='json')
        assert response.status_code == status.HTTP_200_OK
        assert response.data['balance_after'] == 125
        assert response.data['message'] == 'Refund credited to complainant successfully'

        response = admin_client.post(url, {'coins': 25}, format='json')
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'This complaint has already been refunded'

        buyer.refresh_from_db()
        assert buyer.coins == 125

    @pytest.mark.parametrize('body', [{}, {'coins': 0}, {'coins': 'lots'}])
    def test_refund_invalid_amount(self, complaint, admin_client, body):
        response = admin_client.post(
            reverse('complaints:admin-complaint-refund', args=[complaint.id]), body, format='json'
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Invalid or missing coins amount (positive integer required)'
