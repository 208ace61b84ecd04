from datetime import timedelta
from decimal import Decimal

import pytest
from django.urls import reverse
from django.utils import timezone

from apps.farms.models import Field
from apps.rentals.models import RentedField


@pytest.mark.django_db
class TestCreateRental:

    def test_farmer_rents_field(self, renter_client, renter, rentable_field):
        response = renter_client.post(reverse('rentals:rental-list'), {
            'field_id': str(rentable_field.id),
            'start_date': '2026-01-01',
            'end_date': '2026-06-30',
            'price': '1200.00',
            'area_rented': '250.5',
        }, format='json')

        assert response.status_code == 201
        rental = RentedField.objects.get(id=response.data['id'])
        assert rental.renter == renter
        assert rental.status == 'active'
        assert rental.area_rented == Decimal('250.5')

    def test_status_cannot_be_chosen_on_create(self, renter_client, rentable_field):
        response = renter_client.post(reverse('rentals:rental-list'), {
            'field_id': str(rentable_field.id),
            'status': 'ended',
        }, format='json')

        assert response.status_code == 201
        assert response.data['status'] == 'active'

    def test_buyers_forbidden(self, buyer_client, rentable_field):
        response = buyer_client.post(reverse('rentals:rental-list'), {
            'field_id': str(rentable_field.id),
        }, format='json')
        assert response.status_code == 403

    def test_field_id_required(self, renter_client):
        response = renter_client.post(reverse('rentals:rental-list'), {'price': '10'}, format='json')
        assert response.status_code == 400
        assert response.data['error'] == 'field_id is required'

    def test_cannot_rent_own_field(self, owner_client, rentable_field):
        response = owner_client.post(reverse('rentals:rental-list'), {
            'field_id': str(rentable_field.id),
        }, format='json')
        assert response.status_code == 400
        assert not RentedField.objects.exists()

    def test_field_must_be_rentable(self, renter_client, owner):
        field = Field.objects.create(owner=owner, name='Not For Rent')
        response = renter_client.post(reverse('rentals:rental-list'), {
            'field_id': str(field.id),
        }, format='json')
        assert response.status_code == 400

    def test_end_before_start(self, renter_client, rentable_field):
        response = renter_client.post(reverse('rentals:rental-list'), {
            'field_id': str(rentable_field.id),
            'start_date': '2026-03-01',
            'end_date': '2026-02-01',
        }, format='json')
        assert response.status_code == 400
        assert 'end_date' in response.data


@pytest.mark.django_db
class TestRentalQueries:

    def test_my_rentals_include_field_details(self, renter_client, renter, rentable_field):
        RentedField.objects.create(renter=renter, field=rentable_field, start_date='2026-01-01')

        response = renter_client.get(reverse('rentals:rental-my-rentals'))

        assert response.status_code == 200
        assert len(response.data) == 1
        row = response.data[0]
        assert row['field_name'] == 'South Meadow'
        assert row['field_location'] == 'Andalusia'
        assert row['owner_name'] == 'Olga Owner'
        assert row['total_area'] == '5000.00'

    def test_active_by_field(self, renter_client, renter, rentable_field):
        today = timezone.localdate()
        current = RentedField.objects.create(
            renter=renter, field=rentable_field, end_date=today + timedelta(days=30)
        )
        RentedField.objects.create(renter=renter, field=rentable_field, end_date=today - timedelta(days=1))
        RentedField.objects.create(renter=renter, field=rentable_field, status='cancelled')
        open_ended = RentedField.objects.create(renter=renter, field=rentable_field)

        response = renter_client.get(
            reverse('rentals:rental-active-by-field'), {'field_id': str(rentable_field.id)}
        )

        assert response.status_code == 200
        assert {r['id'] for r in response.data} == {str(current.id), str(open_ended.id)}

    def test_active_by_field_requires_field_id(self, renter_client):
        response = renter_client.get(reverse('rentals:rental-active-by-field'))
        assert response.status_code == 400

    def test_active_by_field_rejects_malformed_id(self, renter_client):
        response = renter_client.get(reverse('rentals:rental-active-by-field'), {'field_id': 'abc'})

        assert response.status_code == 400
        assert 'field_id' in response.data

    def test_list_scoped_to_parties(self, buyer_client, owner_client, renter, rentable_field):
        RentedField.objects.create(renter=renter, field=rentable_field)

        assert buyer_client.get(reverse('rentals:rental-list')).data == []
        assert len(owner_client.get(reverse('rentals:rental-list')).data) == 1


@pytest.mark.django_db
class TestRentalWrite:

    @pytest.fixture
    def rental(self, renter, rentable_field):
        return RentedField.objects.create(renter=renter, field=rentable_field, price=Decimal('100'))

    def test_owner_ends_rental(self, owner_client, rental):
        url = reverse('rentals:rental-detail', kwargs={'pk': rental.id})
        response = owner_client.patch(url, {'status': 'ended'}, format='json')

        assert response.status_code == 200
        rental.refresh_from_db()
        assert rental.status == 'ended'

    def test_stranger_cannot_delete(self, buyer_client, rental):
        url = reverse('rentals:rental-detail', kwargs={'pk': rental.id})
        response = buyer_client.delete(url)
        assert response.status_code == 403

    def test_renter_deletes(self, renter_client, rental):
        url = reverse('rentals:rental-detail', kwargs={'pk': rental.id})
        response = renter_client.delete(url)
        assert response.status_code == 204
        assert not RentedField.objects.exists()

    def test_missing_rental(self, renter_client):
        url = reverse('rentals:rental-detail', kwargs={'pk': '00000000-0000-0000-0000-000000000002'})
        assert renter_client.get(url).status_code == 404
