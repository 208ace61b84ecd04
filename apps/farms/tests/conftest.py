from decimal import Decimal

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.farms.models import Farm, Field


def client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def farmer(db):
    return User.objects.create_user(
        email='farmer@example.com',
        password='TestPass123!',
        name='Fiona Farmer',
        user_type='farmer',
    )


@pytest.fixture
def other_farmer(db):
    return User.objects.create_user(
        email='neighbour@example.com',
        password='TestPass123!',
        name='Nora Neighbour',
        user_type='farmer',
    )


@pytest.fixture
def buyer(db):
    return User.objects.create_user(
        email='buyer@example.com',
        password='TestPass123!',
        name='Bob Buyer',
        user_type='buyer',
    )


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        email='admin@example.com',
        password='TestPass123!',
        name='Admin',
        user_type='admin',
    )


@pytest.fixture
def farmer_client(farmer):
    return client_for(farmer)


@pytest.fixture
def other_farmer_client(other_farmer):
    return client_for(other_farmer)


@pytest.fixture
def buyer_client(buyer):
    return client_for(buyer)


@pytest.fixture
def admin_client(admin_user):
    return client_for(admin_user)


@pytest.fixture
def farm(farmer):
    return Farm.objects.create(
        owner=farmer,
        farm_name='Green Acres',
        location='Valencia',
        crop_type='Oranges',
        area_value=Decimal('12.5'),
    )


@pytest.fixture
def field(farmer, farm):
    return Field.objects.create(
        owner=farmer,
        farm=farm,
        name='Orange Grove',
        category='Fruits',
        price=Decimal('25.00'),
        total_area=Decimal('1000'),
        available_area=Decimal('800'),
    )


@pytest.fixture
def rentable_field(other_farmer):
    return Field.objects.create(
        owner=other_farmer,
        name='Barley Strip',
        available_for_rent=True,
        rent_price_per_month=Decimal('120.00'),
        rent_duration_monthly=True,
    )
