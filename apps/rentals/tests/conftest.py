from decimal import Decimal

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.farms.models import Field


def client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def owner(db):
    """Farmer who lists a field for rent."""
    return User.objects.create_user(
        email='owner@example.com',
        password='TestPass123!',
        name='Olga Owner',
        user_type='farmer',
    )


@pytest.fixture
def renter(db):
    return User.objects.create_user(
        email='renter@example.com',
        password='TestPass123!',
        name='Rita Renter',
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
def owner_client(owner):
    return client_for(owner)


@pytest.fixture
def renter_client(renter):
    return client_for(renter)


@pytest.fixture
def buyer_client(buyer):
    return client_for(buyer)


@pytest.fixture
def rentable_field(owner):
    return Field.objects.create(
        owner=owner,
        name='South Meadow',
        location='Andalusia',
        category='Grain',
        farmer_name='Olga Owner',
        total_area=Decimal('5000'),
        available_area=Decimal('3000'),
        available_for_rent=True,
        rent_price_per_month=Decimal('200.00'),
        rent_duration_monthly=True,
    )
