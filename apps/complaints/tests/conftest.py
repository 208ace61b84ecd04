from decimal import Decimal

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.complaints.services import create_complaint
from apps.farms.models import Field
from apps.orders.models import Order


def client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def buyer(db):
    """Buyer with 100 coins."""
    return User.objects.create_user(
        email='buyer@example.com',
        password='TestPass123!',
        name='Bob Buyer',
        user_type='buyer',
        coins=100,
    )


@pytest.fixture
def farmer(db):
    return User.objects.create_user(
        email='farmer@example.com',
        password='TestPass123!',
        name='Fiona Farmer',
        user_type='farmer',
    )


@pytest.fixture
def bystander(db):
    return User.objects.create_user(
        email='bystander@example.com',
        password='TestPass123!',
        name='Ben Bystander',
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
def buyer_client(buyer):
    return client_for(buyer)


@pytest.fixture
def farmer_client(farmer):
    return client_for(farmer)


@pytest.fixture
def bystander_client(bystander):
    return client_for(bystander)


@pytest.fixture
def admin_client(admin_user):
    return client_for(admin_user)


@pytest.fixture
def field(farmer):
    return Field.objects.create(
        owner=farmer,
        name='Olive Grove',
        location='Jaen',
        category='Fruits',
        image='https://img.example.com/olive.jpg',
        total_area=Decimal('1000'),
        available_area=Decimal('800'),
        price_per_m2=Decimal('1.2'),
    )


@pytest.fixture
def order(buyer, field):
    return Order.objects.create(
        buyer=buyer,
        field=field,
        quantity=Decimal('10'),
        total_price=Decimal('12.00'),
        coins_paid=120,
    )


@pytest.fixture
def complaint(buyer, field):
    """Open complaint of the buyer about the farmer's field."""
    return create_complaint(
        author=buyer,
        target_type='field',
        target_id=field.id,
        category='Quality',
        description='Olives were bruised',
    )
