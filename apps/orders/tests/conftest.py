from decimal import Decimal

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.coins.models import CurrencyRate
from apps.farms.models import Field
from apps.orders.services import place_order


def client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture(autouse=True)
def usd_rate(db):
    """10 coins per US dollar."""
    rate, _ = CurrencyRate.objects.update_or_create(
        currency='USD',
        defaults={
            'coins_per_unit': Decimal('10'),
            'display_name': 'US Dollar',
            'symbol': '$',
            'is_active': True,
        },
    )
    return rate


@pytest.fixture
def buyer(db):
    """Buyer with 1000 coins."""
    return User.objects.create_user(
        email='buyer@example.com',
        password='TestPass123!',
        name='Bob Buyer',
        user_type='buyer',
        coins=1000,
    )


@pytest.fixture
def other_buyer(db):
    return User.objects.create_user(
        email='other@example.com',
        password='TestPass123!',
        name='Olly Other',
        user_type='buyer',
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
def other_buyer_client(other_buyer):
    return client_for(other_buyer)


@pytest.fixture
def farmer_client(farmer):
    return client_for(farmer)


@pytest.fixture
def admin_client(admin_user):
    return client_for(admin_user)


@pytest.fixture
def field(farmer):
    return Field.objects.create(
        owner=farmer,
        name='Tomato Terrace',
        location='Almeria',
        category='Vegetables',
        image='https://img.example.com/tomato.jpg',
        total_area=Decimal('2000'),
        available_area=Decimal('1500'),
        price_per_m2=Decimal('0.5'),
    )


@pytest.fixture
def order(buyer, field):
    """Pending order for $25.00 (250 coins already debited)."""
    return place_order(buyer=buyer, field_id=field.id, quantity=Decimal('50'), total_price=Decimal('25.00'))
