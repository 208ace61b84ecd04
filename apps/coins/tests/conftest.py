from decimal import Decimal

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.coins.models import CurrencyRate, CoinPackage


def client_for(user):
    """Return an API client authenticated as ``user`` using JWT."""
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def buyer(db):
    """Buyer with 500 coins."""
    return User.objects.create_user(
        email='buyer@example.com',
        password='TestPass123!',
        name='Bob Buyer',
        user_type='buyer',
        coins=500,
    )


@pytest.fixture
def farmer(db):
    """Farmer with an empty wallet."""
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
def farmer_client(farmer):
    return client_for(farmer)


@pytest.fixture
def admin_client(admin_user):
    return client_for(admin_user)


@pytest.fixture
def usd_rate(db):
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
def eur_rate(db):
    return CurrencyRate.objects.create(
        currency='EUR',
        coins_per_unit=Decimal('11.5'),
        display_name='Euro',
        symbol='€',
    )


@pytest.fixture
def package(usd_rate):
    return CoinPackage.objects.create(
        name='Starter',
        coins=500,
        price=Decimal('49.99'),
        currency=usd_rate,
        discount_percent=Decimal('10'),
        display_order=1,
    )
