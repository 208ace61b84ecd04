from datetime import timedelta

import pytest
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.redemptions.models import PayoutMethod


def client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


def make_user(email, user_type='farmer', coins=0, age_days=30, **extra):
    user = User.objects.create_user(
        email=email,
        password='TestPass123!',
        name=email.split('@')[0].title(),
        user_type=user_type,
        coins=coins,
        **extra
    )
    User.objects.filter(id=user.id).update(created_at=timezone.now() - timedelta(days=age_days))
    user.refresh_from_db()
    return user


@pytest.fixture(autouse=True)
def redemption_settings(settings):
    """Pin the limits the tests reason about."""
    settings.REDEMPTION_COINS_PER_USD = 100
    settings.REDEMPTION_PLATFORM_FEE_PERCENT = 20
    settings.REDEMPTION_MIN_COINS = 1000
    settings.REDEMPTION_MAX_COINS = 1000000
    settings.REDEMPTION_MAX_FIAT_CENTS_PER_DAY = 50000
    settings.REDEMPTION_MIN_AGE_DAYS = 7
    settings.STRIPE_SECRET_KEY = 'sk_test_dummy'
    return settings


@pytest.fixture
def farmer(db):
    """Farmer with 10,000 coins and a connected Stripe account."""
    return make_user('farmer@example.com', coins=10000, stripe_connect_account_id='acct_farmer')


@pytest.fixture
def manual_farmer(db):
    """Farmer with 5,000 coins and no connected account."""
    return make_user('manual@example.com', coins=5000)


@pytest.fixture
def admin_user(db):
    return make_user('admin@example.com', user_type='admin')


@pytest.fixture
def farmer_client(farmer):
    return client_for(farmer)


@pytest.fixture
def manual_farmer_client(manual_farmer):
    return client_for(manual_farmer)


@pytest.fixture
def admin_client(admin_user):
    return client_for(admin_user)


@pytest.fixture
def payout_method(farmer):
    return PayoutMethod.objects.create(
        user=farmer,
        method_type='stripe_connect',
        display_label='My Stripe',
        stripe_account_id='acct_farmer',
        is_default=True,
    )
