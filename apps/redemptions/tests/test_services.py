import uuid
from decimal import Decimal
from io import StringIO
from unittest.mock import patch

import pytest
from django.core.management import call_command

from apps.coins.models import CoinTransaction, TransactionType
from apps.coins.services import PaymentProviderError
from apps.redemptions.models import PayoutMethod, RedemptionStatus
from apps.redemptions.services import (
    quote_redemption,
    get_redemption_config,
    create_redemption_request,
    approve_redemption,
    reject_redemption,
    unlock_failed_redemptions,
    add_payout_method,
    delete_payout_method,
    InvalidRedemptionAmountError,
    PendingRedemptionExistsError,
    PayoutMethodNotFoundError,
    PayoutMethodPermissionError,
    PayoutMethodInUseError,
    RedemptionNotAllowedError,
    RedemptionInsufficientCoinsError,
    RedemptionNotFoundError,
    InvalidRedemptionStateError,
    PayoutFailedError,
)
from .conftest import make_user


# =============================================================================
# Requests
# =============================================================================

class TestQuote:

    def test_rounds_down(self, redemption_settings):
        quote = quote_redemption(1999)

        assert quote['fiat_amount_cents'] == 1999
        assert quote['platform_fee_cents'] == 399
        assert quote['payout_amount_cents'] == 1600
        assert quote['conversion_rate'] == Decimal('0.010000')

    def test_other_rate(self, redemption_settings):
        redemption_settings.REDEMPTION_COINS_PER_USD = 150
        quote = quote_redemption(1000)
        assert quote['fiat_amount_cents'] == 666
        assert quote['platform_fee_cents'] == 133

    def test_config(self, redemption_settings):
        config = get_redemption_config()
        assert config['min_coins'] == 1000
        assert config['coins_per_usd'] == 100
        assert config['min_age_days'] == 7


@pytest.mark.django_db
class TestCreateRedemption:

    def test_locks_coins(self, farmer, payout_method):
        redemption = create_redemption_request(
            user=farmer, coins_requested=2500, payout_method_id=payout_method.id
        )

        farmer.refresh_from_db()
        assert farmer.coins == 7500
        assert farmer.locked_coins == 2500
        assert redemption.status == RedemptionStatus.PENDING
        assert redemption.fiat_amount_cents == 2500
        assert redemption.platform_fee_cents == 500
        assert redemption.payout_amount_cents == 2000
        assert redemption.payout_method == payout_method

        entry = CoinTransaction.objects.get(user=farmer)
        assert entry.type == TransactionType.REDEEM_REQUEST
        assert entry.balance_after == 7500
        assert entry.ref_id == redemption.id

    @pytest.mark.parametrize('coins', [999, 1000001, 1500.5, '2000', True])
    def test_amount_range(self, farmer, coins):
        with pytest.raises(InvalidRedemptionAmountError, match='between 1000 and 1000000'):
            create_redemption_request(user=farmer, coins_requested=coins)

    def test_one_open_request_at_a_time(self, farmer):
        create_redemption_request(user=farmer, coins_requested=1000)
        with pytest.raises(PendingRedemptionExistsError):
            create_redemption_request(user=farmer, coins_requested=1000)

    def test_payout_method_must_exist(self, farmer):
        with pytest.raises(PayoutMethodNotFoundError):
            create_redemption_request(user=farmer, coins_requested=1000, payout_method_id=uuid.uuid4())

    def test_payout_method_must_be_own(self, manual_farmer, payout_method):
        with pytest.raises(PayoutMethodPermissionError):
            create_redemption_request(
                user=manual_farmer, coins_requested=1000, payout_method_id=payout_method.id
            )

    def test_insufficient_coins(self, manual_farmer):
        with pytest.raises(RedemptionInsufficientCoinsError, match='Available: 5000, Requested: 6000'):
            create_redemption_request(user=manual_farmer, coins_requested=6000)

        manual_farmer.refresh_from_db()
        assert manual_farmer.locked_coins == 0

    def test_new_accounts_wait(self, db):
        newcomer = make_user('new@example.com', coins=5000, age_days=2)
        with pytest.raises(RedemptionNotAllowedError, match='7 days'):
            create_redemption_request(user=newcomer, coins_requested=1000)

    def test_daily_limit(self, farmer, redemption_settings):
        redemption_settings.REDEMPTION_MAX_FIAT_CENTS_PER_DAY = 3000
        first = create_redemption_request(user=farmer, coins_requested=2000)
        reject_redemption(redemption_id=first.id, admin=farmer)

        # Rejected requests do not count against the limit.
        second = create_redemption_request(user=farmer, coins_requested=2000)
        second.status = RedemptionStatus.PAID
        second.save()

        with pytest.raises(RedemptionNotAllowedError, match='Remaining today: 1000'):
            create_redemption_request(user=farmer, coins_requested=1500)


# =============================================================================
# Review
# =============================================================================

@pytest.mark.django_db
class TestRejectRedemption:

    def test_unlocks_coins(self, farmer, admin_user):
        redemption = create_redemption_request(user=farmer, coins_requested=3000)

        reject_redemption(redemption_id=redemption.id, admin=admin_user, admin_notes='Suspicious')

        farmer.refresh_from_db()
        redemption.refresh_from_db()
        assert farmer.coins == 10000
        assert farmer.locked_coins == 0
        assert redemption.status == RedemptionStatus.REJECTED
        assert redemption.reviewed_by == admin_user
        assert redemption.admin_notes == 'Suspicious'
        assert CoinTransaction.objects.filter(
            user=farmer, type=TransactionType.REDEEM_REJECTED, balance_after=10000
        ).count() == 1

    def test_cannot_reject_twice(self, farmer, admin_user):
        redemption = create_redemption_request(user=farmer, coins_requested=3000)
        reject_redemption(redemption_id=redemption.id, admin=admin_user)

        with pytest.raises(InvalidRedemptionStateError, match='status: rejected'):
            reject_redemption(redemption_id=redemption.id, admin=admin_user)

        farmer.refresh_from_db()
        assert farmer.coins == 10000

    def test_unknown(self, admin_user):
        with pytest.raises(RedemptionNotFoundError):
            reject_redemption(redemption_id=uuid.uuid4(), admin=admin_user)


@pytest.mark.django_db
class TestApproveRedemption:

    @patch('apps.coins.services.gateway.create_transfer')
    def test_stripe_payout(self, mock_transfer, farmer, admin_user):
        mock_transfer.return_value = 'tr_123'
        redemption = create_redemption_request(user=farmer, coins_requested=4000)

        result = approve_redemption(redemption_id=redemption.id, admin=admin_user)

        assert result == {'stripe_transfer_id': 'tr_123'}
        kwargs = mock_transfer.call_args.kwargs
        assert kwargs['amount_cents'] == 3200
        assert kwargs['destination'] == 'acct_farmer'
        assert kwargs['idempotency_key'] == f'redemption-{redemption.id}'

        redemption.refresh_from_db()
        farmer.refresh_from_db()
        assert redemption.status == RedemptionStatus.PAID
        assert redemption.stripe_transfer_id == 'tr_123'
        assert redemption.stripe_account_id == 'acct_farmer'
        assert redemption.reviewed_by == admin_user
        assert farmer.coins == 6000
        assert farmer.locked_coins == 0
        entry = CoinTransaction.objects.get(user=farmer, type=TransactionType.REDEEM_APPROVED)
        assert entry.reason == 'Redemption paid'
        assert entry.balance_after == 0

    @patch('apps.coins.services.gateway.create_transfer')
    def test_approving_twice_is_idempotent(self, mock_transfer, farmer, admin_user):
        mock_transfer.return_value = 'tr_123'
        redemption = create_redemption_request(user=farmer, coins_requested=4000)

        approve_redemption(redemption_id=redemption.id, admin=admin_user)
        result = approve_redemption(redemption_id=redemption.id, admin=admin_user)

        assert result == {'message': 'Already paid', 'stripe_transfer_id': 'tr_123'}
        assert mock_transfer.call_count == 1
        farmer.refresh_from_db()
        assert farmer.coins == 6000
        assert farmer.locked_coins == 0
        assert CoinTransaction.objects.filter(type=TransactionType.REDEEM_APPROVED).count() == 1

    @patch('apps.coins.services.gateway.create_transfer')
    def test_uses_payout_method_account(self, mock_transfer, manual_farmer, admin_user):
        mock_transfer.return_value = 'tr_456'
        method = PayoutMethod.objects.create(
            user=manual_farmer, method_type='stripe_connect', stripe_account_id='acct_method'
        )
        redemption = create_redemption_request(
            user=manual_farmer, coins_requested=1000, payout_method_id=method.id
        )

        approve_redemption(redemption_id=redemption.id, admin=admin_user)

        assert mock_transfer.call_args.kwargs['destination'] == 'acct_method'

    @patch('apps.coins.services.gateway.create_transfer')
    def test_transfer_failure_returns_coins(self, mock_transfer, farmer, admin_user):
        mock_transfer.side_effect = PaymentProviderError('Insufficient platform balance')
        redemption = create_redemption_request(user=farmer, coins_requested=4000)

        with pytest.raises(PayoutFailedError, match='Coins have been returned'):
            approve_redemption(redemption_id=redemption.id, admin=admin_user, admin_notes='OK')

        redemption.refresh_from_db()
        farmer.refresh_from_db()
        assert redemption.status == RedemptionStatus.FAILED
        assert redemption.admin_notes == 'OK\nStripe error: Insufficient platform balance'
        assert farmer.coins == 10000
        assert farmer.locked_coins == 0
        assert CoinTransaction.objects.filter(
            user=farmer, type=TransactionType.REDEEM_REJECTED
        ).count() == 1

    @patch('apps.coins.services.gateway.create_transfer')
    def test_rejected_duplicate_transfer_keeps_concurrent_payout(self, mock_transfer, farmer, admin_user):
        redemption = create_redemption_request(user=farmer, coins_requested=4000)

        def concurrent_approval(**kwargs):
            if mock_transfer.call_count == 1:
                # a second admin approves while the first transfer is in flight
                approve_redemption(redemption_id=redemption.id, admin=admin_user)
                raise PaymentProviderError('Keys for idempotent requests can only be used once')
            return 'tr_1'

        mock_transfer.side_effect = concurrent_approval

        result = approve_redemption(redemption_id=redemption.id, admin=admin_user)

        assert result == {'message': 'Already paid', 'stripe_transfer_id': 'tr_1'}
        redemption.refresh_from_db()
        farmer.refresh_from_db()
        assert redemption.status == RedemptionStatus.PAID
        assert redemption.stripe_transfer_id == 'tr_1'
        assert 'Stripe error' not in redemption.admin_notes
        assert farmer.coins == 6000
        assert farmer.locked_coins == 0
        assert not CoinTransaction.objects.filter(type=TransactionType.REDEEM_REJECTED).exists()

    @patch('apps.coins.services.gateway.create_transfer')
    def test_failed_request_cannot_be_approved(self, mock_transfer, farmer, admin_user):
        mock_transfer.side_effect = PaymentProviderError('boom')
        redemption = create_redemption_request(user=farmer, coins_requested=1000)
        with pytest.raises(PayoutFailedError):
            approve_redemption(redemption_id=redemption.id, admin=admin_user)

        with pytest.raises(InvalidRedemptionStateError, match='status: failed'):
            approve_redemption(redemption_id=redemption.id, admin=admin_user)

    def test_payments_not_configured_fails_payout(self, farmer, admin_user, redemption_settings):
        redemption_settings.STRIPE_SECRET_KEY = ''
        redemption = create_redemption_request(user=farmer, coins_requested=1000)

        with pytest.raises(PayoutFailedError):
            approve_redemption(redemption_id=redemption.id, admin=admin_user)

        farmer.refresh_from_db()
        assert farmer.coins == 10000

    @patch('apps.coins.services.gateway.create_transfer')
    def test_manual_payout(self, mock_transfer, manual_farmer, admin_user):
        redemption = create_redemption_request(user=manual_farmer, coins_requested=2000)

        result = approve_redemption(redemption_id=redemption.id, admin=admin_user)

        assert result == {'message': 'Approved (manual payout required - coins deducted)'}
        mock_transfer.assert_not_called()
        redemption.refresh_from_db()
        manual_farmer.refresh_from_db()
        assert redemption.status == RedemptionStatus.APPROVED
        assert manual_farmer.coins == 3000
        assert manual_farmer.locked_coins == 0

    def test_manual_payout_is_idempotent(self, manual_farmer, admin_user):
        redemption = create_redemption_request(user=manual_farmer, coins_requested=2000)

        approve_redemption(redemption_id=redemption.id, admin=admin_user)
        result = approve_redemption(redemption_id=redemption.id, admin=admin_user)

        assert result == {'message': 'Already approved (manual payout)'}
        manual_farmer.refresh_from_db()
        assert manual_farmer.locked_coins == 0
        assert CoinTransaction.objects.filter(
            user=manual_farmer, type=TransactionType.REDEEM_APPROVED
        ).count() == 1

    def test_rejected_cannot_be_approved(self, farmer, admin_user):
        redemption = create_redemption_request(user=farmer, coins_requested=1000)
        reject_redemption(redemption_id=redemption.id, admin=admin_user)

        with pytest.raises(InvalidRedemptionStateError):
            approve_redemption(redemption_id=redemption.id, admin=admin_user)


@pytest.mark.django_db
class TestUnlockFailedRedemptions:

    def _stuck_redemption(self, user, coins):
        """A failed request whose coins were never returned."""
        redemption = create_redemption_request(user=user, coins_requested=coins)
        redemption.status = RedemptionStatus.FAILED
        redemption.save()
        return redemption

    def test_unlocks_stuck_coins(self, farmer):
        redemption = self._stuck_redemption(farmer, 3000)

        unlocked = unlock_failed_redemptions()

        assert [r.id for r in unlocked] == [redemption.id]
        farmer.refresh_from_db()
        assert farmer.coins == 10000
        assert farmer.locked_coins == 0

    def test_runs_once(self, farmer):
        self._stuck_redemption(farmer, 3000)
        unlock_failed_redemptions()

        assert unlock_failed_redemptions() == []
        farmer.refresh_from_db()
        assert farmer.coins == 10000

    def test_dry_run(self, farmer):
        self._stuck_redemption(farmer, 3000)

        assert len(unlock_failed_redemptions(dry_run=True)) == 1
        farmer.refresh_from_db()
        assert farmer.locked_coins == 3000

    @patch('apps.coins.services.gateway.create_transfer')
    def test_skips_already_returned(self, mock_transfer, farmer, admin_user):
        mock_transfer.side_effect = PaymentProviderError('boom')
        redemption = create_redemption_request(user=farmer, coins_requested=1000)
        with pytest.raises(PayoutFailedError):
            approve_redemption(redemption_id=redemption.id, admin=admin_user)

        assert unlock_failed_redemptions() == []
        farmer.refresh_from_db()
        assert farmer.coins == 10000

    def test_command(self, farmer):
        self._stuck_redemption(farmer, 3000)

        out = StringIO()
        call_command('unlock_failed_redemptions', '--dry-run', stdout=out)
        assert '--dry-run mode' in out.getvalue()

        out = StringIO()
        call_command('unlock_failed_redemptions', stdout=out)
        assert 'Unlocked coins for 1' in out.getvalue()
        farmer.refresh_from_db()
        assert farmer.locked_coins == 0


# =============================================================================
# Payout methods
# =============================================================================

@pytest.mark.django_db
class TestPayoutMethods:

    def test_first_method_is_default(self, manual_farmer):
        method = add_payout_method(user=manual_farmer, method_type='paypal', display_label='PayPal')
        assert method.is_default is True

    def test_new_default_replaces_old(self, farmer, payout_method):
        new = add_payout_method(user=farmer, method_type='bank_account', is_default=True)

        payout_method.refresh_from_db()
        assert new.is_default is True
        assert payout_method.is_default is False

    def test_delete_other_users_method(self, manual_farmer, payout_method):
        with pytest.raises(PayoutMethodPermissionError):
            delete_payout_method(user=manual_farmer, payout_method_id=payout_method.id)

    def test_delete_method_in_use(self, farmer, payout_method):
        create_redemption_request(user=farmer, coins_requested=1000, payout_method_id=payout_method.id)
        with pytest.raises(PayoutMethodInUseError):
            delete_payout_method(user=farmer, payout_method_id=payout_method.id)

    def test_delete(self, farmer, payout_method):
        delete_payout_method(user=farmer, payout_method_id=payout_method.id)
        assert not PayoutMethod.objects.exists()
