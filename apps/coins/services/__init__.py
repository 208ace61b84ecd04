"""Services for the coin wallet: ledger, packages and purchases."""

from .exceptions import (
    CoinsServiceError,
    InvalidAmountError,
    InsufficientCoinsError,
    WalletUserNotFoundError,
    CurrencyNotFoundError,
    InvalidCurrencyRateError,
    PackageNotFoundError,
    InvalidPackageError,
    PackageInUseError,
    PaymentsNotConfiguredError,
    PaymentProviderError,
    WebhookVerificationError,
    PurchaseNotFoundError,
)
from .ledger import (
    lock_user,
    deduct_coins,
    credit_coins,
    refund_coins,
    set_balance,
    calculate_coin_cost,
)
from .packages import (
    get_currency_rates,
    get_all_currency_rates,
    get_coins_per_currency_unit,
    upsert_currency_rate,
    delete_currency_rate,
    get_active_packages,
    get_all_packages,
    get_package_by_id,
    create_package,
    update_package,
    delete_package,
)
from .purchases import (
    create_checkout_session,
    fulfill_checkout_session,
    handle_webhook_event,
)

__all__ = [
    # Exceptions
    'CoinsServiceError',
    'InvalidAmountError',
    'InsufficientCoinsError',
    'WalletUserNotFoundError',
    'CurrencyNotFoundError',
    'InvalidCurrencyRateError',
    'PackageNotFoundError',
    'InvalidPackageError',
    'PackageInUseError',
    'PaymentsNotConfiguredError',
    'PaymentProviderError',
    'WebhookVerificationError',
    'PurchaseNotFoundError',
    # Ledger
    'lock_user',
    'deduct_coins',
    'credit_coins',
    'refund_coins',
    'set_balance',
    'calculate_coin_cost',
    # Packages & currencies
    'get_currency_rates',
    'get_all_currency_rates',
    'get_coins_per_currency_unit',
    'upsert_currency_rate',
    'delete_currency_rate',
    'get_active_packages',
    'get_all_packages',
    'get_package_by_id',
    'create_package',
    'update_package',
    'delete_package',
    # Purchases
    'create_checkout_session',
    'fulfill_checkout_session',
    'handle_webhook_event',
]
