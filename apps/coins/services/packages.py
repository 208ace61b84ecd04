"""
Currency rate and coin package management.

Currency rates are soft-deleted (deactivated) because packages and orders
refer to them. Packages are hard-deleted unless a purchase references them.
"""

import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.coins.models import CurrencyRate, CoinPackage

from .exceptions import (
    CurrencyNotFoundError,
    InvalidCurrencyRateError,
    PackageNotFoundError,
    InvalidPackageError,
    PackageInUseError,
)

logger = logging.getLogger(__name__)

CURRENCY_CODE_RE = re.compile(r'^[A-Z]{3}$')

PACKAGE_FIELDS = (
    'name', 'description', 'coins', 'price', 'currency', 'discount_percent',
    'display_order', 'is_active', 'is_featured',
)


# =============================================================================
# CURRENCY RATES
# =============================================================================

def get_currency_rates() -> QuerySet:
    """Active currency rates, alphabetically."""
    return CurrencyRate.objects.filter(is_active=True).order_by('currency')


def get_all_currency_rates() -> QuerySet:
    """All currency rates including inactive ones (admin)."""
    return CurrencyRate.objects.order_by('currency')


def get_coins_per_currency_unit(currency: str) -> Decimal:
    """
    Raises:
        CurrencyNotFoundError: If the currency is unknown or inactive
    """
    code = (currency or '').upper()
    rate = CurrencyRate.objects.filter(currency=code, is_active=True).first()
    if rate is None:
        raise CurrencyNotFoundError(f"Currency {code} not found or inactive")
    return rate.coins_per_unit


@transaction.atomic
def upsert_currency_rate(
    *,
    currency: str,
    coins_per_unit,
    display_name: str,
    symbol: str,
    is_active: bool = True,
    admin: Optional[User] = None
) -> CurrencyRate:
    """
    Create or update a currency rate.

    Args:
        currency: ISO 4217 code, upper-cased before storing
        coins_per_unit: Coins one unit of the currency buys, must be > 0
        display_name: Name shown to users
        symbol: Currency symbol
        is_active: Whether the rate can be used
        admin: Admin performing the change

    Raises:
        InvalidCurrencyRateError: If the code or rate is invalid
    """
    code = (currency or '').strip().upper()
    if not CURRENCY_CODE_RE.match(code):
        raise InvalidCurrencyRateError("Currency code must be 3 uppercase letters (e.g., USD, EUR, GBP)")

    try:
        rate_value = Decimal(str(coins_per_unit))
    except (InvalidOperation, ValueError):
        raise InvalidCurrencyRateError("Coins per unit must be a positive number")
    if rate_value <= 0:
        raise InvalidCurrencyRateError("Coins per unit must be a positive number")

    rate = CurrencyRate.objects.select_for_update().filter(currency=code).first()
    if rate is None:
        rate = CurrencyRate(currency=code, created_by=admin)

    rate.coins_per_unit = rate_value
    rate.display_name = display_name
    rate.symbol = symbol
    rate.is_active = is_active
    rate.updated_by = admin
    rate.save()

    logger.info("Currency rate %s set to %s coins/unit", code, rate_value)
    return rate


@transaction.atomic
def delete_currency_rate(*, currency: str, admin: Optional[User] = None) -> CurrencyRate:
    """
    Deactivate a currency rate.

    Raises:
        CurrencyNotFoundError: If the currency does not exist
    """
    code = (currency or '').upper()
    rate = CurrencyRate.objects.select_for_update().filter(currency=code).first()
    if rate is None:
        raise CurrencyNotFoundError("Currency rate not found")

    rate.is_active = False
    rate.updated_by = admin
    rate.save(update_fields=['is_active', 'updated_by', 'updated_at'])
    logger.info("Currency rate %s deactivated", code)
    return rate


# =============================================================================
# PACKAGES
# =============================================================================

def get_active_packages(*, currency: Optional[str] = None) -> QuerySet:
    """Active packages whose currency is also active, cheapest position first."""
    queryset = (
        CoinPackage.objects
        .select_related('currency')
        .filter(is_active=True, currency__is_active=True)
    )
    if currency:
        queryset = queryset.filter(currency_id=currency.upper())
    return queryset.order_by('display_order', 'coins')


def get_all_packages() -> QuerySet:
    """Every package including inactive ones (admin)."""
    return CoinPackage.objects.select_related('currency').order_by('display_order', 'coins')


def get_package_by_id(package_id: UUID) -> CoinPackage:
    """
    Raises:
        PackageNotFoundError: If the package does not exist
    """
    try:
        return CoinPackage.objects.select_related('currency').get(id=package_id)
    except (CoinPackage.DoesNotExist, ValueError):
        raise PackageNotFoundError("Package not found")


def _active_currency(code: str) -> CurrencyRate:
    rate = CurrencyRate.objects.filter(currency=(code or '').upper(), is_active=True).first()
    if rate is None:
        raise InvalidPackageError(f"Currency {code} not found or inactive")
    return rate


@transaction.atomic
def create_package(
    *,
    name: str,
    coins: int,
    price,
    currency: str,
    description: str = "",
    discount_percent=0,
    display_order: int = 0,
    is_active: bool = True,
    is_featured: bool = False,
    admin: Optional[User] = None
) -> CoinPackage:
    """
    Create a coin package.

    Raises:
        InvalidPackageError: If the currency is unknown or inactive
    """
    rate = _active_currency(currency)

    package = CoinPackage.objects.create(
        name=name,
        description=description,
        coins=coins,
        price=price,
        currency=rate,
        discount_percent=discount_percent,
        display_order=display_order,
        is_active=is_active,
        is_featured=is_featured,
        created_by=admin,
        updated_by=admin,
    )
    logger.info("Created coin package %s (%s coins for %s %s)", package.id, coins, price, rate.currency)
    return package


@transaction.atomic
def update_package(*, package_id: UUID, data: dict, admin: Optional[User] = None) -> CoinPackage:
    """
    Partially update a package with the known fields present in ``data``.

    Raises:
        PackageNotFoundError: If the package does not exist
        InvalidPackageError: If there is nothing to update or the currency is invalid
    """
    updates = {key: value for key, value in data.items() if key in PACKAGE_FIELDS}
    if not updates:
        raise InvalidPackageError("No fields to update")

    try:
        package = CoinPackage.objects.select_for_update().get(id=package_id)
    except CoinPackage.DoesNotExist:
        raise PackageNotFoundError("Package not found")

    if 'currency' in updates:
        updates['currency'] = _active_currency(updates['currency'])

    for key, value in updates.items():
        setattr(package, key, value)
    package.updated_by = admin
    package.save()
    return package


@transaction.atomic
def delete_package(*, package_id: UUID) -> None:
    """
    Delete a package that has never been purchased.

    Raises:
        PackageNotFoundError: If the package does not exist
        PackageInUseError: If purchases reference the package
    """
    try:
        package = CoinPackage.objects.select_for_update().get(id=package_id)
    except CoinPackage.DoesNotExist:
        raise PackageNotFoundError("Package not found")

    purchase_count = package.purchases.count()
    if purchase_count:
        raise PackageInUseError(
            f"Cannot delete package: It has been used in {purchase_count} purchase(s). "
            "Deactivate it instead."
        )

    package.delete()
    logger.info("Deleted coin package %s", package_id)
