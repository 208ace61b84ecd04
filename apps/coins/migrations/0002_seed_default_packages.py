# Seeds the USD rate and the four default coin packs.

from decimal import Decimal
from django.db import migrations


DEFAULT_PACKS = [
    # (name, coins, price, display_order)
    ('Small Pack', 100, Decimal('9.99'), 1),
    ('Medium Pack', 500, Decimal('44.99'), 2),
    ('Large Pack', 1200, Decimal('99.99'), 3),
    ('XL Pack', 2500, Decimal('199.99'), 4),
]


def seed_defaults(apps, schema_editor):
    CurrencyRate = apps.get_model('coins', 'CurrencyRate')
    CoinPackage = apps.get_model('coins', 'CoinPackage')

    usd, _ = CurrencyRate.objects.get_or_create(
        currency='USD',
        defaults={
            'coins_per_unit': Decimal('10'),
            'display_name': 'US Dollar',
            'symbol': '$',
            'is_active': True,
        },
    )

    if CoinPackage.objects.exists():
        return

    for name, coins, price, order in DEFAULT_PACKS:
        CoinPackage.objects.create(
            name=name,
            coins=coins,
            price=price,
            currency=usd,
            display_order=order,
            is_active=True,
        )


def remove_defaults(apps, schema_editor):
    CoinPackage = apps.get_model('coins', 'CoinPackage')
    CoinPackage.objects.filter(
        name__in=[name for name, _, _, _ in DEFAULT_PACKS],
        purchases__isnull=True,
    ).delete()


class Migration(migrations.Migration):

    dependencies = [
        ('coins', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(seed_defaults, remove_defaults),
    ]
