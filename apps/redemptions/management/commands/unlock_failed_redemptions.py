"""
Management command to return coins still locked by failed redemptions.

Run this if a payout failure left coins in a user's locked balance.

Usage:
    python manage.py unlock_failed_redemptions [--dry-run]
"""

from django.core.management.base import BaseCommand

from apps.redemptions.services import unlock_failed_redemptions


class Command(BaseCommand):
    help = 'Unlock coins of failed redemption requests'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be unlocked without making changes',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']

        redemptions = unlock_failed_redemptions(dry_run=dry_run)

        if not redemptions:
            self.stdout.write(
                self.style.SUCCESS('No failed redemptions with locked coins. All good!')
            )
            return

        self.stdout.write(f'\nFound {len(redemptions)} failed redemption(s) with locked coins:\n')
        for redemption in redemptions:
            self.stdout.write(
                f'  - {redemption.id} | {redemption.coins_requested} coins | User: {redemption.user_id}'
            )

        if dry_run:
            self.stdout.write(
                self.style.WARNING('\n--dry-run mode: No changes made.')
            )
            return

        self.stdout.write(
            self.style.SUCCESS(f'\n✓ Unlocked coins for {len(redemptions)} failed redemption(s)!')
        )
