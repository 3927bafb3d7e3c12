"""Management command to delete accounts that were never verified."""

from datetime import timedelta
from typing import Any

from django.conf import settings
from django.core.management.base import BaseCommand

from server.apps.accounts.logic.cleanup_operations import (
    cleanup_unverified_users,
    get_stale_unverified_users,
)


class Command(BaseCommand):
    """Delete unverified accounts older than the configured age."""

    help = 'Delete unverified accounts and their profile images'

    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            '--max-age-hours',
            type=int,
            default=None,
            help='Minimum account age in hours (default: from settings)',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be deleted without deleting',
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the cleanup command.

        Args:
            args: Positional arguments (unused).
            options: Command options.
        """
        max_age_hours = options['max_age_hours']
        if max_age_hours is None:
            max_age_hours = settings.CLEANUP_UNVERIFIED_USERS_MAX_AGE_HOURS
        max_age = timedelta(hours=max_age_hours)

        self.stdout.write(
            f'Looking for unverified accounts older than {max_age_hours} hours',
        )

        dry_run = options['dry_run']
        if dry_run:
            for user in get_stale_unverified_users(max_age):
                self.stdout.write(
                    f'Would delete: {user} (joined: {user.date_joined})',
                )

        deleted = cleanup_unverified_users(max_age, dry_run=dry_run)
        if dry_run:
            self.stdout.write(
                self.style.SUCCESS(f'Would delete {deleted} unverified users'),
            )
            return

        self.stdout.write(
            self.style.SUCCESS(f'Deleted {deleted} unverified users'),
        )
