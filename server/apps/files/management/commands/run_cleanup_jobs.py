"""Django management command to run the scheduled cleanup jobs."""

import logging
from typing import Any, final, override

from django.core.management.base import BaseCommand

from server.apps.files.conf import UploadSettings
from server.apps.files.infrastructure.layout import StorageLayout
from server.apps.files.jobs import build_scheduler, run_unverified_cleanup_cycle

logger = logging.getLogger(__name__)


@final
class Command(BaseCommand):
    """Run orphaned file and unverified account cleanup on a schedule."""

    help = 'Run the scheduled cleanup jobs in the foreground'

    @override
    def add_arguments(self, parser: Any) -> None:
        """Add command arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            '--skip-initial-run',
            action='store_true',
            default=False,
            help='Do not run the unverified users cleanup on startup',
        )

    @override
    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the command.

        Args:
            args: Positional arguments.
            options: Keyword arguments from command line.
        """
        StorageLayout(UploadSettings.from_django()).ensure_buckets()
        scheduler = build_scheduler()

        if not options['skip_initial_run']:
            run_unverified_cleanup_cycle()

        self.stdout.write(self.style.SUCCESS('Starting cleanup scheduler'))
        try:
            logger.info('Cleanup scheduler starting')
            scheduler.start()
        except (KeyboardInterrupt, SystemExit):
            self.stdout.write(self.style.WARNING('\nShutting down...'))
        finally:
            if scheduler.running:
                scheduler.shutdown(wait=False)
            self.stdout.write(self.style.SUCCESS('Cleanup scheduler stopped'))
