"""Management command to reclaim uploaded files no record references."""

from typing import Any

from django.core.management.base import BaseCommand

from server.apps.files.logic.reclaim_operations import reclaim_orphaned_files


class Command(BaseCommand):
    """Delete uploaded files not referenced by any registered field."""

    help = 'Delete uploaded files that no content record references'

    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
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
        dry_run = options['dry_run']

        report = reclaim_orphaned_files(dry_run=dry_run)

        self.stdout.write(
            f'Scanned {report.documents_scanned} documents, '
            f'{report.referenced_files} referenced files, '
            f'{report.files_scanned} stored files',
        )

        if dry_run:
            for storage_name in report.orphans:
                self.stdout.write(f'Would delete: {storage_name}')
            self.stdout.write(
                self.style.SUCCESS(
                    f'Would delete {len(report.orphans)} orphaned files',
                ),
            )
            return

        if report.failed_models:
            self.stderr.write(
                f'{report.failed_models} models failed to scan, '
                'no files were deleted',
            )

        self.stdout.write(
            self.style.SUCCESS(
                f'Deleted {report.files_deleted} orphaned files, '
                f'{report.failures} failed',
            ),
        )
