"""Business logic for reclaiming orphaned uploads.

A cycle has three phases:

1. Collect every path referenced by a registered model field.
2. Walk the bucket directories and list every stored file.
3. Delete stored files that no record references.

The upload tree is never locked. A file written after phase 2 listed
its directory survives until the next cycle. A file written before
phase 2 whose record commits after phase 1 is reclaimed; uploads and
record saves are expected to happen within one request, well inside
the cycle interval.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, final

from django.apps import apps

from server.apps.files.conf import UploadSettings
from server.apps.files.infrastructure.layout import Bucket
from server.apps.files.infrastructure.storage import UploadStorage

logger = logging.getLogger(__name__)


@final
@dataclass(slots=True)
class ReclaimReport:
    """Summary of one reclamation cycle."""

    dry_run: bool = False
    documents_scanned: int = 0
    referenced_files: int = 0
    files_scanned: int = 0
    files_deleted: int = 0
    failed_models: int = 0
    failed_directories: int = 0
    failed_deletions: int = 0
    duration_seconds: float = 0.0
    orphans: list[str] = field(default_factory=list)

    @property
    def failures(self) -> int:
        """Total number of per-item failures."""
        return (
            self.failed_models
            + self.failed_directories
            + self.failed_deletions
        )


def _add_references(referenced: set[str], value: Any) -> None:
    if isinstance(value, str):
        if value:
            referenced.add(value)
    elif isinstance(value, list):
        referenced.update(
            element for element in value
            if element and isinstance(element, str)
        )


def collect_referenced_files(
    upload_settings: UploadSettings,
    report: ReclaimReport,
) -> set[str]:
    """Collect paths held by every registered file field.

    Only the registered fields are fetched. A model that fails to scan
    is logged and counted; the remaining models are still scanned.

    Args:
        upload_settings: Holds the model/field registry.
        report: Cycle report updated with counts.

    Returns:
        Set of public paths referenced by any record.
    """
    referenced: set[str] = set()

    for model_label, fields in upload_settings.file_fields.items():
        try:
            model = apps.get_model(model_label)
            rows = model._default_manager.values_list(*fields)  # noqa: SLF001
            documents = 0
            for row in rows.iterator():
                documents += 1
                for value in row:
                    _add_references(referenced, value)
        except Exception:
            logger.exception('Error scanning %s model', model_label)
            report.failed_models += 1
            continue

        report.documents_scanned += documents
        logger.info('Scanned %d %s documents', documents, model_label)

    report.referenced_files = len(referenced)
    logger.info('Total files referenced in database: %d', len(referenced))
    return referenced


def list_stored_files(
    storage: UploadStorage,
    report: ReclaimReport,
) -> list[str]:
    """List every file stored under the bucket directories.

    Args:
        storage: Upload storage.
        report: Cycle report updated with counts.

    Returns:
        Storage names of all files, including those in sub-folders.
    """
    stored: list[str] = []
    for bucket in Bucket:
        if not storage.exists(bucket.value):
            logger.warning('Upload directory does not exist: %s', bucket.value)
            continue
        try:
            stored.extend(storage.walk_files(bucket.value))
        except OSError:
            logger.exception('Error scanning directory %s', bucket.value)
            report.failed_directories += 1

    report.files_scanned = len(stored)
    return stored


def _log_summary(report: ReclaimReport) -> None:
    logger.info(
        'File cleanup summary: documents_scanned=%d referenced_files=%d '
        'files_scanned=%d files_deleted=%d failures=%d duration=%.2fs%s',
        report.documents_scanned,
        report.referenced_files,
        report.files_scanned,
        report.files_deleted,
        report.failures,
        report.duration_seconds,
        ' (dry run)' if report.dry_run else '',
    )


def reclaim_orphaned_files(
    upload_settings: UploadSettings | None = None,
    *,
    dry_run: bool = False,
) -> ReclaimReport:
    """Delete stored files that no registered field references.

    A failing deletion is counted and the cycle continues. If any model
    failed to scan, the reference set is incomplete and nothing is
    deleted this cycle.

    Args:
        upload_settings: Optional settings override.
        dry_run: Report orphans without deleting them.

    Returns:
        ReclaimReport for the cycle.
    """
    upload_settings = upload_settings or UploadSettings.from_django()
    storage = UploadStorage(upload_settings)
    report = ReclaimReport(dry_run=dry_run)
    started = time.monotonic()

    logger.info('Starting orphaned file cleanup')
    referenced = collect_referenced_files(upload_settings, report)
    stored = list_stored_files(storage, report)
    report.orphans = [
        storage_name for storage_name in stored
        if storage.public_path(storage_name) not in referenced
    ]

    if report.failed_models:
        logger.error(
            'Reference scan incomplete (%d models failed), '
            'skipping deletion of %d unreferenced files',
            report.failed_models,
            len(report.orphans),
        )
    elif not dry_run:
        for storage_name in report.orphans:
            try:
                storage.delete(storage_name)
            except Exception:
                report.failed_deletions += 1
            else:
                report.files_deleted += 1

    report.duration_seconds = time.monotonic() - started
    _log_summary(report)
    return report
