"""Business logic for explicit deletion of uploaded files."""

import logging
from collections.abc import Iterable
from pathlib import PurePosixPath

from server.apps.files.conf import UploadSettings
from server.apps.files.infrastructure.metadata import optimized_sibling
from server.apps.files.infrastructure.storage import UploadStorage

logger = logging.getLogger(__name__)


def _get_storage(upload_settings: UploadSettings | None) -> UploadStorage:
    """Get storage for the given settings or the project's settings.

    Returns:
        UploadStorage rooted at the upload directory.
    """
    return UploadStorage(upload_settings or UploadSettings.from_django())


def delete_uploaded_file(
    public_path: str,
    upload_settings: UploadSettings | None = None,
) -> bool:
    """Delete an uploaded file referenced by its public path.

    Used by business logic when a file is replaced or its owner goes
    away. A leftover optimizer candidate next to the file is removed
    as well. Errors are logged, never raised.

    Args:
        public_path: Path as stored on a record ('/uploads/images/a.jpg').
        upload_settings: Optional settings override.

    Returns:
        True if a file was removed, False otherwise.
    """
    storage = _get_storage(upload_settings)
    storage_name = storage.name_from_public_path(public_path)
    if storage_name is None:
        logger.warning(
            'Refusing to delete path outside upload tree: %s',
            public_path,
        )
        return False

    candidate_name = str(optimized_sibling(PurePosixPath(storage_name)))
    try:
        removed = storage.exists(storage_name)
        if removed:
            storage.delete(storage_name)
        else:
            logger.debug('File not found in storage: %s', storage_name)

        if storage.exists(candidate_name):
            storage.delete(candidate_name)
    except Exception:
        logger.exception('Failed to delete file %s', public_path)
        return False
    return removed


def delete_uploaded_files(
    public_paths: Iterable[str],
    upload_settings: UploadSettings | None = None,
) -> int:
    """Delete a batch of uploaded files.

    Args:
        public_paths: Paths as stored on records. Empty values are skipped.
        upload_settings: Optional settings override.

    Returns:
        Number of files removed.
    """
    return sum(
        delete_uploaded_file(public_path, upload_settings)
        for public_path in public_paths
        if public_path
    )
