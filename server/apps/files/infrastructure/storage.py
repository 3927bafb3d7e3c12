"""Filesystem storage backend for the upload tree."""

import logging
from collections.abc import Iterator
from typing import Any, final, override

from django.core.files.storage import FileSystemStorage

from server.apps.files.conf import UploadSettings

logger = logging.getLogger(__name__)


@final
class UploadStorage(FileSystemStorage):
    """Local storage for uploaded files.

    Extends Django's FileSystemStorage with:
    - Logging around writes and deletes
    - Best-effort rollback of files written for a rejected request
    - Translation between storage names and public '/uploads/...' paths
    """

    def __init__(self, upload_settings: UploadSettings) -> None:
        """Initialize storage rooted at the upload directory.

        Args:
            upload_settings: Upload root and public URL prefix.
        """
        super().__init__(
            location=upload_settings.root,
            base_url=upload_settings.url_prefix,
        )
        self.url_prefix = upload_settings.url_prefix

    @override
    def save(
        self,
        name: str | None,
        content: Any,
        max_length: int | None = None,
    ) -> str:
        """Save file to disk with error handling and logging.

        Args:
            name: Storage path for the file.
            content: File content (file-like object).
            max_length: Optional maximum length for the filename.

        Returns:
            Actual storage path used (may differ from name if conflicts).

        Raises:
            Exception: If the write fails.
        """
        try:
            logger.debug('Writing upload: %s', name)
            saved_name = super().save(name, content, max_length)
        except Exception:
            logger.exception('Failed to write upload: %s', name)
            raise
        else:
            logger.info('Stored upload: %s', saved_name)
            return saved_name

    @override
    def delete(self, name: str) -> None:
        """Delete file from disk with error handling and logging.

        Args:
            name: Storage path of file to delete.

        Raises:
            Exception: If the delete fails.
        """
        try:
            super().delete(name)
        except Exception:
            logger.exception('Failed to delete upload: %s', name)
            raise
        logger.info('Deleted upload: %s', name)

    def rollback_upload(self, name: str) -> None:
        """Delete a file written for a request that did not complete.

        This is a best-effort operation: if deletion fails, the error
        is logged and the file is left for the orphan reclaimer.

        Args:
            name: Storage path of file to delete.
        """
        try:
            logger.warning('Rolling back upload, deleting file: %s', name)
            self.delete(name)
        except Exception:
            logger.exception(
                'Failed to rollback upload, orphaned file: %s',
                name,
            )

    def walk_files(self, directory: str) -> Iterator[str]:
        """Yield storage paths of every regular file below ``directory``.

        Args:
            directory: Storage-relative directory (e.g. 'images').

        Yields:
            Storage paths with forward slashes (e.g. 'images/sub/a.jpg').
        """
        directories, files = self.listdir(directory)
        for filename in files:
            yield f'{directory}/{filename}'
        for subdirectory in directories:
            yield from self.walk_files(f'{directory}/{subdirectory}')

    def public_path(self, name: str) -> str:
        """Public path stored on content records for a storage name.

        Example: 'images/a.jpg' -> '/uploads/images/a.jpg'

        Args:
            name: Storage path.

        Returns:
            Root-relative URL path.
        """
        return f'{self.url_prefix}{name}'

    def name_from_public_path(self, public_path: str) -> str | None:
        """Reverse of :meth:`public_path`.

        Args:
            public_path: Path as stored on a content record.

        Returns:
            Storage name, or None when the path is outside the upload
            tree or tries to escape it.
        """
        if not public_path.startswith(self.url_prefix):
            return None
        name = public_path.removeprefix(self.url_prefix)
        if not name or '..' in name.split('/'):
            return None
        return name
