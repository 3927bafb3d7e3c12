"""Storage layout: which bucket directory an upload lands in."""

import enum
import logging
import re
from typing import Final, final

from server.apps.files.conf import UploadSettings

logger = logging.getLogger(__name__)

AUDIO_FIELD_NAME: Final = 'audioFile'
PDF_MIME_TYPE: Final = 'application/pdf'

_UNSAFE_SUBFOLDER_CHARS: Final = re.compile(r'[^A-Za-z0-9_-]')


class Bucket(enum.StrEnum):
    """Fixed top-level directories of the upload tree."""

    IMAGES = 'images'
    DOCS = 'docs'
    MEDIA = 'medias'


def resolve_bucket(field_name: str, mime_type: str) -> Bucket:
    """Pick the bucket for an incoming file.

    First matching rule wins: audio field or audio type, then PDF,
    then images. Anything else falls back to the images bucket; the
    allow-list check in the ingestor is what actually gates types.

    Args:
        field_name: Form field the file was sent under.
        mime_type: Content type of the file.

    Returns:
        Destination bucket.
    """
    if field_name == AUDIO_FIELD_NAME or mime_type.startswith('audio/'):
        return Bucket.MEDIA
    if mime_type == PDF_MIME_TYPE:
        return Bucket.DOCS
    return Bucket.IMAGES


def sanitize_subfolder(name: str) -> str:
    """Restrict a sub-folder name to alphanumerics, '_' and '-'.

    Example: '../etc passwd' -> '___etc_passwd'

    Args:
        name: Caller supplied sub-folder name.

    Returns:
        Sanitized name (idempotent).
    """
    return _UNSAFE_SUBFOLDER_CHARS.sub('_', name)


@final
class StorageLayout:
    """Maps buckets and sub-folders to directories under the upload root."""

    def __init__(self, upload_settings: UploadSettings) -> None:
        """Initialize layout.

        Args:
            upload_settings: Upload root and limits.
        """
        self._root = upload_settings.root

    def directory_for(self, bucket: Bucket, subfolder: str | None = None) -> str:
        """Return the storage-relative directory, creating it on first use.

        Sub-folders are only honoured for the images bucket.

        Args:
            bucket: Destination bucket.
            subfolder: Optional caller supplied sub-folder name.

        Returns:
            Storage-relative directory (e.g. 'images/attorneys').
        """
        relative = bucket.value
        if subfolder and bucket is Bucket.IMAGES:
            relative = f'{relative}/{sanitize_subfolder(subfolder)}'

        directory = self._root.joinpath(relative)
        if not directory.is_dir():
            # Concurrent requests may race here; exist_ok absorbs it
            directory.mkdir(parents=True, exist_ok=True)
            logger.info('Created upload directory: %s', directory)
        return relative

    def ensure_buckets(self) -> None:
        """Create every bucket directory."""
        for bucket in Bucket:
            self.directory_for(bucket)
