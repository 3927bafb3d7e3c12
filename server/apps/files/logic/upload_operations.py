"""Business logic for ingesting multipart uploads."""

import enum
import logging
from collections.abc import Iterator
from concurrent.futures import Future
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final, final

from django.core.files.uploadedfile import UploadedFile
from django.utils.datastructures import MultiValueDict

from server.apps.files.conf import UploadSettings
from server.apps.files.exceptions import (
    FileTooLargeError,
    TooManyFilesError,
    UnexpectedFieldError,
    UnsupportedMediaTypeError,
)
from server.apps.files.infrastructure.images import schedule_optimization
from server.apps.files.infrastructure.layout import (
    Bucket,
    StorageLayout,
    resolve_bucket,
)
from server.apps.files.infrastructure.metadata import (
    detect_mime_type,
    generate_filename,
)
from server.apps.files.infrastructure.storage import UploadStorage

ALLOWED_IMAGE_TYPES: Final = ('image/jpeg', 'image/png', 'image/webp')
ALLOWED_DOCUMENT_TYPES: Final = ('application/pdf',)
ALLOWED_AUDIO_TYPES: Final = (
    'audio/mpeg',
    'audio/wav',
    'audio/ogg',
    'audio/mp4',
)
ALLOWED_MIME_TYPES: Final = (
    ALLOWED_IMAGE_TYPES + ALLOWED_DOCUMENT_TYPES + ALLOWED_AUDIO_TYPES
)

logger = logging.getLogger(__name__)


class UploadKind(enum.Enum):
    """Recognized upload form fields.

    The value is both the multipart field name and the body key the
    stored path is written to.
    """

    IMAGE = 'image'
    IMAGES = 'images'
    PROFILE_IMAGE = 'profileImage'
    BANNER_IMAGE = 'bannerImage'
    AVATAR = 'avatar'
    BANNER = 'banner'
    LOGO = 'logo'
    AUDIO_FILE = 'audioFile'
    DOCUMENT = 'document'

    @property
    def field_name(self) -> str:
        """Form field and body key for this kind."""
        return self.value

    @property
    def is_multiple(self) -> bool:
        """Whether the field holds a list of paths."""
        return self is UploadKind.IMAGES

    @property
    def bucket_hint(self) -> Bucket | None:
        """Bucket forced by the field itself, regardless of content type."""
        if self is UploadKind.AUDIO_FILE:
            return Bucket.MEDIA
        return None

    def max_count(self, upload_settings: UploadSettings) -> int:
        """Maximum number of files accepted for this field."""
        if self.is_multiple:
            return upload_settings.max_gallery_files
        return 1


@final
@dataclass(frozen=True, slots=True)
class StoredUpload:
    """A file accepted and written by the ingestor."""

    kind: UploadKind
    name: str
    public_path: str
    mime_type: str
    size: int

    @property
    def bucket(self) -> Bucket:
        """Bucket the file was written to."""
        return Bucket(self.name.split('/', 1)[0])


@final
@dataclass(slots=True)
class IngestResult:
    """Stored files of one request, grouped by kind in upload order."""

    files: dict[UploadKind, list[StoredUpload]] = field(default_factory=dict)

    def __iter__(self) -> Iterator[StoredUpload]:
        """Iterate over every stored file."""
        for uploads in self.files.values():
            yield from uploads

    def __len__(self) -> int:
        """Number of stored files."""
        return sum(len(uploads) for uploads in self.files.values())

    def add(self, upload: StoredUpload) -> None:
        """Record a stored file under its kind."""
        self.files.setdefault(upload.kind, []).append(upload)


def _validate_request(
    files: MultiValueDict[str, UploadedFile],
    upload_settings: UploadSettings,
) -> list[tuple[UploadKind, UploadedFile, str]]:
    """Check every file of the request before anything is written.

    Returns:
        Accepted files as (kind, file, mime type) in upload order.

    Raises:
        TooManyFilesError: If the request carries too many files.
        UnexpectedFieldError: If a field is unknown or over its count.
        UnsupportedMediaTypeError: If a content type is not allowed.
        FileTooLargeError: If a file exceeds the per-file limit.
    """
    total = sum(len(field_files) for _, field_files in files.lists())
    if total > upload_settings.max_files:
        raise TooManyFilesError(upload_settings.max_files)

    accepted = []
    for field_name, field_files in files.lists():
        try:
            kind = UploadKind(field_name)
        except ValueError as exc:
            raise UnexpectedFieldError(field_name) from exc

        if len(field_files) > kind.max_count(upload_settings):
            raise UnexpectedFieldError(field_name)

        for uploaded in field_files:
            mime_type = detect_mime_type(uploaded.name, uploaded.content_type)
            if mime_type not in ALLOWED_MIME_TYPES:
                raise UnsupportedMediaTypeError(mime_type, ALLOWED_MIME_TYPES)
            if uploaded.size > upload_settings.max_file_size:
                raise FileTooLargeError(
                    uploaded.name,
                    upload_settings.max_file_size,
                )
            accepted.append((kind, uploaded, mime_type))
    return accepted


def ingest_files(
    files: MultiValueDict[str, UploadedFile],
    upload_settings: UploadSettings,
    subfolder: str | None = None,
) -> IngestResult:
    """Validate and store the files of a multipart request.

    The whole batch is validated first, so a rejected request never
    leaves files on disk. If a write fails part-way, files already
    written for the request are rolled back before the error
    propagates.

    Args:
        files: Uploaded files keyed by form field (``request.FILES``).
        upload_settings: Upload root and limits.
        subfolder: Optional sub-folder for the images bucket.

    Returns:
        Stored files grouped by kind.

    Raises:
        UploadError: If the request violates a limit or the allow-list.
        Exception: If writing a file fails.
    """
    accepted = _validate_request(files, upload_settings)

    layout = StorageLayout(upload_settings)
    storage = UploadStorage(upload_settings)
    result = IngestResult()

    for kind, uploaded, mime_type in accepted:
        bucket = kind.bucket_hint or resolve_bucket(kind.field_name, mime_type)
        directory = layout.directory_for(bucket, subfolder)
        storage_name = f'{directory}/{generate_filename(uploaded.name)}'
        try:
            saved_name = storage.save(storage_name, uploaded)
        except Exception:
            logger.exception(
                'Failed to store %s upload, rolling back %d files',
                kind.field_name,
                len(result),
            )
            for stored in result:
                storage.rollback_upload(stored.name)
            raise

        result.add(StoredUpload(
            kind=kind,
            name=saved_name,
            public_path=storage.public_path(saved_name),
            mime_type=mime_type,
            size=uploaded.size,
        ))

    logger.info('Stored %d uploaded files', len(result))
    return result


def schedule_image_optimizations(
    result: IngestResult,
    upload_settings: UploadSettings,
) -> list[Future[bool]]:
    """Start background optimization for every stored image.

    Args:
        result: Files stored for the request.
        upload_settings: Upload root and optimization threshold.

    Returns:
        Futures of the scheduled optimizations (never awaited by views).
    """
    storage = UploadStorage(upload_settings)
    return [
        schedule_optimization(
            Path(storage.path(stored.name)),
            upload_settings,
        )
        for stored in result
        if stored.bucket is Bucket.IMAGES
    ]
