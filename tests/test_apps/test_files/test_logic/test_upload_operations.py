"""Tests for upload ingestion business logic."""

from pathlib import PurePosixPath

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from server.apps.files.exceptions import (
    FileTooLargeError,
    TooManyFilesError,
    UnexpectedFieldError,
    UnsupportedMediaTypeError,
)
from server.apps.files.infrastructure.layout import Bucket
from server.apps.files.infrastructure.storage import UploadStorage
from server.apps.files.logic.upload_operations import (
    UploadKind,
    ingest_files,
    schedule_image_optimizations,
)


def _upload(name: str, content_type: str, content: bytes = b'data'):
    return SimpleUploadedFile(name, content, content_type=content_type)


def _stored_files(root):
    return [path for path in root.rglob('*') if path.is_file()]


def test_ingest_image_goes_to_images_bucket(
    upload_settings,
    files_of,
    jpeg_upload,
):
    """Test an image is written under images/ with a unique name."""
    upload = jpeg_upload('photo.jpg')

    result = ingest_files(files_of(image=upload), upload_settings)

    (stored,) = result.files[UploadKind.IMAGE]
    assert stored.bucket is Bucket.IMAGES
    assert stored.mime_type == 'image/jpeg'
    assert stored.size == upload.size
    assert stored.public_path.startswith('/uploads/images/photo-')
    assert stored.public_path.endswith('.jpg')
    assert (upload_settings.root / stored.name).is_file()


def test_ingest_routes_by_field_and_type(upload_settings, files_of):
    """Test PDFs land in docs/ and audio lands in medias/."""
    result = ingest_files(
        files_of(
            document=_upload('brief.pdf', 'application/pdf'),
            audioFile=_upload('intro.mp3', 'audio/mpeg'),
            logo=_upload('jingle.ogg', 'audio/ogg'),
        ),
        upload_settings,
    )

    assert result.files[UploadKind.DOCUMENT][0].name.startswith('docs/brief-')
    assert result.files[UploadKind.AUDIO_FILE][0].name.startswith(
        'medias/intro-',
    )
    assert result.files[UploadKind.LOGO][0].bucket is Bucket.MEDIA
    assert len(result) == 3


def test_ingest_subfolder_only_for_images(upload_settings, files_of, jpeg_upload):
    """Test the sub-folder applies to the images bucket only."""
    result = ingest_files(
        files_of(
            profileImage=jpeg_upload(),
            document=_upload('cv.pdf', 'application/pdf'),
        ),
        upload_settings,
        subfolder='attorneys',
    )

    (profile_image,) = result.files[UploadKind.PROFILE_IMAGE]
    (document,) = result.files[UploadKind.DOCUMENT]
    assert profile_image.public_path.startswith('/uploads/images/attorneys/')
    assert document.public_path.startswith('/uploads/docs/cv-')


def test_ingest_gallery_keeps_upload_order(upload_settings, files_of, jpeg_upload):
    """Test gallery paths follow the order files were sent in."""
    result = ingest_files(
        files_of(images=[jpeg_upload('c.jpg'), jpeg_upload('a.jpg')]),
        upload_settings,
    )

    names = [
        PurePosixPath(stored.name).name
        for stored in result.files[UploadKind.IMAGES]
    ]
    assert names[0].startswith('c-')
    assert names[1].startswith('a-')


def test_ingest_writes_uploaded_content(upload_settings, files_of):
    """Test the stored file holds exactly the uploaded bytes."""
    result = ingest_files(
        files_of(document=_upload('a.pdf', 'application/pdf', b'%PDF-1.7')),
        upload_settings,
    )

    (stored,) = result
    assert (upload_settings.root / stored.name).read_bytes() == b'%PDF-1.7'


def test_ingest_rejects_unsupported_type(upload_settings, files_of):
    """Test disallowed types are rejected with the allow-list."""
    with pytest.raises(UnsupportedMediaTypeError) as exc_info:
        ingest_files(
            files_of(document=_upload('archive.zip', 'application/zip')),
            upload_settings,
        )

    message = str(exc_info.value)
    assert "'application/zip' is not allowed" in message
    assert 'image/webp' in message
    assert 'application/pdf' in message
    assert 'audio/mp4' in message
    assert _stored_files(upload_settings.root) == []


def test_ingest_rejects_large_file(upload_settings, files_of):
    """Test files over the per-file limit are rejected."""
    oversized = _upload(
        'big.pdf',
        'application/pdf',
        b'x' * (upload_settings.max_file_size + 1),
    )

    with pytest.raises(FileTooLargeError, match='Maximum size is 1MB'):
        ingest_files(files_of(document=oversized), upload_settings)


def test_ingest_rejects_too_many_files(upload_settings, files_of, jpeg_upload):
    """Test the per-request file count limit."""
    files = files_of(
        images=[jpeg_upload(), jpeg_upload(), jpeg_upload()],
        image=jpeg_upload(),
        logo=jpeg_upload(),
        avatar=jpeg_upload(),
    )

    with pytest.raises(TooManyFilesError, match='Maximum is 5 files'):
        ingest_files(files, upload_settings)

    assert _stored_files(upload_settings.root) == []


def test_ingest_rejects_unknown_field(upload_settings, files_of, jpeg_upload):
    """Test files under unrecognized fields are rejected."""
    with pytest.raises(UnexpectedFieldError, match="'resume'"):
        ingest_files(files_of(resume=jpeg_upload()), upload_settings)


def test_ingest_rejects_repeated_single_field(
    upload_settings,
    files_of,
    jpeg_upload,
):
    """Test a single-file field cannot carry two files."""
    with pytest.raises(UnexpectedFieldError, match="'image'"):
        ingest_files(
            files_of(image=[jpeg_upload(), jpeg_upload()]),
            upload_settings,
        )


def test_ingest_rejects_oversized_gallery(upload_settings, files_of, jpeg_upload):
    """Test the gallery field is limited separately."""
    gallery = [jpeg_upload() for _ in range(upload_settings.max_gallery_files + 1)]

    with pytest.raises(UnexpectedFieldError, match="'images'"):
        ingest_files(files_of(images=gallery), upload_settings)


def test_ingest_validates_whole_batch_first(
    upload_settings,
    files_of,
    jpeg_upload,
):
    """Test a bad file late in the batch leaves nothing on disk."""
    files = files_of(
        image=jpeg_upload(),
        document=_upload('notes.txt', 'text/plain'),
    )

    with pytest.raises(UnsupportedMediaTypeError):
        ingest_files(files, upload_settings)

    assert _stored_files(upload_settings.root) == []


def test_ingest_rolls_back_on_write_failure(
    upload_settings,
    files_of,
    jpeg_upload,
    monkeypatch,
):
    """Test files written before a failed write are removed."""
    original_save = UploadStorage.save
    saved_names = []

    def flaky_save(self, name, content, max_length=None):
        saved_names.append(name)
        if len(saved_names) == 2:
            raise OSError('No space left on device')
        return original_save(self, name, content, max_length)

    monkeypatch.setattr(UploadStorage, 'save', flaky_save)

    with pytest.raises(OSError, match='No space left'):
        ingest_files(
            files_of(
                image=jpeg_upload(),
                document=_upload('a.pdf', 'application/pdf'),
            ),
            upload_settings,
        )

    assert len(saved_names) == 2
    assert _stored_files(upload_settings.root) == []


def test_schedule_image_optimizations(upload_settings, files_of, jpeg_upload):
    """Test only images are scheduled for optimization."""
    result = ingest_files(
        files_of(
            image=jpeg_upload(),
            document=_upload('a.pdf', 'application/pdf'),
        ),
        upload_settings,
    )

    futures = schedule_image_optimizations(result, upload_settings)

    assert len(futures) == 1
    # Small test images stay below the optimization threshold
    assert futures[0].result(timeout=30) is False
