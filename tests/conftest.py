"""Shared fixtures for all tests."""

import os
from collections.abc import Callable
from io import BytesIO

import pytest
from PIL import Image

from server.apps.files.conf import UploadSettings
from server.apps.files.infrastructure.storage import UploadStorage

_KILOBYTE = 1024


@pytest.fixture
def upload_settings(settings, tmp_path) -> UploadSettings:
    """Point the upload pipeline at a temporary root with small limits.

    Returns:
        UploadSettings built from the overridden Django settings.
    """
    settings.MEDIA_ROOT = str(tmp_path / 'uploads')
    settings.MEDIA_URL = '/uploads/'
    settings.UPLOADS = {
        'MAX_FILE_SIZE': 1024 * _KILOBYTE,
        'MAX_FILES': 5,
        'MAX_GALLERY_FILES': 3,
        'OPTIMIZATION_THRESHOLD': 10 * 1024 * _KILOBYTE,
        'FILE_FIELDS': {
            'accounts.User': ['profile_image'],
            'attorneys.Attorney': ['profile_image', 'banner_image'],
            'attorneys.PracticeArea': ['image', 'images'],
        },
    }
    return UploadSettings.from_django()


@pytest.fixture
def storage(upload_settings) -> UploadStorage:
    """Storage rooted at the temporary upload directory.

    Returns:
        UploadStorage instance.
    """
    return UploadStorage(upload_settings)


@pytest.fixture
def image_bytes() -> Callable[..., bytes]:
    """Factory for encoded test images.

    Noisy images compress poorly, which makes them large on disk.

    Returns:
        Callable(size, image_format, noise) -> encoded bytes.
    """
    def factory(
        size: tuple[int, int] = (64, 48),
        image_format: str = 'JPEG',
        noise: bool = False,
    ) -> bytes:
        if noise:
            width, height = size
            image = Image.frombytes('RGB', size, os.urandom(width * height * 3))
        else:
            image = Image.new('RGB', size, color=(200, 30, 30))
        buffer = BytesIO()
        image.save(buffer, format=image_format, quality=95)
        return buffer.getvalue()

    return factory


@pytest.fixture
def stored_file(upload_settings) -> Callable[[str, bytes], str]:
    """Factory writing a file straight into the upload tree.

    Returns:
        Callable(storage name, content) -> public path.
    """
    def factory(storage_name: str, content: bytes = b'content') -> str:
        path = upload_settings.root / storage_name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return f'{upload_settings.url_prefix}{storage_name}'

    return factory
