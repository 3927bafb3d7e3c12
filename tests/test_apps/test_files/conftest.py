"""Shared fixtures for files app tests."""

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.utils.datastructures import MultiValueDict


@pytest.fixture
def jpeg_upload(image_bytes):
    """Factory for uploaded JPEG files.

    Returns:
        Callable(name) -> SimpleUploadedFile with image/jpeg content type.
    """
    def factory(name: str = 'photo.jpg') -> SimpleUploadedFile:
        return SimpleUploadedFile(
            name,
            image_bytes(),
            content_type='image/jpeg',
        )

    return factory


@pytest.fixture
def files_of():
    """Build a ``request.FILES``-like mapping.

    Returns:
        Callable(**fields) -> MultiValueDict of field name to file list.
    """
    def factory(**fields) -> MultiValueDict:
        return MultiValueDict({
            field_name: files if isinstance(files, list) else [files]
            for field_name, files in fields.items()
        })

    return factory
