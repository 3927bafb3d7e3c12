"""Shared fixtures for attorneys app tests."""

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from server.apps.files.infrastructure import images
from server.apps.files.logic import upload_operations


@pytest.fixture
def image_upload(image_bytes):
    """Factory for uploaded images.

    Returns:
        Callable(name, content_type) -> SimpleUploadedFile.
    """
    def factory(
        name: str = 'photo.jpg',
        content_type: str = 'image/jpeg',
    ) -> SimpleUploadedFile:
        image_format = 'PNG' if content_type == 'image/png' else 'JPEG'
        return SimpleUploadedFile(
            name,
            image_bytes(image_format=image_format),
            content_type=content_type,
        )

    return factory


@pytest.fixture
def wait_for_optimizations(monkeypatch):
    """Record background image optimizations started during the test.

    Returns:
        Callable() blocking until every recorded optimization is done
        and returning their outcomes in scheduling order.
    """
    futures = []

    def recording_schedule(path, upload_settings):
        future = images.schedule_optimization(path, upload_settings)
        futures.append(future)
        return future

    monkeypatch.setattr(
        upload_operations,
        'schedule_optimization',
        recording_schedule,
    )

    def waiter() -> list[bool]:
        return [future.result(timeout=60) for future in futures]

    return waiter
