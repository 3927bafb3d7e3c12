"""Upload pipeline configuration."""

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Final, Self, final

from django.conf import settings

MEGABYTE: Final = 1024 * 1024

_DEFAULT_FILE_FIELDS: Final[dict[str, tuple[str, ...]]] = {
    'accounts.User': ('profile_image',),
    'attorneys.Attorney': ('profile_image', 'banner_image'),
    'attorneys.PracticeArea': ('image', 'images'),
}


@final
@dataclass(frozen=True, slots=True)
class UploadSettings:
    """Static limits and layout of the upload directory tree.

    Built once from Django settings and handed to each pipeline
    component, so tests can point the pipeline at a temporary root
    with tightened limits.
    """

    root: Path
    url_prefix: str = '/uploads/'
    max_file_size: int = 50 * MEGABYTE
    max_files: int = 20
    max_gallery_files: int = 10
    optimization_threshold: int = 10 * MEGABYTE
    optimized_max_size: tuple[int, int] = (1920, 1080)
    optimized_quality: int = 85
    file_fields: MappingProxyType[str, tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType(_DEFAULT_FILE_FIELDS),
    )

    @classmethod
    def from_django(cls) -> Self:
        """Build settings from ``MEDIA_ROOT``, ``MEDIA_URL`` and ``UPLOADS``.

        Returns:
            UploadSettings for the running project.
        """
        uploads: dict[str, Any] = getattr(settings, 'UPLOADS', {})
        file_fields = uploads.get('FILE_FIELDS', _DEFAULT_FILE_FIELDS)
        return cls(
            root=Path(settings.MEDIA_ROOT),
            url_prefix=settings.MEDIA_URL,
            max_file_size=uploads.get('MAX_FILE_SIZE', 50 * MEGABYTE),
            max_files=uploads.get('MAX_FILES', 20),
            max_gallery_files=uploads.get('MAX_GALLERY_FILES', 10),
            optimization_threshold=uploads.get(
                'OPTIMIZATION_THRESHOLD',
                10 * MEGABYTE,
            ),
            file_fields=MappingProxyType({
                label: tuple(fields) for label, fields in file_fields.items()
            }),
        )
