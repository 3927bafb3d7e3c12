"""Database models for attorneys app.

Image fields hold public paths produced by the upload pipeline and
are registered in ``UPLOADS['FILE_FIELDS']``.
"""

from typing import Final, final, override

from django.db import models

_NAME_MAX_LENGTH: Final = 200
_UPLOAD_PATH_MAX_LENGTH: Final = 500


@final
class PracticeArea(models.Model):
    """Area of law, shown with a cover image and a gallery."""

    name = models.CharField(max_length=_NAME_MAX_LENGTH, unique=True)

    description = models.TextField(blank=True, default='')

    image = models.CharField(
        max_length=_UPLOAD_PATH_MAX_LENGTH,
        blank=True,
        default='',
        help_text='Public path of cover image',
    )

    images = models.JSONField(
        default=list,
        blank=True,
        help_text='Public paths of gallery images, in upload order',
    )

    is_featured = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Practice Area'  # type: ignore[mutable-override]
        verbose_name_plural = 'Practice Areas'  # type: ignore[mutable-override]
        ordering = ['name']

    @override
    def __str__(self) -> str:
        """String representation."""
        return self.name


@final
class Attorney(models.Model):
    """Attorney profile with profile and banner images."""

    full_name = models.CharField(max_length=_NAME_MAX_LENGTH)

    bio = models.TextField(blank=True, default='')

    profile_image = models.CharField(
        max_length=_UPLOAD_PATH_MAX_LENGTH,
        blank=True,
        default='',
    )

    banner_image = models.CharField(
        max_length=_UPLOAD_PATH_MAX_LENGTH,
        blank=True,
        default='',
    )

    social_links = models.JSONField(default=dict, blank=True)

    practice_areas = models.ManyToManyField(
        PracticeArea,
        related_name='attorneys',
        blank=True,
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Attorney'  # type: ignore[mutable-override]
        verbose_name_plural = 'Attorneys'  # type: ignore[mutable-override]
        ordering = ['full_name']

    @override
    def __str__(self) -> str:
        """String representation."""
        return self.full_name
