"""Database models for accounts app."""

from typing import Final, final, override

from django.contrib.auth.models import AbstractUser
from django.db import models

_UPLOAD_PATH_MAX_LENGTH: Final = 500


@final
class User(AbstractUser):
    """Account of the service.

    New accounts start unverified; accounts that stay unverified past
    the configured age are removed by the cleanup job together with
    their profile image.
    """

    profile_image = models.CharField(
        max_length=_UPLOAD_PATH_MAX_LENGTH,
        blank=True,
        default='',
        help_text='Public path of uploaded image: /uploads/images/...',
    )

    verified = models.BooleanField(
        default=False,
        db_index=True,
        help_text='Whether the email address has been verified',
    )

    class Meta(AbstractUser.Meta):
        """Model metadata."""

        swappable = 'AUTH_USER_MODEL'
        verbose_name = 'User'  # type: ignore[mutable-override]
        verbose_name_plural = 'Users'  # type: ignore[mutable-override]

    @override
    def __str__(self) -> str:
        """String representation."""
        return self.email or self.username
