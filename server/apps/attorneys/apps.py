"""Django app configuration for attorneys app."""

from django.apps import AppConfig


class AttorneysConfig(AppConfig):
    """Configuration for attorneys app."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'server.apps.attorneys'
    verbose_name = 'Attorneys'
