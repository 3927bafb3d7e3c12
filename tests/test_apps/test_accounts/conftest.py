"""Shared fixtures for accounts app tests."""

from datetime import timedelta

import pytest
from django.contrib.auth import get_user_model
from django.utils import timezone

User = get_user_model()


@pytest.fixture
def make_user(db):
    """Factory for users with a backdated join time.

    Returns:
        Callable(username, hours_old, **fields) -> User.
    """
    def factory(username: str, hours_old: float = 0, **fields):
        user = User.objects.create_user(
            username=username,
            password='testpass123',
            **fields,
        )
        User.objects.filter(pk=user.pk).update(
            date_joined=timezone.now() - timedelta(hours=hours_old),
        )
        user.refresh_from_db()
        return user

    return factory
