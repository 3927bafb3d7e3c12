"""Business logic for removing accounts that were never verified."""

import logging
from datetime import timedelta

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from server.apps.files.logic.file_operations import delete_uploaded_file

User = get_user_model()
logger = logging.getLogger(__name__)


def get_stale_unverified_users(max_age: timedelta) -> QuerySet[User]:
    """Unverified, non-superuser accounts older than ``max_age``.

    Args:
        max_age: Minimum account age.

    Returns:
        QuerySet of users, oldest first.
    """
    cutoff = timezone.now() - max_age
    return User.objects.filter(
        verified=False,
        is_superuser=False,
        date_joined__lte=cutoff,
    ).order_by('date_joined')


def cleanup_unverified_users(
    max_age: timedelta = timedelta(hours=24),
    *,
    dry_run: bool = False,
) -> int:
    """Delete stale unverified accounts and their profile images.

    Each account's profile image is deleted before the account. A
    failure on one account is logged and the rest are still processed.

    Args:
        max_age: Minimum account age (default 24 hours).
        dry_run: Only count the accounts that would be deleted.

    Returns:
        Number of deleted (or, in dry run, deletable) accounts.
    """
    stale_users = get_stale_unverified_users(max_age)
    if dry_run:
        return stale_users.count()

    deleted = 0
    for user in list(stale_users):
        user_id = user.pk
        try:
            if user.profile_image:
                delete_uploaded_file(user.profile_image)
            with transaction.atomic():
                user.delete()
        except Exception:
            logger.exception('Failed to delete unverified user: ID=%d', user_id)
            continue

        deleted += 1
        logger.info('Deleted unverified user: ID=%d', user_id)
    return deleted
