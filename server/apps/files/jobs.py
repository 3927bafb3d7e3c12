"""Scheduled cleanup jobs.

Each cycle runs to completion on its own; an error aborting a cycle is
logged and the next scheduled run proceeds as usual.
"""

import logging
from datetime import timedelta
from typing import Final

from apscheduler.schedulers.base import BaseScheduler
from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger
from django.conf import settings

from server.apps.accounts.logic.cleanup_operations import (
    cleanup_unverified_users,
)
from server.apps.files.logic.reclaim_operations import reclaim_orphaned_files

ORPHAN_CLEANUP_JOB_ID: Final = 'cleanup_orphaned_files'
UNVERIFIED_CLEANUP_JOB_ID: Final = 'cleanup_unverified_users'

logger = logging.getLogger(__name__)


def run_orphan_cleanup_cycle() -> None:
    """Run one orphaned file reclamation cycle."""
    try:
        reclaim_orphaned_files()
    except Exception:
        logger.exception('Critical error in orphaned file cleanup')


def run_unverified_cleanup_cycle() -> None:
    """Run one unverified account cleanup cycle."""
    max_age = timedelta(hours=settings.CLEANUP_UNVERIFIED_USERS_MAX_AGE_HOURS)
    try:
        logger.info('Starting unverified users cleanup')
        deleted = cleanup_unverified_users(max_age)
    except Exception:
        logger.exception('Error in unverified users cleanup')
        return
    logger.info(
        'Unverified users cleanup completed, deleted %d users',
        deleted,
    )


def build_scheduler(scheduler: BaseScheduler | None = None) -> BaseScheduler:
    """Register the cleanup jobs on a scheduler.

    Args:
        scheduler: Scheduler to configure (blocking scheduler by default).

    Returns:
        The configured, not yet started, scheduler.
    """
    scheduler = scheduler or BlockingScheduler(timezone=settings.TIME_ZONE)
    scheduler.add_job(
        run_orphan_cleanup_cycle,
        trigger=CronTrigger.from_crontab(
            settings.CLEANUP_ORPHANED_FILES_CRON,
            timezone=settings.TIME_ZONE,
        ),
        id=ORPHAN_CLEANUP_JOB_ID,
        name='Clean up orphaned uploaded files',
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )
    scheduler.add_job(
        run_unverified_cleanup_cycle,
        trigger=CronTrigger.from_crontab(
            settings.CLEANUP_UNVERIFIED_USERS_CRON,
            timezone=settings.TIME_ZONE,
        ),
        id=UNVERIFIED_CLEANUP_JOB_ID,
        name='Clean up unverified users',
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )
    logger.info(
        'Cleanup jobs scheduled: orphaned files (%s), unverified users (%s)',
        settings.CLEANUP_ORPHANED_FILES_CRON,
        settings.CLEANUP_UNVERIFIED_USERS_CRON,
    )
    return scheduler
