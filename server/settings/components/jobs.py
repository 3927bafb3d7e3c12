"""Scheduled cleanup job settings (crontab expressions)."""

from server.settings.components import config

# Orphaned upload reclamation: daily at 03:00
CLEANUP_ORPHANED_FILES_CRON = config(
    'CLEANUP_ORPHANED_FILES_CRON',
    default='0 3 * * *',
)

# Unverified account removal: every 6 hours
CLEANUP_UNVERIFIED_USERS_CRON = config(
    'CLEANUP_UNVERIFIED_USERS_CRON',
    default='0 */6 * * *',
)
CLEANUP_UNVERIFIED_USERS_MAX_AGE_HOURS = config(
    'CLEANUP_UNVERIFIED_USERS_MAX_AGE_HOURS',
    cast=int,
    default=24,
)
