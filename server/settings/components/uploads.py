"""Upload pipeline settings.

Limits are enforced when a request is ingested. ``FILE_FIELDS`` lists,
per content model, every field that may hold an uploaded file path; the
orphan reclaimer treats files not referenced there as garbage.
"""

from typing import Any, Final

from server.apps.files.conf import MEGABYTE
from server.settings.components import config

UPLOADS: Final[dict[str, Any]] = {
    'MAX_FILE_SIZE': config(
        'UPLOAD_MAX_FILE_SIZE',
        cast=int,
        default=50 * MEGABYTE,
    ),
    'MAX_FILES': config('UPLOAD_MAX_FILES', cast=int, default=20),
    'MAX_GALLERY_FILES': config(
        'UPLOAD_MAX_GALLERY_FILES',
        cast=int,
        default=10,
    ),
    'OPTIMIZATION_THRESHOLD': config(
        'UPLOAD_OPTIMIZATION_THRESHOLD',
        cast=int,
        default=10 * MEGABYTE,
    ),
    'FILE_FIELDS': {
        'accounts.User': ['profile_image'],
        'attorneys.Attorney': ['profile_image', 'banner_image'],
        'attorneys.PracticeArea': ['image', 'images'],
    },
}

# Django parses the whole multipart body before the upload handler runs.
# Keep its own count limit above ours so the handler reports the error.
DATA_UPLOAD_MAX_NUMBER_FILES = UPLOADS['MAX_FILES'] + 1
