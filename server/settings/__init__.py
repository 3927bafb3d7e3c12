"""Main settings file.

Settings are split into components under ``server/settings/components``
and composed here with ``django-split-settings``. Values that change
between environments are read with ``python-decouple``.
"""

from split_settings.tools import include

include(
    'components/common.py',
    'components/logging.py',
    'components/uploads.py',
    'components/jobs.py',
)
