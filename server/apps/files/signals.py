"""Signal handlers for files app.

Models listed in ``UPLOADS['FILE_FIELDS']`` hold public paths of
uploaded files. When such a record drops a path (field replaced or
record deleted) the file is removed once the transaction commits.
"""

import logging
from functools import partial
from typing import Any

from django.db import transaction
from django.db.models import Model
from django.db.models.signals import post_delete, post_save, pre_save
from django.dispatch import receiver

from server.apps.files.conf import UploadSettings
from server.apps.files.logic.file_operations import delete_uploaded_files

logger = logging.getLogger(__name__)

_STALE_PATHS_ATTR = '_stale_upload_paths'


def _registered_fields(sender: type[Model]) -> tuple[str, ...]:
    file_fields = UploadSettings.from_django().file_fields
    return file_fields.get(sender._meta.label, ())  # noqa: SLF001


def _paths_of(values: Any) -> set[str]:
    if isinstance(values, str):
        return {values} if values else set()
    if isinstance(values, list):
        return {value for value in values if value and isinstance(value, str)}
    return set()


def _collect_paths(record: dict[str, Any], fields: tuple[str, ...]) -> set[str]:
    paths: set[str] = set()
    for field_name in fields:
        paths |= _paths_of(record.get(field_name))
    return paths


@receiver(pre_save)
def remember_superseded_files(
    sender: type[Model],
    instance: Model,
    raw: bool = False,
    **kwargs: object,
) -> None:
    """Record paths a registered record is about to drop.

    Args:
        sender: Model class being saved.
        instance: Instance being saved.
        raw: True when loading fixtures.
        **kwargs: Additional signal arguments.
    """
    fields = _registered_fields(sender)
    if raw or not fields or instance._state.adding:  # noqa: SLF001
        return

    stored = sender._default_manager.filter(  # noqa: SLF001
        pk=instance.pk,
    ).values(*fields).first()
    if stored is None:
        return

    current = {
        field_name: getattr(instance, field_name) for field_name in fields
    }
    stale = _collect_paths(stored, fields) - _collect_paths(current, fields)
    setattr(instance, _STALE_PATHS_ATTR, stale)


@receiver(post_save)
def delete_superseded_files(
    sender: type[Model],
    instance: Model,
    **kwargs: object,
) -> None:
    """Delete files dropped by a save once the transaction commits.

    Args:
        sender: Model class that was saved.
        instance: Saved instance.
        **kwargs: Additional signal arguments.
    """
    stale = getattr(instance, _STALE_PATHS_ATTR, None)
    if not stale:
        return
    delattr(instance, _STALE_PATHS_ATTR)

    logger.info(
        'Deleting %d superseded files of %s (ID: %s)',
        len(stale),
        sender._meta.label,  # noqa: SLF001
        instance.pk,
    )
    transaction.on_commit(partial(delete_uploaded_files, sorted(stale)))


@receiver(post_delete)
def delete_files_of_deleted_record(
    sender: type[Model],
    instance: Model,
    **kwargs: object,
) -> None:
    """Delete files of a registered record after it is deleted.

    Args:
        sender: Model class of the deleted record.
        instance: Deleted instance.
        **kwargs: Additional signal arguments.
    """
    fields = _registered_fields(sender)
    if not fields:
        return

    record = {
        field_name: getattr(instance, field_name) for field_name in fields
    }
    paths = _collect_paths(record, fields)
    if paths:
        transaction.on_commit(partial(delete_uploaded_files, sorted(paths)))
