"""Business logic for normalizing multipart form payloads.

Multipart bodies carry every value as a string. Before a view sees
the payload, uploaded files are replaced by their public paths and
well-known fields are coerced to their semantic types.
"""

import json
import logging
import math
from typing import Any, Final

from django.http import QueryDict

from server.apps.files.logic.upload_operations import IngestResult

BOOLEAN_FIELDS: Final = (
    'isFeatured',
    'offlineSupported',
    'verified',
    'isSubscribed',
)
NUMBER_FIELDS: Final = (
    'latitude',
    'longitude',
    'price',
    'totalEvent',
    'fileSize',
    'duration',
)
JSON_FIELDS: Final = ('socialLinks', 'offlineData')

_ARRAY_SUFFIX: Final = '[]'

logger = logging.getLogger(__name__)


def querydict_to_payload(query_dict: QueryDict) -> dict[str, Any]:
    """Convert ``request.POST`` into a plain dict.

    Repeated keys become lists, everything else stays a scalar.

    Args:
        query_dict: Parsed form fields.

    Returns:
        Mutable payload dict.
    """
    return {
        key: values if len(values) > 1 else values[0]
        for key, values in query_dict.lists()
    }


def _substitute_file_paths(
    payload: dict[str, Any],
    result: IngestResult,
) -> None:
    for kind, uploads in result.files.items():
        if kind.is_multiple:
            payload[kind.field_name] = [
                upload.public_path for upload in uploads
            ]
        else:
            payload[kind.field_name] = uploads[0].public_path


def _parse_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _coerce_scalars(payload: dict[str, Any]) -> None:
    for boolean_field in BOOLEAN_FIELDS:
        if boolean_field in payload:
            value = payload[boolean_field]
            payload[boolean_field] = value is True or value == 'true'

    for number_field in NUMBER_FIELDS:
        if number_field in payload:
            number = _parse_number(payload.pop(number_field))
            if number is not None:
                payload[number_field] = number

    for json_field in JSON_FIELDS:
        value = payload.get(json_field)
        if value and isinstance(value, str):
            try:
                payload[json_field] = json.loads(value)
            except (ValueError, RecursionError):
                logger.warning(
                    'Failed to parse %s as JSON, dropping field',
                    json_field,
                )
                del payload[json_field]  # noqa: WPS420


def _rename_array_fields(payload: dict[str, Any]) -> None:
    # Snapshot keys: renamed keys must not be visited again
    for key in list(payload):
        if key.endswith(_ARRAY_SUFFIX):
            value = payload.pop(key)
            new_key = key.removesuffix(_ARRAY_SUFFIX)
            payload[new_key] = value if isinstance(value, list) else [value]


def normalize_payload(
    payload: dict[str, Any],
    result: IngestResult | None = None,
) -> dict[str, Any]:
    """Rewrite a form payload into the values business logic expects.

    Steps run in a fixed order: file path substitution, then scalar
    and JSON coercion, then ``name[]`` renaming.

    Args:
        payload: Form fields (see :func:`querydict_to_payload`).
        result: Files stored for the request, if any.

    Returns:
        New normalized payload; the input is not modified.
    """
    normalized = dict(payload)
    if result is not None:
        _substitute_file_paths(normalized, result)
    _coerce_scalars(normalized)
    _rename_array_fields(normalized)
    return normalized
