"""View decorator mounting the upload pipeline in front of a view."""

import logging
from collections.abc import Callable
from functools import wraps
from http import HTTPStatus
from typing import Any

from django.core.exceptions import TooManyFilesSent
from django.http import HttpRequest, HttpResponse, JsonResponse

from server.apps.files.conf import UploadSettings
from server.apps.files.exceptions import TooManyFilesError, UploadError
from server.apps.files.infrastructure.storage import UploadStorage
from server.apps.files.logic.payload_operations import (
    normalize_payload,
    querydict_to_payload,
)
from server.apps.files.logic.upload_operations import (
    IngestResult,
    ingest_files,
    schedule_image_optimizations,
)

logger = logging.getLogger(__name__)

_View = Callable[..., HttpResponse]


def _error_response(message: str, status: int) -> JsonResponse:
    return JsonResponse({'success': False, 'message': message}, status=status)


def _rollback(result: IngestResult, upload_settings: UploadSettings) -> None:
    storage = UploadStorage(upload_settings)
    for stored in result:
        storage.rollback_upload(stored.name)


def file_upload_handler(
    subfolder: str | None = None,
) -> Callable[[_View], _View]:
    """Store uploaded files and normalize the form body before a view.

    On success the view receives ``request.upload_payload`` (form
    fields with file paths substituted and values coerced) and
    ``request.uploaded_files``. Rejected uploads short-circuit with a
    ``{'success': false, 'message': ...}`` JSON body. Any other failure
    removes the files stored for the request and answers with a 500
    JSON body.

    Args:
        subfolder: Optional sub-folder for files in the images bucket.

    Returns:
        Decorator for a Django view.
    """
    def decorator(view: _View) -> _View:
        @wraps(view)
        def wrapper(
            request: HttpRequest,
            *args: Any,
            **kwargs: Any,
        ) -> HttpResponse:
            upload_settings = UploadSettings.from_django()
            result = IngestResult()
            try:
                files = request.FILES
                result = ingest_files(files, upload_settings, subfolder)
                request.upload_payload = normalize_payload(
                    querydict_to_payload(request.POST),
                    result,
                )
                schedule_image_optimizations(result, upload_settings)
            except TooManyFilesSent:
                error = TooManyFilesError(upload_settings.max_files)
                logger.warning('Upload rejected: %s', error)
                return _error_response(str(error), error.status_code)
            except UploadError as exc:
                logger.warning('Upload rejected: %s', exc)
                return _error_response(str(exc), exc.status_code)
            except Exception:
                logger.exception('File processing error')
                _rollback(result, upload_settings)
                return _error_response(
                    'File processing failed',
                    HTTPStatus.INTERNAL_SERVER_ERROR,
                )

            request.uploaded_files = result

            logger.info('File upload completed successfully')
            return view(request, *args, **kwargs)

        return wrapper

    return decorator
