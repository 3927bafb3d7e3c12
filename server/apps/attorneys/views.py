"""HTTP views for attorneys and practice areas."""

import logging
from http import HTTPStatus
from typing import Any

from django.db import IntegrityError, transaction
from django.http import HttpRequest, JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from server.apps.attorneys.models import Attorney, PracticeArea
from server.apps.files.decorators import file_upload_handler
from server.apps.files.logic.file_operations import delete_uploaded_files

logger = logging.getLogger(__name__)


def _send_response(
    status: int,
    message: str,
    data: dict[str, Any] | None = None,
) -> JsonResponse:
    body: dict[str, Any] = {
        'success': status < HTTPStatus.BAD_REQUEST,
        'message': message,
    }
    if data is not None:
        body['data'] = data
    return JsonResponse(body, status=status)


def _reject(request: HttpRequest, message: str) -> JsonResponse:
    # Files of a rejected submission are never referenced by a record
    delete_uploaded_files(
        stored.public_path for stored in request.uploaded_files
    )
    return _send_response(HTTPStatus.BAD_REQUEST, message)


def _practice_area_data(practice_area: PracticeArea) -> dict[str, Any]:
    return {
        'id': practice_area.pk,
        'name': practice_area.name,
        'description': practice_area.description,
        'image': practice_area.image,
        'images': practice_area.images,
        'isFeatured': practice_area.is_featured,
    }


def _attorney_data(attorney: Attorney) -> dict[str, Any]:
    return {
        'id': attorney.pk,
        'fullName': attorney.full_name,
        'bio': attorney.bio,
        'profileImage': attorney.profile_image,
        'bannerImage': attorney.banner_image,
        'socialLinks': attorney.social_links,
        'practiceAreas': list(
            attorney.practice_areas.values_list('pk', flat=True),
        ),
    }


@csrf_exempt
@require_POST
@file_upload_handler()
def create_practice_area(request: HttpRequest) -> JsonResponse:
    """Create a practice area with an optional cover image and gallery."""
    payload = request.upload_payload
    name = payload.get('name')
    if not name or not isinstance(name, str):
        return _reject(request, 'Practice area name is required')

    try:
        with transaction.atomic():
            practice_area = PracticeArea.objects.create(
                name=name,
                description=payload.get('description', ''),
                image=payload.get('image', ''),
                images=payload.get('images', []),
                is_featured=payload.get('isFeatured', False),
            )
    except IntegrityError:
        return _reject(request, 'A practice area with this name already exists')

    logger.info('Practice area created: %s (ID: %d)', name, practice_area.pk)
    return _send_response(
        HTTPStatus.CREATED,
        'Practice area created successfully',
        _practice_area_data(practice_area),
    )


@csrf_exempt
@require_POST
@file_upload_handler(subfolder='attorneys')
def create_attorney(request: HttpRequest) -> JsonResponse:
    """Create an attorney profile with optional profile and banner images."""
    payload = request.upload_payload
    full_name = payload.get('fullName')
    if not full_name or not isinstance(full_name, str):
        return _reject(request, 'Attorney full name is required')

    social_links = payload.get('socialLinks', {})
    if not isinstance(social_links, dict):
        return _reject(request, 'socialLinks must be a JSON object')

    attorney = Attorney.objects.create(
        full_name=full_name,
        bio=payload.get('bio', ''),
        profile_image=payload.get('profileImage', ''),
        banner_image=payload.get('bannerImage', ''),
        social_links=social_links,
    )
    practice_area_ids = payload.get('practiceAreas', [])
    if practice_area_ids:
        attorney.practice_areas.set(
            PracticeArea.objects.filter(pk__in=practice_area_ids),
        )

    logger.info('Attorney created: %s (ID: %d)', full_name, attorney.pk)
    return _send_response(
        HTTPStatus.CREATED,
        'Attorney created successfully',
        _attorney_data(attorney),
    )


@csrf_exempt
@require_POST
@file_upload_handler(subfolder='attorneys')
def update_attorney_images(request: HttpRequest, pk: int) -> JsonResponse:
    """Replace an attorney's profile and/or banner image.

    Replaced files are removed once the update commits.
    """
    attorney = get_object_or_404(Attorney, pk=pk)
    payload = request.upload_payload

    update_fields = []
    if 'profileImage' in payload:
        attorney.profile_image = payload['profileImage']
        update_fields.append('profile_image')
    if 'bannerImage' in payload:
        attorney.banner_image = payload['bannerImage']
        update_fields.append('banner_image')
    if not update_fields:
        return _reject(request, 'No image was uploaded')

    attorney.save(update_fields=update_fields)
    return _send_response(
        HTTPStatus.OK,
        'Attorney images updated successfully',
        _attorney_data(attorney),
    )
