"""Tests for form payload normalization."""

import pytest
from django.http import QueryDict

from server.apps.files.logic.payload_operations import (
    normalize_payload,
    querydict_to_payload,
)
from server.apps.files.logic.upload_operations import (
    IngestResult,
    StoredUpload,
    UploadKind,
)


def _stored(kind: UploadKind, name: str) -> StoredUpload:
    return StoredUpload(
        kind=kind,
        name=name,
        public_path=f'/uploads/{name}',
        mime_type='image/jpeg',
        size=10,
    )


def test_querydict_to_payload():
    """Test repeated keys become lists and single keys stay scalars."""
    query_dict = QueryDict('name=Tax&tags[]=a&tags[]=b&single[]=x')

    assert querydict_to_payload(query_dict) == {
        'name': 'Tax',
        'tags[]': ['a', 'b'],
        'single[]': 'x',
    }


def test_normalize_substitutes_file_paths():
    """Test stored files replace their form fields."""
    result = IngestResult()
    result.add(_stored(UploadKind.IMAGE, 'images/cover.jpg'))
    result.add(_stored(UploadKind.IMAGES, 'images/one.jpg'))
    result.add(_stored(UploadKind.IMAGES, 'images/two.jpg'))

    payload = normalize_payload({'name': 'Tax', 'image': 'ignored'}, result)

    assert payload == {
        'name': 'Tax',
        'image': '/uploads/images/cover.jpg',
        'images': ['/uploads/images/one.jpg', '/uploads/images/two.jpg'],
    }


def test_normalize_single_gallery_file_is_a_list():
    """Test a gallery with one file still yields a list."""
    result = IngestResult()
    result.add(_stored(UploadKind.IMAGES, 'images/only.jpg'))

    assert normalize_payload({}, result) == {
        'images': ['/uploads/images/only.jpg'],
    }


@pytest.mark.parametrize(('raw', 'expected'), [
    ('true', True),
    ('false', False),
    ('1', False),
    ('TRUE', False),
    ('', False),
    (True, True),
])
def test_normalize_booleans(raw, expected):
    """Test only 'true' (or a real True) becomes True."""
    assert normalize_payload({'isFeatured': raw})['isFeatured'] is expected


def test_normalize_numbers():
    """Test numeric fields are parsed and invalid ones dropped."""
    payload = normalize_payload({
        'latitude': '52.23',
        'price': '10',
        'longitude': 'east',
        'duration': '',
        'fileSize': 'inf',
    })

    assert payload == {'latitude': 52.23, 'price': 10.0}


def test_normalize_json_fields():
    """Test JSON fields are parsed and malformed ones dropped."""
    payload = normalize_payload({
        'socialLinks': '{"x": "https://x.com/a"}',
        'offlineData': '{broken',
    })

    assert payload == {'socialLinks': {'x': 'https://x.com/a'}}


def test_normalize_keeps_empty_json_field():
    """Test empty JSON strings are left alone."""
    assert normalize_payload({'socialLinks': ''}) == {'socialLinks': ''}


def test_normalize_array_fields():
    """Test 'name[]' keys become 'name' lists."""
    payload = normalize_payload({
        'practiceAreas[]': ['1', '2'],
        'tags[]': 'solo',
    })

    assert payload == {'practiceAreas': ['1', '2'], 'tags': ['solo']}


def test_normalize_leaves_other_fields_and_input_untouched():
    """Test unknown fields pass through and the input is not modified."""
    original = {'bio': 'true', 'isFeatured': 'true'}

    payload = normalize_payload(original)

    assert payload == {'bio': 'true', 'isFeatured': True}
    assert original == {'bio': 'true', 'isFeatured': 'true'}


def test_normalize_is_idempotent():
    """Test normalizing twice gives the same payload."""
    once = normalize_payload({
        'isFeatured': 'true',
        'price': '3.5',
        'socialLinks': '{"a": 1}',
        'tags[]': 'x',
    })

    assert normalize_payload(once) == once


def test_normalize_drops_too_deeply_nested_json():
    """Test JSON nested past the decoder's depth limit is dropped."""
    payload = normalize_payload({
        'fullName': 'Jane',
        'socialLinks': '[' * 200000,
    })

    assert payload == {'fullName': 'Jane'}
