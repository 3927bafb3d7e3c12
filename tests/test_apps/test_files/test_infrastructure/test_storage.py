"""Tests for the upload storage backend."""

from django.core.files.base import ContentFile


def test_save_and_public_path(storage, upload_settings):
    """Test saved files map to '/uploads/...' public paths."""
    saved_name = storage.save('images/a.jpg', ContentFile(b'data'))

    assert saved_name == 'images/a.jpg'
    assert (upload_settings.root / 'images' / 'a.jpg').read_bytes() == b'data'
    assert storage.public_path(saved_name) == '/uploads/images/a.jpg'


def test_name_from_public_path(storage):
    """Test public paths map back to storage names."""
    assert storage.name_from_public_path('/uploads/docs/a.pdf') == 'docs/a.pdf'
    assert storage.name_from_public_path(
        '/uploads/images/sub/a.jpg',
    ) == 'images/sub/a.jpg'


def test_name_from_public_path_rejects_outside_paths(storage):
    """Test paths outside the upload tree are refused."""
    assert storage.name_from_public_path('/static/a.jpg') is None
    assert storage.name_from_public_path('/uploads/') is None
    assert storage.name_from_public_path('/uploads/../settings.py') is None
    assert storage.name_from_public_path(
        '/uploads/images/../../etc/passwd',
    ) is None


def test_walk_files_recurses(storage, stored_file):
    """Test nested sub-folder files are listed with forward slashes."""
    stored_file('images/a.jpg')
    stored_file('images/attorneys/b.jpg')
    stored_file('images/attorneys/deep/c.png')

    assert sorted(storage.walk_files('images')) == [
        'images/a.jpg',
        'images/attorneys/b.jpg',
        'images/attorneys/deep/c.png',
    ]


def test_rollback_upload(storage, stored_file, upload_settings):
    """Test rollback deletes the written file."""
    stored_file('docs/a.pdf')

    storage.rollback_upload('docs/a.pdf')

    assert not (upload_settings.root / 'docs' / 'a.pdf').exists()


def test_rollback_upload_swallows_errors(storage, monkeypatch):
    """Test rollback never raises."""
    def failing_delete(name):
        raise PermissionError(name)

    monkeypatch.setattr(storage, 'delete', failing_delete)

    storage.rollback_upload('docs/a.pdf')
