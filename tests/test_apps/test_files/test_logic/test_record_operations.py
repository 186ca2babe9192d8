"""Tests for file record persistence."""

import pytest

from server.apps.files.exceptions import PersistenceError
from server.apps.files.logic.record_operations import (
    create_record,
    delete_by_id,
    find_by_id,
    find_by_internal_name,
)
from server.apps.files.models import File

_INTERNAL = '1700000000000_0123456789abcdef.png'


def _fields(user, **overrides):
    fields = {
        'user': user,
        'internal_name': _INTERNAL,
        'original_name': 'photo.png',
        'mime_type': 'image/png',
        'size_bytes': 10,
        'location': f'https://objects.example.com/{_INTERNAL}',
    }
    fields.update(overrides)
    return fields


@pytest.mark.django_db
def test_create_record(user):
    """Test record is saved with every field."""
    file_instance = create_record(**_fields(user))

    saved = File.objects.get(id=file_instance.id)
    assert saved.internal_name == _INTERNAL
    assert saved.uploaded_at is not None


@pytest.mark.django_db
def test_create_record_duplicate_internal_name(user, other_user):
    """Test duplicate internal names raise PersistenceError."""
    create_record(**_fields(user))

    with pytest.raises(PersistenceError):
        create_record(**_fields(other_user))

    assert File.objects.count() == 1


@pytest.mark.django_db
def test_create_record_invalid_internal_name(user):
    """Test names not matching the pattern are rejected."""
    with pytest.raises(PersistenceError):
        create_record(**_fields(user, internal_name='photo.png'))

    assert not File.objects.exists()


@pytest.mark.django_db
def test_create_record_invalid_location(user):
    """Test non-URL locations are rejected."""
    with pytest.raises(PersistenceError):
        create_record(**_fields(user, location='not a url'))


@pytest.mark.django_db
def test_find_by_internal_name(user):
    """Test lookup by internal name."""
    file_instance = create_record(**_fields(user))

    assert find_by_internal_name(_INTERNAL) == file_instance
    assert find_by_internal_name('1_0000000000000000.png') is None


@pytest.mark.django_db
def test_find_by_id(user):
    """Test lookup by primary key."""
    file_instance = create_record(**_fields(user))

    assert find_by_id(file_instance.id) == file_instance
    assert find_by_id(file_instance.id + 1) is None


@pytest.mark.django_db
def test_delete_by_id_idempotent(user):
    """Test deleting a missing record is not an error."""
    file_instance = create_record(**_fields(user))

    assert delete_by_id(file_instance.id) is True
    assert delete_by_id(file_instance.id) is False
    assert not File.objects.exists()
