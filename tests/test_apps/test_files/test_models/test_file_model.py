"""Tests for File model."""

import unicodedata

import pytest
from django.core.exceptions import ValidationError
from django.db import IntegrityError

from server.apps.files.models import File

_INTERNAL = '1700000000000_0123456789abcdef.png'


def _create_file(user, **overrides) -> File:
    fields = {
        'user': user,
        'internal_name': _INTERNAL,
        'original_name': 'photo.png',
        'mime_type': 'image/png',
        'size_bytes': 100,
        'location': f'https://objects.example.com/{_INTERNAL}',
    }
    fields.update(overrides)
    return File.objects.create(**fields)


@pytest.mark.django_db
def test_file_model_str(user):
    """Test File __str__ method."""
    file_instance = _create_file(user)

    assert str(file_instance) == f'{user.username}:{_INTERNAL}'


@pytest.mark.django_db
def test_file_get_display_name_is_nfc(user):
    """Test display name is NFC-normalized on read."""
    file_instance = _create_file(
        user,
        original_name=unicodedata.normalize('NFD', 'café.png'),
    )

    assert file_instance.get_display_name() == 'café.png'


@pytest.mark.django_db
def test_file_get_display_name_falls_back_to_internal_name(user):
    """Test empty original names display as the internal name."""
    file_instance = _create_file(user, original_name='')

    assert file_instance.get_display_name() == _INTERNAL


@pytest.mark.django_db
def test_file_get_extension(user):
    """Test get_extension method extracts extension correctly."""
    file_instance = _create_file(user)

    # Should return lowercase without dot
    assert file_instance.get_extension() == 'png'


@pytest.mark.django_db
def test_file_get_storage_key(user):
    """Test storage key is the last segment of the location."""
    file_instance = _create_file(user)

    assert file_instance.get_storage_key() == _INTERNAL


@pytest.mark.django_db
@pytest.mark.parametrize(('mime_type', 'expected'), [
    ('image/png', True),
    ('video/webm', True),
    ('audio/wav', True),
    ('application/pdf', True),
    ('application/zip', False),
    ('text/html', False),
])
def test_file_is_previewable(user, mime_type, expected):
    """Test previewable MIME types."""
    file_instance = _create_file(user, mime_type=mime_type)

    assert file_instance.is_previewable() is expected


@pytest.mark.django_db
def test_file_get_content_disposition(user):
    """Test header uses the display name."""
    file_instance = _create_file(user, original_name='résumé.pdf')

    header = file_instance.get_content_disposition()

    assert header == (
        'attachment; filename="rsum.pdf"; '
        "filename*=UTF-8''r%C3%A9sum%C3%A9.pdf"
    )
    assert file_instance.get_content_disposition('inline').startswith(
        'inline; ',
    )


@pytest.mark.django_db
def test_file_internal_name_validator(user):
    """Test full_clean rejects malformed internal names."""
    file_instance = File(
        user=user,
        internal_name='../../etc/passwd',
        original_name='passwd',
        mime_type='image/png',
        size_bytes=1,
        location='https://objects.example.com/passwd',
    )

    with pytest.raises(ValidationError) as exc_info:
        file_instance.full_clean()

    assert 'internal_name' in exc_info.value.message_dict


@pytest.mark.django_db
def test_file_internal_name_unique(user, other_user):
    """Test internal names are unique across all users."""
    _create_file(user)

    with pytest.raises(IntegrityError):
        _create_file(other_user)


@pytest.mark.django_db
def test_file_size_non_negative_constraint(user):
    """Test negative sizes are rejected by the database."""
    with pytest.raises(IntegrityError):
        _create_file(user, size_bytes=-1)


@pytest.mark.django_db
def test_file_cascade_delete_with_user(user):
    """Test files are deleted when user is deleted."""
    _create_file(user)

    assert File.objects.count() == 1

    user.delete()

    # File should be cascade deleted
    assert File.objects.count() == 0
