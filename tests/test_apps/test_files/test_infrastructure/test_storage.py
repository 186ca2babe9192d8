"""Tests for the S3 storage backend."""

import pytest
from django.core.files.storage import default_storage

from server.apps.files.exceptions import StorageError
from server.apps.files.infrastructure.storage import (
    FileStorage,
    key_from_location,
    rollback_upload,
)

_BUCKET = 'file-vault'
_KEY = '1700000000000_0123456789abcdef.png'


def test_put_stores_object_and_returns_url(mock_s3):
    """Test put uploads bytes with content type and returns its URL."""
    location = default_storage.put(
        b'image bytes',
        'image/png',
        _KEY,
        content_disposition='inline; filename="a.png"',
    )

    stored = mock_s3.Object(_BUCKET, _KEY).get()
    assert stored['Body'].read() == b'image bytes'
    assert stored['ContentType'] == 'image/png'
    assert stored['ContentDisposition'] == 'inline; filename="a.png"'
    assert location.startswith('https://')
    assert '?' not in location  # No signing parameters
    assert key_from_location(location) == _KEY


def test_put_missing_bucket_raises_storage_error(mock_s3):
    """Test transport/service failures surface as StorageError."""
    storage = FileStorage(bucket_name='missing-bucket', region_name='us-east-1')

    with pytest.raises(StorageError):
        storage.put(b'data', 'image/png', _KEY)


def test_delete_removes_object(mock_s3):
    """Test delete removes the object from the bucket."""
    default_storage.put(b'data', 'image/png', _KEY)

    default_storage.delete(_KEY)

    keys = [obj.key for obj in mock_s3.Bucket(_BUCKET).objects.all()]
    assert _KEY not in keys


def test_delete_missing_key_is_idempotent(mock_s3):
    """Test deleting a non-existent key is not an error."""
    default_storage.delete('1700000000000_ffffffffffffffff.png')


def test_list_objects(mock_s3):
    """Test listing yields every key with its modification time."""
    default_storage.put(b'one', 'image/png', 'one.png')
    default_storage.put(b'two', 'image/png', 'two.png')

    listed = dict(default_storage.list_objects())

    assert set(listed) == {'one.png', 'two.png'}
    assert all(modified is not None for modified in listed.values())


@pytest.mark.parametrize(('location', 'expected'), [
    ('https://file-vault.s3.amazonaws.com/1700_ab.png', '1700_ab.png'),
    ('http://localhost:9000/file-vault/1700_ab.png', '1700_ab.png'),
    ('https://cdn.example.com/a/b/c%20d.png', 'c d.png'),
    ('https://file-vault.s3.amazonaws.com/1700_ab.png?x=1', '1700_ab.png'),
])
def test_key_from_location(location, expected):
    """Test the key is the last path segment of the location."""
    assert key_from_location(location) == expected


def test_rollback_upload_deletes_object(fake_storage):
    """Test rollback deletes the uploaded object."""
    fake_storage.put(b'data', 'image/png', _KEY)

    rollback_upload(fake_storage, _KEY)

    assert _KEY not in fake_storage.objects


def test_rollback_upload_swallows_storage_error(fake_storage):
    """Test rollback is best-effort and never raises."""
    fake_storage.fail_delete = True

    rollback_upload(fake_storage, _KEY)

    assert fake_storage.calls == [('delete', _KEY)]
