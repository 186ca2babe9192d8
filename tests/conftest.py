"""Shared fixtures for all tests."""

from collections.abc import Callable

import boto3
import pytest
from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile
from moto import mock_aws

from server.apps.files.exceptions import StorageError
from server.apps.files.logic.upload_validation import StagedUpload

User = get_user_model()

TEST_BUCKET = 'file-vault'
PNG_BYTES = b'\x89PNG\r\n\x1a\n' + b'\x00' * 32


class InMemoryObjectStore:
    """Object store fake recording every call.

    Set ``fail_put`` / ``fail_delete`` to make the next calls raise
    StorageError like the S3 backend does, or add keys to
    ``fail_delete_keys`` to fail deletes of those objects only.
    """

    base_url = 'https://objects.example.com/'

    def __init__(self) -> None:
        self.objects: dict[str, dict[str, object]] = {}
        self.calls: list[tuple[str, str]] = []
        self.fail_put = False
        self.fail_delete = False
        self.fail_delete_keys: set[str] = set()

    def put(
        self,
        content: bytes,
        content_type: str,
        key_hint: str,
        content_disposition: str | None = None,
    ) -> str:
        self.calls.append(('put', key_hint))
        if self.fail_put:
            raise StorageError('Failed to upload file to storage')
        self.objects[key_hint] = {
            'content': content,
            'content_type': content_type,
            'content_disposition': content_disposition,
        }
        return f'{self.base_url}{key_hint}'

    def delete(self, name: str) -> None:
        self.calls.append(('delete', name))
        if self.fail_delete or name in self.fail_delete_keys:
            raise StorageError('Failed to delete file from storage')
        self.objects.pop(name, None)


@pytest.fixture
def user(db):
    """Create test user.

    Returns:
        User instance for testing.
    """
    return User.objects.create_user(
        username='testuser',
        password='testpass123',
        email='test@example.com',
    )


@pytest.fixture
def other_user(db):
    """Create second test user for ownership tests.

    Returns:
        Second user instance.
    """
    return User.objects.create_user(
        username='otheruser',
        password='testpass123',
        email='other@example.com',
    )


@pytest.fixture
def mock_s3():
    """Mock S3 service with file-vault bucket.

    Yields:
        boto3 S3 resource with file-vault bucket created.
    """
    with mock_aws():
        conn = boto3.resource('s3', region_name='us-east-1')
        conn.create_bucket(Bucket=TEST_BUCKET)
        yield conn


@pytest.fixture
def fake_storage() -> InMemoryObjectStore:
    """In-memory object store for failure injection."""
    return InMemoryObjectStore()


@pytest.fixture
def make_staged() -> Callable[..., StagedUpload]:
    """Factory for validated uploads.

    Returns:
        Function building a StagedUpload.
    """
    def factory(
        original_name: str = 'photo.png',
        content_type: str = 'image/png',
        content: bytes = PNG_BYTES,
    ) -> StagedUpload:
        return StagedUpload(
            original_name=original_name,
            content_type=content_type,
            size_bytes=len(content),
            content=content,
        )
    return factory


@pytest.fixture
def png_upload() -> SimpleUploadedFile:
    """Uploaded PNG file as Django receives it."""
    return SimpleUploadedFile('photo.png', PNG_BYTES, content_type='image/png')
