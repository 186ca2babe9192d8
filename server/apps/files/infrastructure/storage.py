"""Custom storage backend for S3-compatible storage."""

import logging
from collections.abc import Iterator
from datetime import datetime
from typing import Protocol, final, override
from urllib.parse import unquote, urlsplit

from botocore.exceptions import BotoCoreError, ClientError
from storages.backends.s3 import S3Storage

from server.apps.files.exceptions import StorageError

logger = logging.getLogger(__name__)


class ObjectStore(Protocol):
    """Object store capability used by the file and profile services."""

    def put(
        self,
        content: bytes,
        content_type: str,
        key_hint: str,
        content_disposition: str | None = None,
    ) -> str:
        """Store bytes and return their public location."""

    def delete(self, name: str) -> None:
        """Delete an object by key; missing keys are not an error."""


def key_from_location(location: str) -> str:
    """Extract the object key from a stored location.

    Example: 'https://bucket.s3.amazonaws.com/1700_ab.png' -> '1700_ab.png'

    Args:
        location: URL returned by ObjectStore.put.

    Returns:
        Last path segment of the URL, percent-decoded.
    """
    path = urlsplit(location).path
    return unquote(path.rsplit('/', 1)[-1])


def rollback_upload(storage: ObjectStore, key: str) -> None:
    """Delete an uploaded object after its metadata write failed.

    This is a best-effort operation - if deletion fails, the error
    is logged but not raised, as the metadata write has already failed
    and that error is the one the caller needs to see.

    Args:
        storage: Store holding the object.
        key: Key of the object to delete.
    """
    try:
        logger.warning('Rolling back upload, deleting object: %s', key)
        storage.delete(key)
        logger.info('Successfully rolled back upload: %s', key)
    except StorageError:
        # The object stays in storage without metadata;
        # purge_orphaned_objects removes it later
        logger.exception('Failed to rollback upload, orphaned object: %s', key)


@final
class FileStorage(S3Storage):
    """Custom S3 storage backend for user files.

    Extends django-storages S3Storage with:
    - put() returning a durable public URL for a single PutObject
    - delete() reporting failures as StorageError
    - list_objects() for orphan cleanup
    """

    def put(
        self,
        content: bytes,
        content_type: str,
        key_hint: str,
        content_disposition: str | None = None,
    ) -> str:
        """Upload bytes under ``key_hint`` and return the object URL.

        Args:
            content: Object bytes.
            content_type: MIME type stored with the object.
            key_hint: Object key (an internal name, never user input).
            content_disposition: Optional Content-Disposition to store.

        Returns:
            Public URL of the stored object.

        Raises:
            StorageError: If the upload fails.
        """
        params = {
            'Body': content,
            'ContentType': content_type,
        }
        if content_disposition:
            params['ContentDisposition'] = content_disposition

        try:
            logger.info('Uploading object to storage: %s', key_hint)
            self.bucket.Object(key_hint).put(**params)
            location = self.url(key_hint)
        except (BotoCoreError, ClientError) as error:
            logger.exception('Failed to upload object to storage: %s', key_hint)
            raise StorageError('Failed to upload file to storage') from error

        logger.info('Successfully uploaded object: %s', key_hint)
        return location

    @override
    def delete(self, name: str) -> None:
        """Delete object from S3 with error handling and logging.

        S3 reports success for missing keys, so this is idempotent.

        Args:
            name: Key of the object to delete.

        Raises:
            StorageError: If S3 delete fails.
        """
        try:
            logger.info('Deleting object from storage: %s', name)
            super().delete(name)
        except (BotoCoreError, ClientError) as error:
            logger.exception('Failed to delete object from storage: %s', name)
            raise StorageError('Failed to delete file from storage') from error
        logger.info('Successfully deleted object: %s', name)

    def list_objects(self) -> Iterator[tuple[str, datetime]]:
        """Iterate over every object in the bucket.

        Yields:
            Tuples of (key, last_modified).

        Raises:
            StorageError: If the listing fails.
        """
        try:
            for summary in self.bucket.objects.all():
                yield summary.key, summary.last_modified
        except (BotoCoreError, ClientError) as error:
            logger.exception('Failed to list objects in storage')
            raise StorageError('Failed to list stored files') from error
