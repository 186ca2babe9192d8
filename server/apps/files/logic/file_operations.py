"""Business logic for file operations."""

import logging
from typing import TYPE_CHECKING, Any

from django.core.files.storage import default_storage

from server.apps.files.exceptions import (
    FileRecordNotFoundError,
    ForbiddenError,
    PersistenceError,
    PreviewNotSupportedError,
)
from server.apps.files.infrastructure.filenames import (
    build_content_disposition,
    generate_internal_name,
    sanitize_original_name,
)
from server.apps.files.infrastructure.storage import (
    key_from_location,
    rollback_upload,
)
from server.apps.files.logic.record_operations import (
    create_record,
    delete_by_id,
    find_by_id,
    find_by_internal_name,
)
from server.apps.files.logic.upload_validation import StagedUpload
from server.apps.files.models import File

if TYPE_CHECKING:
    from server.apps.files.infrastructure.storage import ObjectStore

# User type for Django's dynamic user model
_User = Any

logger = logging.getLogger(__name__)


def get_storage() -> 'ObjectStore':
    """Get the configured default storage backend.

    Returns:
        FileStorage instance with proper S3 configuration.
    """
    return default_storage  # type: ignore[return-value]


def upload_file(
    user: _User,
    staged: StagedUpload,
    storage: 'ObjectStore | None' = None,
) -> File:
    """Upload file to storage and create database record.

    Transaction safety: Upload to storage first, then create DB record.
    If the DB write fails, the uploaded object is deleted from storage
    (best-effort rollback) and the error is re-raised.

    Args:
        user: Owner of the file.
        staged: Validated upload.
        storage: Object store, defaults to the configured storage.

    Returns:
        Created File instance.

    Raises:
        StorageError: If the upload to storage fails (nothing is saved).
        PersistenceError: If the record cannot be created.
    """
    storage = storage or get_storage()
    internal_name = generate_internal_name(staged.original_name)
    original_name = sanitize_original_name(staged.original_name)

    # Step 1: Upload to storage first, keyed by the internal name
    location = storage.put(
        staged.content,
        staged.content_type,
        internal_name,
        content_disposition=build_content_disposition(
            original_name,
            internal_name,
            'inline',
        ),
    )

    # Step 2: Create database record
    try:
        return create_record(
            user=user,
            internal_name=internal_name,
            original_name=original_name,
            mime_type=staged.content_type,
            size_bytes=staged.size_bytes,
            location=location,
        )
    except PersistenceError:
        # Rollback: Delete object from storage since DB write failed
        logger.exception(
            'Database write failed, rolling back storage upload: %s',
            internal_name,
        )
        rollback_upload(storage, key_from_location(location))
        raise


def get_file_for_download(internal_name: str) -> File:
    """Get file record for download.

    Args:
        internal_name: Internal name of the file.

    Returns:
        File instance.

    Raises:
        FileRecordNotFoundError: If no file has this internal name.
    """
    file_instance = find_by_internal_name(internal_name)
    if file_instance is None:
        logger.info('File not found: %s', internal_name)
        raise FileRecordNotFoundError('File not found')
    return file_instance


def get_file_for_view(internal_name: str) -> File:
    """Get file record for inline preview.

    Args:
        internal_name: Internal name of the file.

    Returns:
        File instance with a previewable MIME type.

    Raises:
        FileRecordNotFoundError: If no file has this internal name.
        PreviewNotSupportedError: If the MIME type cannot be previewed.
    """
    file_instance = get_file_for_download(internal_name)
    if not file_instance.is_previewable():
        raise PreviewNotSupportedError(
            'Preview is not supported for this file type',
        )
    return file_instance


def delete_file(
    user: _User,
    file_id: int,
    storage: 'ObjectStore | None' = None,
) -> None:
    """Delete file from storage and database.

    Transaction safety: Delete the stored object first, then the DB
    record. If the storage delete fails the record is kept, so the
    system never forgets a file that still exists in storage.

    Args:
        user: User requesting the deletion.
        file_id: ID of file to delete.
        storage: Object store, defaults to the configured storage.

    Raises:
        FileRecordNotFoundError: If file doesn't exist.
        ForbiddenError: If the user does not own the file.
        StorageError: If the object cannot be deleted.
        PersistenceError: If the record cannot be deleted.
    """
    file_instance = find_by_id(file_id)
    if file_instance is None:
        logger.info('File not found: ID=%d', file_id)
        raise FileRecordNotFoundError('File not found')

    if file_instance.user_id != user.id:
        logger.warning(
            'User %s attempted to delete file owned by another user: ID=%d',
            user.id,
            file_id,
        )
        raise ForbiddenError('You do not have permission to delete this file')

    _delete_stored_file(file_instance, storage or get_storage())


def delete_user_files(user: _User, storage: 'ObjectStore | None' = None) -> int:
    """Delete every file owned by a user, objects before records.

    Stops at the first failure, leaving the remaining files intact.

    Args:
        user: Owner of the files.
        storage: Object store, defaults to the configured storage.

    Returns:
        Number of files deleted.

    Raises:
        StorageError: If an object cannot be deleted.
        PersistenceError: If a record cannot be deleted.
    """
    storage = storage or get_storage()
    deleted_count = 0
    for file_instance in list(File.objects.filter(user=user)):
        _delete_stored_file(file_instance, storage)
        deleted_count += 1

    logger.info('Deleted %d files of user %s', deleted_count, user.id)
    return deleted_count


def _delete_stored_file(file_instance: File, storage: 'ObjectStore') -> None:
    storage_key = file_instance.get_storage_key()
    logger.info(
        'Deleting file: ID=%d, key=%s',
        file_instance.id,
        storage_key,
    )
    storage.delete(storage_key)
    delete_by_id(file_instance.id)
