"""Persistence operations for file metadata records."""

import logging
from typing import Any

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction

from server.apps.files.exceptions import PersistenceError
from server.apps.files.models import File

logger = logging.getLogger(__name__)


def create_record(**fields: Any) -> File:
    """Validate and insert a new file record.

    Args:
        fields: File model field values.

    Returns:
        Saved File instance.

    Raises:
        PersistenceError: If validation, a uniqueness constraint
            or the database write fails.
    """
    file_instance = File(**fields)
    try:
        file_instance.full_clean()
        with transaction.atomic():
            file_instance.save(force_insert=True)
    except (ValidationError, DatabaseError) as error:
        logger.exception(
            'Failed to create file record: %s',
            fields.get('internal_name'),
        )
        raise PersistenceError('Failed to save file metadata') from error

    logger.info(
        'File record created: %s (ID: %d)',
        file_instance.internal_name,
        file_instance.id,
    )
    return file_instance


def find_by_internal_name(internal_name: str) -> File | None:
    """Get file record by internal name (indexed lookup)."""
    return File.objects.filter(
        internal_name=internal_name,
    ).select_related('user').first()


def find_by_id(file_id: int) -> File | None:
    """Get file record by primary key."""
    return File.objects.filter(id=file_id).select_related('user').first()


def delete_by_id(file_id: int) -> bool:
    """Delete file record by primary key.

    Deleting a record that no longer exists is not an error.

    Args:
        file_id: ID of the record.

    Returns:
        True if a record was deleted, False if none existed.

    Raises:
        PersistenceError: If the database delete fails.
    """
    try:
        with transaction.atomic():
            deleted, _ = File.objects.filter(id=file_id).delete()
    except DatabaseError as error:
        logger.exception('Failed to delete file record: ID=%d', file_id)
        raise PersistenceError('Failed to delete file metadata') from error

    if deleted:
        logger.info('File record deleted from database: ID=%d', file_id)
    return bool(deleted)
