"""Business logic for profile image and account operations."""

import logging
from typing import TYPE_CHECKING, Any

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from django.utils import timezone

from server.apps.accounts.models import UserProfile, profile_image_validator
from server.apps.files.exceptions import PersistenceError, StorageError
from server.apps.files.infrastructure.filenames import (
    build_content_disposition,
    generate_internal_name,
    sanitize_original_name,
)
from server.apps.files.infrastructure.storage import (
    key_from_location,
    rollback_upload,
)
from server.apps.files.logic.file_operations import (
    delete_user_files,
    get_storage,
)
from server.apps.files.logic.upload_validation import StagedUpload

if TYPE_CHECKING:
    from server.apps.files.infrastructure.storage import ObjectStore

# User type for Django's dynamic user model
_User = Any

# Field name constant to avoid string literal over-use
_PROFILE_IMAGE_FIELD = 'profile_image'  # noqa: WPS226

logger = logging.getLogger(__name__)


def get_or_create_profile(user: _User) -> UserProfile:
    """Get or create profile for user (on-demand creation).

    Args:
        user: User to get profile for.

    Returns:
        UserProfile instance for the user.
    """
    profile, created = UserProfile.objects.get_or_create(user=user)
    if created:
        logger.info('Created profile for user %s', user.username)
    return profile


def set_profile_image(
    user: _User,
    staged: StagedUpload,
    storage: 'ObjectStore | None' = None,
) -> UserProfile:
    """Replace the user's profile image.

    The previous image is deleted first on a best-effort basis: a
    failed delete is logged and does not block the replacement. Once
    the previous image is gone, any later failure clears the field so
    the profile never points at a deleted object.

    Args:
        user: Owner of the profile.
        staged: Validated image upload.
        storage: Object store, defaults to the configured storage.

    Returns:
        Updated UserProfile instance.

    Raises:
        StorageError: If the new image cannot be uploaded.
        PersistenceError: If the profile cannot be saved.
    """
    storage = storage or get_storage()
    profile = get_or_create_profile(user)

    old_image_deleted = False
    if profile.profile_image:
        old_key = key_from_location(profile.profile_image)
        try:
            storage.delete(old_key)
        except StorageError:
            logger.exception(
                'Failed to delete previous profile image (orphaned): %s',
                old_key,
            )
        else:
            old_image_deleted = True

    internal_name = generate_internal_name(staged.original_name)
    try:
        location = storage.put(
            staged.content,
            staged.content_type,
            internal_name,
            content_disposition=build_content_disposition(
                sanitize_original_name(staged.original_name),
                internal_name,
                'inline',
            ),
        )
    except StorageError:
        if old_image_deleted:
            _forget_deleted_image(profile)
        raise

    try:
        _save_profile_image(profile, location)
    except PersistenceError:
        rollback_upload(storage, key_from_location(location))
        if old_image_deleted:
            _forget_deleted_image(profile)
        raise

    logger.info('Profile image updated for user %s: %s', user.id, internal_name)
    return profile


def clear_profile_image(
    user: _User,
    storage: 'ObjectStore | None' = None,
) -> UserProfile:
    """Delete the user's profile image and clear the field.

    Args:
        user: Owner of the profile.
        storage: Object store, defaults to the configured storage.

    Returns:
        Updated UserProfile instance.

    Raises:
        StorageError: If the image cannot be deleted (field unchanged).
        PersistenceError: If the profile cannot be saved.
    """
    profile = get_or_create_profile(user)
    if not profile.profile_image:
        return profile

    storage = storage or get_storage()
    storage.delete(key_from_location(profile.profile_image))
    _save_profile_image(profile, None)
    logger.info('Profile image cleared for user %s', user.id)
    return profile


def delete_account(
    user: _User,
    storage: 'ObjectStore | None' = None,
) -> None:
    """Delete a user together with their stored objects.

    The profile image and every owned file are removed from storage
    before the user row; the profile and file records cascade. The
    image field is cleared as soon as its object is deleted, so a
    failure further on leaves a consistent profile behind.

    Args:
        user: User to delete.
        storage: Object store, defaults to the configured storage.

    Raises:
        StorageError: If a stored object cannot be deleted (user kept).
        PersistenceError: If a record cannot be deleted.
    """
    storage = storage or get_storage()
    user_id = user.id

    profile = UserProfile.objects.filter(user=user).first()
    if profile is not None and profile.profile_image:
        storage.delete(key_from_location(profile.profile_image))
        _save_profile_image(profile, None)

    delete_user_files(user, storage)

    try:
        with transaction.atomic():
            user.delete()
    except DatabaseError as error:
        logger.exception('Failed to delete user: %s', user_id)
        raise PersistenceError('Failed to delete account') from error

    logger.info('Account deleted: %s', user_id)


def _save_profile_image(profile: UserProfile, location: str | None) -> None:
    """Validate and store the profile image location.

    Args:
        profile: Profile to update.
        location: New image URL, or None to clear it.

    Raises:
        PersistenceError: If the URL is malformed or the save fails.
    """
    try:
        if location is not None:
            profile_image_validator(location)
        profile.profile_image = location
        profile.save(update_fields=[_PROFILE_IMAGE_FIELD, 'updated_at'])
    except (ValidationError, DatabaseError) as error:
        logger.exception('Failed to save profile image: %s', location)
        raise PersistenceError('Failed to save profile image') from error


def _forget_deleted_image(profile: UserProfile) -> None:
    """Clear an image field whose object is already deleted.

    Failures are logged, not raised: the caller re-raises the error
    that made the clearing necessary.

    Args:
        profile: Profile pointing at a deleted object.
    """
    try:
        UserProfile.objects.filter(pk=profile.pk).update(
            profile_image=None,
            updated_at=timezone.now(),
        )
    except DatabaseError:
        logger.exception(
            'Failed to clear deleted profile image of user %s',
            profile.pk,
        )
        return
    profile.profile_image = None
