"""Database models for files app."""

from typing import Final, final, override

from django.conf import settings
from django.core.validators import RegexValidator
from django.db import models

from server.apps.files.infrastructure.filenames import (
    INTERNAL_NAME_PATTERN,
    build_content_disposition,
    get_file_extension,
    normalize_name,
)
from server.apps.files.infrastructure.storage import key_from_location

# Constants for field max lengths
_INTERNAL_NAME_MAX_LENGTH: Final = 64
_ORIGINAL_NAME_MAX_LENGTH: Final = 255
_MIME_TYPE_MAX_LENGTH: Final = 255
_LOCATION_MAX_LENGTH: Final = 2048

PREVIEWABLE_TYPES: Final = frozenset((
    'image/jpeg',
    'image/png',
    'image/gif',
    'image/webp',
    'video/mp4',
    'video/webm',
    'audio/mpeg',
    'audio/wav',
    'application/pdf',
))

internal_name_validator = RegexValidator(
    regex=INTERNAL_NAME_PATTERN,
    message='Invalid internal file name format.',
)


def is_previewable(mime_type: str) -> bool:
    """Check whether files of this MIME type can be shown inline."""
    return mime_type in PREVIEWABLE_TYPES


@final
class File(models.Model):
    """Metadata record for a file stored in S3-compatible storage.

    The bytes live in the object store under ``internal_name``; this
    record is the single source of truth for whether the file exists
    and who owns it.
    """

    # Owner relationship
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='files',
        db_index=True,
    )

    internal_name = models.CharField(
        max_length=_INTERNAL_NAME_MAX_LENGTH,
        unique=True,
        validators=[internal_name_validator],
        help_text='System-generated name: {epoch_ms}_{16 hex}.{ext}',
    )

    original_name = models.CharField(
        max_length=_ORIGINAL_NAME_MAX_LENGTH,
        help_text='Sanitized, NFC-normalized name supplied by the uploader',
    )

    mime_type = models.CharField(
        max_length=_MIME_TYPE_MAX_LENGTH,
        help_text='MIME type reported at upload time',
    )

    size_bytes = models.BigIntegerField(
        help_text='File size in bytes',
    )

    location = models.URLField(
        max_length=_LOCATION_MAX_LENGTH,
        help_text='Public URL returned by the object store',
    )

    uploaded_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'File'  # type: ignore[mutable-override]
        verbose_name_plural = 'Files'  # type: ignore[mutable-override]
        ordering = ['-uploaded_at']

        indexes = [
            # Optimize recent files queries
            models.Index(
                fields=['user', '-uploaded_at'],
                name='files_user_recent_idx',
            ),
        ]

        constraints = [
            # Ownership checks look up files by internal name and owner
            models.UniqueConstraint(
                fields=['internal_name', 'user'],
                name='files_internal_name_user_unique',
            ),
            models.CheckConstraint(
                condition=models.Q(size_bytes__gte=0),
                name='files_size_bytes_non_negative',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.user.username}:{self.internal_name}'

    def get_display_name(self) -> str:
        """Get the user-facing filename, NFC-normalized.

        Returns:
            Original name, or the internal name if none was stored.
        """
        return normalize_name(self.original_name) or self.internal_name

    def get_extension(self) -> str:
        """Extract file extension from the internal name.

        Example: '1700000000000_0123456789abcdef.png' -> 'png'

        Returns:
            Extension without dot (lowercase).
        """
        return get_file_extension(self.internal_name).lstrip('.')

    def get_storage_key(self) -> str:
        """Get the object store key derived from the location.

        Returns:
            Key of the stored object.
        """
        return key_from_location(self.location)

    def is_previewable(self) -> bool:
        """Check if the file can be viewed inline."""
        return is_previewable(self.mime_type)

    def get_content_disposition(
        self,
        disposition_type: str = 'attachment',
    ) -> str:
        """Build Content-Disposition header value for this file.

        Args:
            disposition_type: 'attachment' or 'inline'.

        Returns:
            Header value with legacy and RFC 5987 filename parameters.
        """
        return build_content_disposition(
            self.get_display_name(),
            self.internal_name,
            disposition_type,
        )
