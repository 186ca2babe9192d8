"""Validation of incoming uploads before any storage I/O."""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Final

from django.conf import settings
from django.core.files.uploadedfile import UploadedFile

from server.apps.files.exceptions import FileSizeLimitError, InvalidUploadError
from server.apps.files.infrastructure.filenames import get_file_extension

logger = logging.getLogger(__name__)

# MIME type -> extensions accepted for it
ALLOWED_UPLOAD_TYPES: Final[Mapping[str, tuple[str, ...]]] = MappingProxyType({
    'image/jpeg': ('.jpg', '.jpeg'),
    'image/png': ('.png',),
    'image/gif': ('.gif',),
    'image/webp': ('.webp',),
})

_DEFAULT_SIZE_LIMIT: Final = 5 * 1024 * 1024  # 5 MiB


@dataclass(frozen=True, slots=True)
class StagedUpload:
    """Validated upload held fully in memory."""

    original_name: str
    content_type: str
    size_bytes: int
    content: bytes


def get_upload_size_limit() -> int:
    """Get maximum accepted upload size.

    Returns:
        Size limit in bytes from settings or default of 5 MiB.
    """
    return getattr(settings, 'FILES_UPLOAD_SIZE_LIMIT', _DEFAULT_SIZE_LIMIT)


def validate_upload(uploads: Sequence[UploadedFile]) -> StagedUpload:
    """Validate the files of a request and stage the single upload.

    Checks, in order: exactly one file, MIME type allow-listed,
    extension registered for that MIME type, size within the limit.

    Args:
        uploads: Every uploaded file found in the request.

    Returns:
        StagedUpload with the file content read into memory.

    Raises:
        InvalidUploadError: If the upload is missing or fails the policy.
        FileSizeLimitError: If the upload is larger than the limit.
    """
    if not uploads:
        raise InvalidUploadError('No file provided')
    if len(uploads) > 1:
        raise InvalidUploadError('Only one file can be uploaded at a time')

    upload = uploads[0]
    original_name = upload.name or ''
    content_type = upload.content_type or ''

    allowed_extensions = ALLOWED_UPLOAD_TYPES.get(content_type)
    if allowed_extensions is None:
        logger.warning('Rejected upload with MIME type: %s', content_type)
        raise InvalidUploadError(f'Invalid file type: {content_type}')

    extension = get_file_extension(original_name)
    if extension not in allowed_extensions:
        logger.warning(
            'Rejected upload: extension %r does not match %s',
            extension,
            content_type,
        )
        raise InvalidUploadError(
            f'File extension does not match file type: {content_type}',
        )

    limit = get_upload_size_limit()
    if upload.size > limit:
        logger.warning(
            'Rejected upload of %d bytes (limit: %d)',
            upload.size,
            limit,
        )
        raise FileSizeLimitError(limit_bytes=limit, size_bytes=upload.size)

    upload.seek(0)
    content = upload.read()
    return StagedUpload(
        original_name=original_name,
        content_type=content_type,
        size_bytes=len(content),
        content=content,
    )
