"""Exceptions for files app.

Every error carries a machine-checkable ``category`` and the HTTP
``status_code`` the API layer responds with.
"""

from typing import ClassVar

_BYTES_IN_MIB = 1024 * 1024


class FileServiceError(Exception):
    """Base class for file lifecycle errors."""

    category: ClassVar[str] = 'error'
    status_code: ClassVar[int] = 500

    def __init__(self, message: str) -> None:
        """Initialize FileServiceError.

        Args:
            message: Human-readable description, safe to show to clients.
        """
        self.message = message
        super().__init__(message)


class InvalidUploadError(FileServiceError):
    """Raised when an upload is missing or fails the type policy."""

    category = 'validation_error'
    status_code = 400


class FileSizeLimitError(InvalidUploadError):
    """Raised when an upload exceeds the configured size ceiling."""

    def __init__(self, limit_bytes: int, size_bytes: int) -> None:
        """Initialize FileSizeLimitError.

        Args:
            limit_bytes: Maximum accepted size in bytes.
            size_bytes: Size of the rejected upload in bytes.
        """
        self.limit_bytes = limit_bytes
        self.size_bytes = size_bytes
        super().__init__(
            f'File size exceeds {limit_bytes / _BYTES_IN_MIB:g}MB',
        )


class FileRecordNotFoundError(FileServiceError):
    """Raised when no file record matches an internal name or ID."""

    category = 'not_found'
    status_code = 404


class ForbiddenError(FileServiceError):
    """Raised when a user tries to mutate a file they do not own."""

    category = 'forbidden'
    status_code = 403


class PreviewNotSupportedError(FileServiceError):
    """Raised when viewing a file whose type cannot be previewed."""

    category = 'unsupported_preview'
    status_code = 415


class StorageError(FileServiceError):
    """Raised when the object store rejects a put or delete."""

    category = 'storage_error'


class PersistenceError(FileServiceError):
    """Raised when a metadata write fails (constraint or database error)."""

    category = 'persistence_error'
