"""Filename utilities: internal names, sanitizing and header encoding."""

import logging
import re
import secrets
import time
import unicodedata
from pathlib import PurePosixPath
from typing import Final
from urllib.parse import quote

logger = logging.getLogger(__name__)

# 8 random bytes render as 16 hex characters
_RANDOM_BYTES: Final = 8

INTERNAL_NAME_PATTERN: Final = re.compile(r'^\d+_[0-9a-f]{16}\.[a-z0-9]*$')

_PATH_SEPARATORS: Final = re.compile(r'[/\\]')
_UNSAFE_EXTENSION_CHARS: Final = re.compile(r'[^a-z0-9]')
_NON_PRINTABLE_ASCII: Final = re.compile(r'[^\x20-\x7E]')

# encodeURIComponent-compatible: `'()*` are escaped, `!` is kept
_RFC5987_SAFE: Final = '!'


def get_file_extension(filename: str) -> str:
    """Get file extension from filename.

    Args:
        filename: Filename (e.g., 'Photo.JPG').

    Returns:
        Extension with its dot, lowercase (e.g., '.jpg').
        Returns empty string if no extension.
    """
    return PurePosixPath(filename or '').suffix.lower()


def generate_internal_name(original_name: str) -> str:
    """Generate a unique, filesystem-safe name for a stored file.

    The name is ``<epoch-ms>_<16 hex chars>.<extension>``. Only the
    extension is derived from user input, and it is reduced to
    ``[a-z0-9]``.

    Args:
        original_name: Name supplied by the uploader.

    Returns:
        Internal name matching INTERNAL_NAME_PATTERN.
    """
    extension = _UNSAFE_EXTENSION_CHARS.sub(
        '',
        get_file_extension(original_name),
    )
    timestamp = int(time.time() * 1000)
    random_part = secrets.token_hex(_RANDOM_BYTES)
    return f'{timestamp}_{random_part}.{extension}'


def normalize_name(name: str | None) -> str:
    """Return ``name`` in Unicode NFC form, or as-is if that fails."""
    if not name:
        return ''
    try:
        return unicodedata.normalize('NFC', name)
    except (TypeError, ValueError):
        logger.exception('Filename normalization failed')
        return name


def sanitize_original_name(name: str | None) -> str:
    """Strip path separators from a user-supplied name and normalize it.

    Args:
        name: Name supplied by the uploader.

    Returns:
        Name without ``/`` or ``\\``, NFC-normalized when possible.
    """
    if not name:
        return ''
    return normalize_name(_PATH_SEPARATORS.sub('', name))


def build_content_disposition(
    display_name: str,
    internal_name: str,
    disposition_type: str = 'attachment',
) -> str:
    """Build a Content-Disposition header value for a stored file.

    Produces both a legacy ``filename`` parameter (printable ASCII only)
    and an RFC 5987 ``filename*`` parameter carrying the full name.

    Args:
        display_name: User-facing filename.
        internal_name: System-generated name, used as a fallback.
        disposition_type: 'attachment' or 'inline'.

    Returns:
        Header value, e.g.
        ``attachment; filename="caf.png"; filename*=UTF-8''caf%C3%A9.png``.
    """
    try:
        if not display_name:
            raise ValueError('Empty display name')
        encoded_name = quote(
            display_name,
            safe=_RFC5987_SAFE,
            encoding='utf-8',
            errors='strict',
        )
    except (UnicodeEncodeError, ValueError):
        logger.warning(
            'Falling back to internal name for disposition: %s',
            internal_name,
        )
        legacy = internal_name
        extended = internal_name
    else:
        legacy = _NON_PRINTABLE_ASCII.sub('', display_name)
        extended = f"UTF-8''{encoded_name}"

    legacy = legacy.replace('\\', '\\\\').replace('"', '\\"')
    return f'{disposition_type}; filename="{legacy}"; filename*={extended}'
