"""Upload policy settings for the files app."""

from server.settings.components import config

# Upload ceiling in bytes (5 MiB for images by default)
FILES_UPLOAD_SIZE_LIMIT = config(
    'FILES_UPLOAD_SIZE_LIMIT',
    cast=int,
    default=5 * 1024 * 1024,
)

# Objects younger than this are never treated as orphans
FILES_ORPHAN_GRACE_HOURS = config(
    'FILES_ORPHAN_GRACE_HOURS',
    cast=int,
    default=24,
)
