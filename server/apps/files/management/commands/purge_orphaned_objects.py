"""Management command to remove stored objects that have no metadata."""

import logging
from datetime import timedelta
from typing import Any, Final

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from server.apps.accounts.models import UserProfile
from server.apps.files.exceptions import StorageError
from server.apps.files.infrastructure.storage import key_from_location
from server.apps.files.logic.file_operations import get_storage
from server.apps.files.models import File

_DEFAULT_GRACE_HOURS: Final = 24
_DEFAULT_BATCH_SIZE: Final = 1000

logger = logging.getLogger(__name__)


def find_referenced_keys() -> set[str]:
    """Collect object keys referenced by file records or profiles.

    Returns:
        Set of keys that must be kept.
    """
    locations = list(File.objects.values_list('location', flat=True))
    locations.extend(
        UserProfile.objects.filter(
            profile_image__isnull=False,
        ).values_list('profile_image', flat=True),
    )
    return {key_from_location(location) for location in locations if location}


class Command(BaseCommand):
    """Delete stored objects left behind by partially failed operations."""

    help = 'Delete stored objects not referenced by any file or profile'

    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be deleted without deleting',
        )
        parser.add_argument(
            '--batch-size',
            type=int,
            default=_DEFAULT_BATCH_SIZE,
            help=f'Max objects to delete (default: {_DEFAULT_BATCH_SIZE})',
        )
        parser.add_argument(
            '--grace-hours',
            type=int,
            default=None,
            help='Skip objects younger than this (default: from settings)',
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the purge command.

        Args:
            args: Positional arguments (unused).
            options: Command options.
        """
        dry_run = options['dry_run']
        batch_size = options['batch_size']
        grace_hours = options['grace_hours']
        if grace_hours is None:
            grace_hours = getattr(
                settings,
                'FILES_ORPHAN_GRACE_HOURS',
                _DEFAULT_GRACE_HOURS,
            )

        # Objects written by in-flight uploads have no record yet
        cutoff = timezone.now() - timedelta(hours=grace_hours)
        storage = get_storage()
        referenced = find_referenced_keys()

        self.stdout.write(
            f'Looking for unreferenced objects stored before {cutoff}',
        )

        count = 0
        failed = 0
        try:
            for key, last_modified in storage.list_objects():
                if count + failed >= batch_size:
                    break
                if key in referenced or last_modified > cutoff:
                    continue

                if dry_run:
                    self.stdout.write(f'Would delete: {key}')
                    count += 1
                    continue

                try:
                    storage.delete(key)
                except StorageError as exc:
                    self.stderr.write(f'Failed to delete {key}: {exc}')
                    failed += 1
                else:
                    logger.info('Purged orphaned object: %s', key)
                    count += 1
        except StorageError as exc:
            raise CommandError(str(exc)) from exc

        if dry_run:
            self.stdout.write(
                self.style.SUCCESS(f'Would purge {count} orphaned objects'),
            )
        else:
            self.stdout.write(
                self.style.SUCCESS(
                    f'Purged {count} orphaned objects, {failed} failed',
                ),
            )
