"""Tests for purge_orphaned_objects management command."""

from io import StringIO

import pytest
from django.core.management import call_command

from server.apps.accounts.logic.profile_operations import set_profile_image
from server.apps.files.logic.file_operations import upload_file

_BUCKET = 'file-vault'
_ORPHAN = '1700000000000_0123456789abcdef.png'


def _stored_keys(mock_s3):
    return {obj.key for obj in mock_s3.Bucket(_BUCKET).objects.all()}


@pytest.mark.django_db
def test_purge_deletes_unreferenced_objects(user, mock_s3, make_staged):
    """Test objects without a record are deleted."""
    file_instance = upload_file(user, make_staged())
    profile = set_profile_image(user, make_staged())
    mock_s3.Object(_BUCKET, _ORPHAN).put(Body=b'orphan')
    out = StringIO()

    call_command('purge_orphaned_objects', grace_hours=0, stdout=out)

    keys = _stored_keys(mock_s3)
    assert _ORPHAN not in keys
    assert file_instance.internal_name in keys
    assert profile.profile_image.rsplit('/', 1)[-1] in keys
    assert 'Purged 1 orphaned objects, 0 failed' in out.getvalue()


@pytest.mark.django_db
def test_purge_dry_run(user, mock_s3):
    """Test dry run reports without deleting."""
    mock_s3.Object(_BUCKET, _ORPHAN).put(Body=b'orphan')
    out = StringIO()

    call_command(
        'purge_orphaned_objects',
        grace_hours=0,
        dry_run=True,
        stdout=out,
    )

    assert _ORPHAN in _stored_keys(mock_s3)
    assert f'Would delete: {_ORPHAN}' in out.getvalue()
    assert 'Would purge 1 orphaned objects' in out.getvalue()


@pytest.mark.django_db
def test_purge_respects_grace_period(mock_s3):
    """Test recent objects are kept."""
    mock_s3.Object(_BUCKET, _ORPHAN).put(Body=b'orphan')
    out = StringIO()

    call_command('purge_orphaned_objects', grace_hours=24, stdout=out)

    assert _ORPHAN in _stored_keys(mock_s3)
    assert 'Purged 0 orphaned objects' in out.getvalue()


@pytest.mark.django_db
def test_purge_batch_size(mock_s3):
    """Test at most batch-size objects are deleted per run."""
    for index in range(3):
        mock_s3.Object(_BUCKET, f'orphan-{index}.png').put(Body=b'orphan')

    call_command(
        'purge_orphaned_objects',
        grace_hours=0,
        batch_size=2,
        stdout=StringIO(),
    )

    assert len(_stored_keys(mock_s3)) == 1
