"""HTTP views for file upload, download, preview and deletion."""

import logging
from typing import Any, Final

from django.http import HttpRequest, HttpResponse, HttpResponseRedirect
from django.views.decorators.http import (
    require_GET,
    require_http_methods,
    require_POST,
)

from server.apps.files.exceptions import (
    FileRecordNotFoundError,
    FileServiceError,
)
from server.apps.files.http import (
    collect_uploads,
    error_response,
    json_login_required,
    success_response,
)
from server.apps.files.logic.file_operations import (
    delete_file,
    get_file_for_download,
    get_file_for_view,
    upload_file,
)
from server.apps.files.logic.upload_validation import validate_upload
from server.apps.files.models import File

# Largest primary key a BigAutoField can hold
_MAX_FILE_ID: Final = 2 ** 63 - 1

logger = logging.getLogger(__name__)


def serialize_file(file_instance: File) -> dict[str, Any]:
    """Convert a file record into its API representation."""
    return {
        'id': file_instance.id,
        'internal_name': file_instance.internal_name,
        'original_name': file_instance.get_display_name(),
        'mime_type': file_instance.mime_type,
        'size_bytes': file_instance.size_bytes,
        'uploaded_at': file_instance.uploaded_at.isoformat(),
        'location': file_instance.location,
    }


def parse_file_id(raw_id: str) -> int:
    """Convert a URL segment into a file ID.

    Raises:
        FileRecordNotFoundError: If the segment cannot name a file.
    """
    if not raw_id.isascii() or not raw_id.isdigit():
        raise FileRecordNotFoundError('File not found')
    file_id = int(raw_id)
    if file_id > _MAX_FILE_ID:
        raise FileRecordNotFoundError('File not found')
    return file_id


@require_POST
@json_login_required
def upload_view(request: HttpRequest) -> HttpResponse:
    """Validate a single uploaded file, store it and save its metadata."""
    try:
        staged = validate_upload(collect_uploads(request))
        file_instance = upload_file(request.user, staged)
    except FileServiceError as error:
        return error_response(error)

    logger.info(
        'File uploaded: %s (%d bytes) by user %s',
        file_instance.internal_name,
        file_instance.size_bytes,
        request.user.id,
    )
    return success_response(
        'File uploaded successfully',
        file=serialize_file(file_instance),
    )


@require_GET
@json_login_required
def download_view(request: HttpRequest, internal_name: str) -> HttpResponse:
    """Redirect to the stored object for download."""
    try:
        file_instance = get_file_for_download(internal_name)
    except FileServiceError as error:
        return error_response(error)

    response = HttpResponseRedirect(file_instance.location)
    response['Content-Disposition'] = file_instance.get_content_disposition()
    return response


@require_GET
@json_login_required
def preview_view(request: HttpRequest, internal_name: str) -> HttpResponse:
    """Redirect to the stored object for inline preview."""
    try:
        file_instance = get_file_for_view(internal_name)
    except FileServiceError as error:
        return error_response(error)

    response = HttpResponseRedirect(file_instance.location)
    response['Content-Disposition'] = file_instance.get_content_disposition(
        'inline',
    )
    return response


@require_http_methods(['DELETE'])
@json_login_required
def delete_view(request: HttpRequest, file_id: str) -> HttpResponse:
    """Delete a file owned by the requesting user."""
    try:
        delete_file(request.user, parse_file_id(file_id))
    except FileServiceError as error:
        return error_response(error)
    return success_response('File deleted')
