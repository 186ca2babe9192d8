"""HTTP views for profile image and account management."""

from django.contrib.auth import logout
from django.http import HttpRequest, HttpResponse
from django.views.decorators.http import require_http_methods

from server.apps.accounts.logic.profile_operations import (
    clear_profile_image,
    delete_account,
    set_profile_image,
)
from server.apps.files.exceptions import FileServiceError
from server.apps.files.http import (
    collect_uploads,
    error_response,
    json_login_required,
    success_response,
)
from server.apps.files.logic.upload_validation import validate_upload


@require_http_methods(['POST', 'DELETE'])
@json_login_required
def profile_image_view(request: HttpRequest) -> HttpResponse:
    """Upload (POST) or remove (DELETE) the current user's profile image."""
    try:
        if request.method == 'DELETE':
            clear_profile_image(request.user)
            return success_response('Profile image deleted')

        staged = validate_upload(collect_uploads(request))
        profile = set_profile_image(request.user, staged)
    except FileServiceError as error:
        return error_response(error)

    return success_response(
        'Profile image updated',
        profile_image=profile.profile_image,
    )


@require_http_methods(['DELETE'])
@json_login_required
def account_view(request: HttpRequest) -> HttpResponse:
    """Delete the current user's account and stored objects."""
    try:
        delete_account(request.user)
    except FileServiceError as error:
        return error_response(error)
    logout(request)
    return success_response('Account deleted')
