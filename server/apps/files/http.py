"""JSON response helpers shared by the API views."""

import functools
import logging
from collections.abc import Callable
from typing import Any

from django.http import HttpRequest, HttpResponse, JsonResponse

from server.apps.files.exceptions import FileServiceError

logger = logging.getLogger(__name__)

_View = Callable[..., HttpResponse]


def error_response(error: FileServiceError) -> JsonResponse:
    """Translate a service error into a JSON response.

    Args:
        error: Raised service error.

    Returns:
        Response with the error category, message and status code.
    """
    return JsonResponse(
        {
            'success': False,
            'error': error.category,
            'message': error.message,
        },
        status=error.status_code,
    )


def success_response(message: str, **payload: Any) -> JsonResponse:
    """Build a 200 JSON response with ``success: true``."""
    return JsonResponse({'success': True, 'message': message, **payload})


def json_login_required(view: _View) -> _View:
    """Reject anonymous requests with a 401 JSON response.

    Args:
        view: View function to protect.

    Returns:
        Wrapped view.
    """
    @functools.wraps(view)
    def wrapper(
        request: HttpRequest,
        *args: Any,
        **kwargs: Any,
    ) -> HttpResponse:
        if not request.user.is_authenticated:
            return JsonResponse(
                {
                    'success': False,
                    'error': 'unauthorized',
                    'message': 'Authentication required',
                },
                status=401,
            )
        return view(request, *args, **kwargs)
    return wrapper


def collect_uploads(request: HttpRequest) -> list[Any]:
    """Get every uploaded file of a request, across all form fields."""
    return [
        upload
        for _field, field_uploads in request.FILES.lists()
        for upload in field_uploads
    ]
