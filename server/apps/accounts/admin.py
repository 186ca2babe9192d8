"""Django admin configuration for accounts app."""

from django.contrib import admin
from django.db.models import QuerySet
from django.http import HttpRequest

from server.apps.accounts.models import UserProfile


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin[UserProfile]):
    """Admin interface for UserProfile model."""

    list_display = [
        'user',
        'profile_image',
        'updated_at',
    ]

    search_fields = [
        'user__username',
        'user__email',
    ]

    readonly_fields = [
        'profile_image',
        'updated_at',
    ]

    def get_queryset(self, request: HttpRequest) -> QuerySet[UserProfile]:
        """Optimize queryset with select_related.

        Args:
            request: HTTP request.

        Returns:
            Optimized QuerySet.
        """
        return super().get_queryset(request).select_related('user')
