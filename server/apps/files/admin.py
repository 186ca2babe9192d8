"""Django admin configuration for files app."""


from django.contrib import admin
from django.db.models import QuerySet
from django.http import HttpRequest

from server.apps.files.models import File


@admin.register(File)
class FileAdmin(admin.ModelAdmin[File]):
    """Admin interface for File model.

    Records are read-only here: deleting them outside the file
    operations would leave their objects in storage.
    """

    list_display = [
        'internal_name',
        'original_name',
        'user',
        'size_display',
        'mime_type',
        'uploaded_at',
    ]

    list_filter = [
        'mime_type',
        'uploaded_at',
    ]

    search_fields = [
        'internal_name',
        'original_name',
        'user__username',
    ]

    readonly_fields = [
        'internal_name',
        'original_name',
        'user',
        'size_bytes',
        'mime_type',
        'location',
        'uploaded_at',
    ]

    fieldsets = (
        ('File Information', {
            'fields': ('internal_name', 'original_name', 'user'),
        }),
        ('Metadata', {
            'fields': (
                'size_bytes',
                'mime_type',
                'location',
            ),
        }),
        ('Timestamps', {
            'fields': ('uploaded_at',),
        }),
    )

    def size_display(self, obj: File) -> str:
        """Display file size in human-readable format.

        Args:
            obj: File instance.

        Returns:
            Formatted size string (e.g., '1.5 MB', '234 KB').
        """
        size_bytes = obj.size_bytes

        # Convert to appropriate unit
        if size_bytes < 1024:
            return f'{size_bytes} B'
        if size_bytes < 1024 * 1024:  # noqa: WPS531
            return f'{size_bytes / 1024:.1f} KB'
        return f'{size_bytes / (1024 * 1024):.1f} MB'
    size_display.short_description = 'Size'  # type: ignore[attr-defined]

    def has_add_permission(self, request: HttpRequest) -> bool:
        """Files are only created through uploads."""
        return False

    def has_delete_permission(
        self,
        request: HttpRequest,
        obj: File | None = None,
    ) -> bool:
        """Files are only deleted through the delete operation."""
        return False

    def get_queryset(self, request: HttpRequest) -> QuerySet[File]:
        """Optimize queryset with select_related.

        Args:
            request: HTTP request.

        Returns:
            Optimized QuerySet.
        """
        return super().get_queryset(request).select_related('user')
