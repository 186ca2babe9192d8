"""URL routes for files app."""

from django.urls import path

from server.apps.files import views

app_name = 'files'

urlpatterns = [
    path('upload', views.upload_view, name='upload'),
    path(
        'download/<str:internal_name>',
        views.download_view,
        name='download',
    ),
    path('view/<str:internal_name>', views.preview_view, name='view'),
    path('<str:file_id>', views.delete_view, name='delete'),
]
