"""
Main URL mapping configuration file.

Include other URLConfs from external apps using method `include()`.
"""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    # Apps:
    path('files/', include('server.apps.files.urls', namespace='files')),
    path('users/', include('server.apps.accounts.urls', namespace='accounts')),

    # django-admin:
    path('admin/', admin.site.urls),
]
