"""URL routes for accounts app."""

from django.urls import path

from server.apps.accounts import views

app_name = 'accounts'

urlpatterns = [
    path('profile-image', views.profile_image_view, name='profile_image'),
    path('me', views.account_view, name='account'),
]
